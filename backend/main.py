"""
FastAPI backend service for statement text parsing.
"""
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import tempfile
import shutil
from pathlib import Path
import logging
from typing import Optional

from fbparser import __version__
from fbparser.core.lexicon import LANGUAGE_ORDER, MONTH_NAMES
from fbparser.core.loader import TEXT_SUFFIXES, load_text
from fbparser.core.runner import parse_text
from fbparser.core.validator import validate_input
from fbparser.models.schema import ErrorCode, ParseResult, ParserOptions

app = FastAPI(title="Flying Blue Statement Parser", version=__version__)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.PARSE_ERROR: 400,
}


class ParseRequest(BaseModel):
    text: str
    options: Optional[ParserOptions] = None


class ValidateRequest(BaseModel):
    text: str


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Flying Blue Statement Parser API", "status": "healthy"}


@app.post("/parse")
async def parse_statement_text(request: ParseRequest):
    """
    Parse statement text and return structured data.

    Args:
        request: Statement text and optional parser options

    Returns:
        Parsed statement data as JSON, with any warnings
    """
    logger.info(f"Processing statement text ({len(request.text)} characters)")
    return _parse_response(parse_text(request.text, request.options))


@app.post("/parse-file")
async def parse_statement_file(file: UploadFile = File(...), strict: bool = False):
    """
    Parse an uploaded .pdf or .txt statement.

    Args:
        file: Uploaded statement file
        strict: Fail on unparseable posting dates

    Returns:
        Parsed statement data as JSON, with any warnings
    """
    suffix = Path(file.filename or '').suffix.lower()
    if suffix != '.pdf' and suffix not in TEXT_SUFFIXES:
        raise HTTPException(status_code=400, detail="File must be a PDF or a text file")

    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
        shutil.copyfileobj(file.file, tmp_file)
        tmp_path = Path(tmp_file.name)

    try:
        logger.info(f"Processing statement file: {file.filename}")
        text = load_text(tmp_path)
    except Exception as e:
        logger.error(f"Error reading statement file {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Could not read statement file: {e}")
    finally:
        tmp_path.unlink(missing_ok=True)

    return _parse_response(parse_text(text, ParserOptions(strict=strict)))


def _parse_response(result: ParseResult) -> JSONResponse:
    if not result.success:
        logger.warning(f"Parse failed: {result.error.message}")
        raise HTTPException(
            status_code=ERROR_STATUS_CODES[result.error.code],
            detail=result.error.model_dump(mode="json", by_alias=True),
        )

    data = result.data
    logger.info(f"Successfully parsed statement: {len(data.flights)} flights, "
                f"{len(data.activity_transactions)} activities")

    return JSONResponse(content={
        **result.model_dump(mode="json", by_alias=True),
        "summary": {
            "language": data.metadata.language.value,
            "flights_count": len(data.flights),
            "activities_count": len(data.activity_transactions),
            "status_events_count": len(data.status_events),
            "miles_balance": data.pdf_header.miles,
        }
    })


@app.post("/validate")
async def validate_statement_text(request: ValidateRequest):
    """Check pasted text before parsing it."""
    result = validate_input(request.text)
    return JSONResponse(content=result.model_dump(mode="json", by_alias=True))


@app.get("/languages")
async def list_languages():
    """List the supported statement languages."""
    return JSONResponse(content={
        "success": True,
        "languages": [
            {"code": lang.value, "months": list(MONTH_NAMES[lang])}
            for lang in LANGUAGE_ORDER
        ]
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
