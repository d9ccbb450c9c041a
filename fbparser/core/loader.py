"""
Statement text loading from plain-text files or PDF text layers using pdfplumber.
"""
import pdfplumber
from pathlib import Path
from typing import List
import logging

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {'.txt', '.text'}


class StatementLoader:
    """Loads statement text the way a user would copy it out of the PDF."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._text = None

    def load(self) -> str:
        """
        Load the statement text.

        Returns:
            Statement text, pages joined by newlines

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file type is not supported
        """
        if self._text is not None:
            return self._text

        if not self.path.exists():
            raise FileNotFoundError(f"Statement file not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix == '.pdf':
            self._text = self._load_pdf()
        elif suffix in TEXT_SUFFIXES:
            self._text = self.path.read_text(encoding='utf-8', errors='replace')
        else:
            raise ValueError(f"Unsupported statement file type: {suffix or self.path.name}")

        logger.info(f"Loaded {len(self._text)} characters from {self.path.name}")
        return self._text

    def _load_pdf(self) -> str:
        pages: List[str] = []
        with pdfplumber.open(self.path) as pdf:
            logger.info(f"Loaded PDF with {len(pdf.pages)} pages")
            for i, page in enumerate(pdf.pages, 1):
                text = page.extract_text() or ''
                if not text.strip():
                    logger.warning(f"Page {i} has no text layer")
                pages.append(text)
        return '\n'.join(pages)


def load_text(path: Path) -> str:
    """Convenience function to load statement text from a file."""
    return StatementLoader(path).load()
