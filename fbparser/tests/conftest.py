"""
Shared statement samples for the parser tests.
"""
import pytest


NL_STATEMENT = """JANSEN PIETER
Flying Blue-nummer: 1234567890
PLATINUM
11 dec 2025 • Pagina 1/2
Activiteitengeschiedenis 40000 Miles 183 XP 40 UXP
10 dec 2025 Hotel - BOOKING.COM WITH KLM 367 Miles 0 XP
BOOKING.COM WITH KLM 367 Miles 0 XP
op 21 nov 2025
10 dec 2025 Hotel - BOOKING.COM WITH KLM 934 Miles 0 XP
BOOKING.COM WITH KLM 934 Miles 0 XP
op 22 nov 2025
4 dec 2025 Hotel - ALL- Accor Live Limitless MILES+POINTS 600 Miles 0 XP
ALL- Accor Live Limitless MILES+POINTS 600 Miles 0 XP
op 3 dec 2025
30 nov 2025 RevPoints to Miles 518 Miles 0 XP
REVOLUT (REV10) 518 Miles 0 XP
op 30 nov 2025
30 nov 2025 Mijn reis naar Berlijn 1312 Miles 16 XP 16 UXP
AMS - BER KL1775 gespaarde Miles op basis van bestede euro's 276 Miles 5 XP 5 UXP
op 29 nov 2025
Sustainable Aviation Fuel 176 Miles 3 XP 3 UXP
op 29 nov 2025
Sustainable Aviation Fuel 176 Miles 3 XP 3 UXP
op 29 nov 2025
BER - AMS KL1780 gespaarde Miles op basis van bestede euro's 684 Miles 5 XP 5 UXP
op 30 nov 2025
29 nov 2025 Mijn reis naar Oslo 2980 Miles 30 XP
AMS - OSL SK0822 gespaarde Miles, op basis van reisafstand en boekingsklasse 1490 Miles 15 XP
op 28 nov 2025
OSL - AMS SK0827 gespaarde Miles, op basis van reisafstand en boekingsklasse 1490 Miles 15 XP
op 28 nov 2025
26 nov 2025 Miles overdragen - Flying Blue Family 1000 Miles 0 XP
Extra info: Miles van ANNA DE VRIES 1000 Miles 0 XP
op 26 nov 2025
25 nov 2025 Mijn reis naar Amsterdam 250 Miles 5 XP
KEF – AMS TRANSAVIA HOLLAND – gespaarde Miles op basis van Transavia-tarief 250 Miles 5 XP
op 24 nov 2025
17 nov 2025 Subscribe to Miles Complete EUR 17000 Miles 0 XP
Buy, Gift, Transfer, Subscribe to Miles 17000 Miles 0 XP
op 17 nov 2025
17 nov 2025 AMERICAN EXPRESS PLATINUM CARD 10811 Miles 0 XP
AMERICAN EXPRESS 10811 Miles 0 XP
op 15 nov 2025
8 okt 2025 Surplus XP beschikbaar op XP-teller 0 Miles 23 XP
Aantal behaalde XP in de vorige kwalificatieperiode eindigend op 07/10/2025 en meegenomen naar de nieuwe kwalificatieperiode beginnend op 08/10/2025 0 Miles 23 XP
op 8 okt 2025
8 okt 2025 Aftrek XP-teller 0 Miles -300 XP
Qualification period ended / Platinum reached 0 Miles -300 XP
op 8 okt 2025
"""

# The same statement as a text layer that puts dates, descriptions and
# amounts on separate lines.
NL_STATEMENT_FRAGMENTED = """JANSEN PIETER
Flying Blue-nummer: 1234567890
PLATINUM
11 dec 2025 • Pagina 1/2
Activiteitengeschiedenis 40000 Miles 183 XP 40 UXP
10 dec 2025
Hotel - BOOKING.COM WITH KLM
367 Miles
0 XP
BOOKING.COM WITH KLM
367 Miles
0 XP
op 21 nov 2025
10 dec 2025
Hotel - BOOKING.COM WITH KLM
934 Miles
0 XP
BOOKING.COM WITH KLM
934 Miles
0 XP
op 22 nov 2025
4 dec 2025
Hotel - ALL- Accor Live Limitless MILES+POINTS
600 Miles
0 XP
ALL- Accor Live Limitless MILES+POINTS
600 Miles
0 XP
op 3 dec 2025
30 nov 2025 RevPoints to Miles 518 Miles 0 XP
REVOLUT (REV10) 518 Miles 0 XP
op 30 nov 2025
30 nov 2025
Mijn reis naar Berlijn
1312 Miles
16 XP
16 UXP
AMS - BER KL1775
gespaarde Miles op basis van bestede euro's
276 Miles
5 XP
5 UXP
op 29 nov 2025
Sustainable Aviation Fuel
176 Miles
3 XP
3 UXP
op 29 nov 2025
Sustainable Aviation Fuel
176 Miles
3 XP
3 UXP
op 29 nov 2025
BER - AMS KL1780
gespaarde Miles op basis van bestede euro's
684 Miles
5 XP
5 UXP
op 30 nov 2025
JANSEN PIETER
Pagina 2/2
29 nov 2025
Mijn reis naar Oslo
2980 Miles
30 XP
AMS - OSL SK0822
gespaarde Miles, op basis van reisafstand en boekingsklasse
1490 Miles
15 XP
op 28 nov 2025
OSL - AMS SK0827
gespaarde Miles, op basis van reisafstand en boekingsklasse
1490 Miles
15 XP
op 28 nov 2025
26 nov 2025
Miles overdragen - Flying Blue Family
1000 Miles
0 XP
Extra info: Miles van ANNA DE VRIES
1000 Miles
0 XP
op 26 nov 2025
25 nov 2025
Mijn reis naar Amsterdam
250 Miles
5 XP
KEF – AMS TRANSAVIA HOLLAND – gespaarde Miles op basis van Transavia-tarief
250 Miles
5 XP
op 24 nov 2025
17 nov 2025
Subscribe to Miles Complete EUR
17000 Miles
0 XP
Buy, Gift, Transfer, Subscribe to Miles
17000 Miles
0 XP
op 17 nov 2025
17 nov 2025
AMERICAN EXPRESS PLATINUM
CARD
10811 Miles
0 XP
AMERICAN EXPRESS
10811 Miles
0 XP
op 15 nov 2025
8 okt 2025
Surplus XP beschikbaar op XP-
teller
0 Miles
23 XP
Aantal behaalde XP in de vorige kwalificatieperiode eindigend op 07/10/2025 en meegenomen naar de nieuwe kwalificatieperiode beginnend op 08/10/2025
0 Miles
23 XP
op 8 okt 2025
8 okt 2025
Aftrek XP-
teller
0 Miles
-300 XP
Qualification period ended / Platinum reached
0 Miles
-300 XP
op 8 okt 2025
"""

EN_STATEMENT = """PIETER JANSEN
Flying Blue number: 1234567890
GOLD
Dec 11, 2025 • Page 1/1
Activity history 10000 Miles 120 XP 20 UXP
Dec 10, 2025 My trip to Berlin 960 Miles 10 XP 10 UXP
AMS - BER KL1775 Miles earned based on euros spent 276 Miles 5 XP 5 UXP
on Nov 29, 2025
BER - AMS KL1780 Miles earned based on euros spent 684 Miles 5 XP 5 UXP
on Nov 30, 2025
Nov 18, 2025 -90000 Miles 0 XP
AMS - JFK KL0641 0 Miles 0 XP
on Dec 20, 2025
Nov 15, 2025 AMERICAN EXPRESS PLATINUM CARD Welcome bonus 30000 Miles 0 XP
AMERICAN EXPRESS 30000 Miles 0 XP
on Nov 15, 2025
"""

DE_STATEMENT = """SCHMIDT ANNA
Flying Blue-Nummer: 1234567890
SILVER
11. Dez. 2025 • Seite 1/1
Aktivitätsverlauf 5000 Meilen 40 XP 10 UXP
10. Dez. 2025 Meine Reise nach Berlin 960 Meilen 10 XP 10 UXP
AMS - BER KL1775 gesammelte Meilen auf Basis der ausgegebenen Euro 276 Meilen 5 XP 5 UXP
am 29. Nov. 2025
BER - AMS KL1780 gesammelte Meilen auf Basis der ausgegebenen Euro 684 Meilen 5 XP 5 UXP
am 30. Nov. 2025
"""


@pytest.fixture
def nl_statement():
    return NL_STATEMENT


@pytest.fixture
def nl_statement_fragmented():
    return NL_STATEMENT_FRAGMENTED


@pytest.fixture
def en_statement():
    return EN_STATEMENT


@pytest.fixture
def de_statement():
    return DE_STATEMENT
