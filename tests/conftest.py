"""Shared fixtures: a trimmed copy of the lst2.asp page."""

from __future__ import annotations

import pytest

HEADER = (
    "Tarih      Saat      Enlem(N)  Boylam(E) Derinlik(km)  MD   ML   Mw    "
    "Yer                                             Çözüm Niteliği"
)
SEPARATOR = (
    "---------- --------  --------  -------   ----------    ------------    "
    "--------------                                  --------------"
)

LINE_BODRUM = (
    "2023.12.24 00:23:43  37.0703   27.6147        8.3      -.-  2.3  -.-   "
    "BODRUM KORFEZI (AKDENIZ)                          İlksel"
)
LINE_SINDIRGI = (
    "2023.12.24 00:11:02  39.2345   28.1783       11.7      -.-  1.8  -.-   "
    "ÇAMKÖY-SINDIRGI (BALIKESİR)                       REVIZE01 (2023.12.24 00:20:51)"
)
LINE_ADALAR = (
    "2023.12.23 23:58:10  40.8411   28.9950        -.-      -.-  3.4  -.-   "
    "MARMARA DENIZI-ADALAR (İSTANBUL)                  İlksel"
)
LINE_BAD_MAGNITUDE = (
    "2023.12.23 23:40:00  38.0000   38.0000        5.0      -.-  -.-  -.-   "
    "MALATYA                                           İlksel"
)

BULLETIN_TEXT = "\n".join(
    [
        "",
        "                    BOĞAZİÇİ ÜNİVERSİTESİ",
        "    KANDİLLİ RASATHANESİ ve DEPREM ARAŞTIRMA ENSTİTÜSÜ",
        "2023.12.25 01:00:00  36.0000   30.0000        5.0      -.-  4.0  -.-   BEFORE HEADER İlksel",
        "",
        HEADER,
        SEPARATOR,
        LINE_BODRUM,
        LINE_SINDIRGI,
        LINE_ADALAR,
        LINE_BAD_MAGNITUDE,
        "2023.12.23 23:30:00  38.0000",
        "short",
        "",
    ]
)

BULLETIN_PAGE = (
    "<HTML><HEAD><TITLE>Son Depremler</TITLE></HEAD>\n"
    "<BODY><p>Kandilli Rasathanesi</p>\n"
    f"<pre>{BULLETIN_TEXT}</pre>\n"
    "<pre>ignored second block</pre>\n"
    "</BODY></HTML>\n"
)


@pytest.fixture
def bulletin_text() -> str:
    return BULLETIN_TEXT


@pytest.fixture
def bulletin_bytes() -> bytes:
    return BULLETIN_PAGE.encode("windows-1254")


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
