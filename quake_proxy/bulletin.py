"""Decoding and extraction helpers for the Kandilli bulletin page."""

from __future__ import annotations

import codecs
import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Kandilli serves lst2.asp in the Windows Turkish code page, not UTF-8.
BULLETIN_ENCODING = "windows-1254"


class BulletinDecodeError(RuntimeError):
    """Raised when the bulletin bytes cannot be decoded with the configured charset."""


def decode_bulletin(raw: bytes, encoding: str = BULLETIN_ENCODING) -> str:
    """Decode raw bulletin bytes into text.

    The few byte values cp1254 leaves unassigned become U+FFFD so that any
    payload decodes; only an unknown codec name is an error.
    """

    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise BulletinDecodeError(f"Unknown bulletin encoding: {encoding}") from exc

    if not raw:
        return ""
    return raw.decode(encoding, errors="replace")


def extract_preformatted_text(html: str) -> str:
    """Return the text of the first ``<pre>`` block in *html*, or an empty string."""

    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    block = soup.find("pre")
    if block is None:
        logger.warning("Bulletin page has no <pre> block")
        return ""
    return block.get_text()
