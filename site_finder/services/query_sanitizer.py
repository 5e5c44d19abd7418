"""Normalization of company names and addresses into search-query fragments."""

import re
import unicodedata

FULL_WIDTH_OFFSET = 0xFEE0

# Full-width Ａ-Ｚ, ａ-ｚ, ０-９ mapped to their ASCII counterparts
_FULL_WIDTH_ALNUM_TABLE: dict[int, int] = {
    code: code - FULL_WIDTH_OFFSET
    for start, end in (("Ａ", "Ｚ"), ("ａ", "ｚ"), ("０", "９"))
    for code in range(ord(start), ord(end) + 1)
}
_FULL_WIDTH_ALNUM_TABLE[0x3000] = ord(" ")

QUOTE_CHARS_RE = re.compile(r"[\"'“”‘’「」『』【】]")
CHOME_RE = re.compile(r"([0-9]+)丁目")
BANCHI_RE = re.compile(r"([0-9]+)番地?")
GOU_RE = re.compile(r"([0-9]+)号")
WHITESPACE_RE = re.compile(r"\s+")
SPACED_HYPHEN_RE = re.compile(r"\s*-\s*")
REPEATED_HYPHEN_RE = re.compile(r"-+")


def sanitize_company_name_for_query(name: str) -> str:
    """Convert full-width spaces and alphanumerics in a company name to ASCII.

    Other characters (kana, kanji, punctuation) are left untouched.
    """
    return name.translate(_FULL_WIDTH_ALNUM_TABLE)


def sanitize_address_for_query(address: str) -> str:
    """Normalize a Japanese postal address for use in a search query.

    Block numbers written as ``1丁目17番13号`` become ``1-17-13`` and
    quoting characters are removed.

    Args:
        address: Raw address label.

    Returns:
        Normalized address fragment, possibly empty.
    """
    text = unicodedata.normalize("NFKC", address)
    text = QUOTE_CHARS_RE.sub(" ", text)
    text = CHOME_RE.sub(r"\1-", text)
    text = BANCHI_RE.sub(r"\1-", text)
    text = GOU_RE.sub(r"\1-", text)
    text = WHITESPACE_RE.sub(" ", text)
    text = SPACED_HYPHEN_RE.sub("-", text)
    text = REPEATED_HYPHEN_RE.sub("-", text)
    text = text.strip()
    if text.endswith("-"):
        text = text[:-1]
    return text.strip()
