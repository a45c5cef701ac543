"""
Input filter that lets lxml read character references XML 1.0 forbids.

The backup app writes every code point below U+0020 as a decimal reference, so a
message containing ESC or NUL comes out as ``&#27;`` or ``&#0;``. libxml2 rejects
those references. CharacterReferenceFilter rewrites each of them, before the
tokenizer sees it, into the SENTINEL character followed by the code point in hex
and a semicolon. restore_characters() turns that form back into the original
character once the attribute value has been parsed.

Occurrences of SENTINEL itself in the input, raw or referenced, are rewritten the
same way so restoring never misreads real text.
"""
import io
import re
from typing import BinaryIO

# A noncharacter: legal in XML, never meant to appear in interchange text
SENTINEL = "\ufdd0"

# References longer than this are left to the tokenizer
MAX_REFERENCE_LENGTH = 32

REFERENCE_PATTERN = re.compile(r"&#(?:x([0-9A-Fa-f]+)|([0-9]+));|" + SENTINEL)
RESTORE_PATTERN = re.compile(SENTINEL + r"([0-9a-f]+);")


def is_xml_char(code_point: int) -> bool:
    """Return True if code_point may appear in an XML 1.0 document."""
    return (code_point in (0x9, 0xA, 0xD)
            or 0x20 <= code_point <= 0xD7FF
            or 0xE000 <= code_point <= 0xFFFD
            or 0x10000 <= code_point <= 0x10FFFF)


def _protect(match: re.Match) -> str:
    hex_digits, decimal_digits = match.groups()

    if hex_digits is None and decimal_digits is None:
        code_point = ord(SENTINEL)
    elif hex_digits is not None:
        code_point = int(hex_digits, 16)
    else:
        code_point = int(decimal_digits)

    # Out of Unicode range: leave it for the tokenizer to reject
    if code_point > 0x10FFFF:
        return match.group(0)

    if is_xml_char(code_point) and chr(code_point) != SENTINEL:
        return match.group(0)

    return f"{SENTINEL}{code_point:x};"


def protect_references(text: str) -> str:
    return REFERENCE_PATTERN.sub(_protect, text)


def restore_characters(text: str) -> str:
    """Undo protect_references() on a parsed attribute value."""
    if SENTINEL not in text:
        return text
    return RESTORE_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), text)


class CharacterReferenceFilter:
    """
    Readable UTF-8 byte stream that applies protect_references() to its source.

    The source is decoded as UTF-8 (a leading BOM is dropped) and re-encoded as
    UTF-8, so the filter only supports UTF-8 backups. Invalid UTF-8 raises
    UnicodeDecodeError from read().
    """

    def __init__(self, source: BinaryIO):
        self._text = io.TextIOWrapper(source, encoding="utf-8-sig", errors="strict", newline="")
        self._pending = ""
        self._eof = False

    def read(self, size: int = -1) -> bytes:
        """Return filtered bytes; b"" only once the source is exhausted."""
        if size is None or size <= 0:
            size = -1

        while True:
            if not self._eof:
                chunk = self._text.read(size)
                if chunk:
                    self._pending += chunk
                else:
                    self._eof = True

            if self._eof:
                ready, self._pending = self._pending, ""
                return protect_references(ready).encode("utf-8")

            # Hold back a possibly incomplete reference at the end of the buffer
            window_start = max(0, len(self._pending) - MAX_REFERENCE_LENGTH)
            cut = self._pending.rfind("&", window_start)
            if cut == -1:
                cut = len(self._pending)
            if cut > 0:
                ready, self._pending = self._pending[:cut], self._pending[cut:]
                return protect_references(ready).encode("utf-8")

    def close(self) -> None:
        self._text.close()
