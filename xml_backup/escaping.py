"""
XML attribute escaping in the style of the SMS Backup & Restore app.

The five reserved characters become named entities. Every code point outside
U+0020..U+D7FF then becomes a decimal character reference. That band is narrower
than what XML allows, but it is what the backup app itself emits.
"""
import re
from typing import Optional

# Order matters: "&" must be replaced before the substitutions that introduce it.
XML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

UNSAFE_CHARACTERS = re.compile("[^\u0020-\ud7ff]")


def _character_reference(match: re.Match) -> str:
    return "".join(f"&#{ord(ch)};" for ch in match.group(0))


def escape_xml(text: Optional[str]) -> Optional[str]:
    """
    Escape text for use inside a double-quoted XML attribute.

    Args:
        text: Raw text, or None

    Returns:
        The escaped text. None and "" are returned unchanged.

    Example:
        >>> escape_xml('Tom & "Jerry"')
        'Tom &amp; &quot;Jerry&quot;'
        >>> escape_xml("line one\\nline two")
        'line one&#10;line two'
    """
    if not text:
        return text

    for raw, entity in XML_ENTITIES:
        text = text.replace(raw, entity)

    return UNSAFE_CHARACTERS.sub(_character_reference, text)
