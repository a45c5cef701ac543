"""
Streaming reader for SMS Backup & Restore XML files.

Only <sms> elements are turned into records. <mms> elements and everything else
in the file are stepped over. The file is never loaded whole: lxml.etree.iterparse
pulls it through the tokenizer and processed elements are cleared as it goes.
"""
import logging
import re
from typing import Callable, Dict, Iterator, Optional, Tuple

import lxml.etree

from .backup_item import (
    ADDRESS, BODY, DATE, PROTOCOL, READ, SERVICE_CENTER, STATUS, SUBJECT, TYPE,
    SmsItem,
)
from .character_filter import CharacterReferenceFilter, restore_characters
from .errors import BackupFormatError, BackupParseError

logger = logging.getLogger(__name__)

SMS_TAG = "sms"

INT32_RANGE = (-2 ** 31, 2 ** 31 - 1)
INT64_RANGE = (-2 ** 63, 2 ** 63 - 1)

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_integer(name: str, value: str, bounds: Tuple[int, int] = INT32_RANGE) -> int:
    """
    Parse a numeric attribute value.

    Only an optional sign followed by ASCII digits is accepted; whitespace,
    underscores and other forms int() would tolerate are rejected.

    Args:
        name: Attribute name, used in the error message
        value: Attribute text
        bounds: Inclusive (min, max) range the value must fall in

    Raises:
        BackupFormatError: If the value is not an integer within bounds
    """
    if not INTEGER_PATTERN.fullmatch(value):
        raise BackupFormatError(f"Attribute {name!r} is not an integer: {value!r}")

    number = int(value)
    if not bounds[0] <= number <= bounds[1]:
        raise BackupFormatError(f"Attribute {name!r} is out of range: {value!r}")

    return number


def _parse_long(name: str, value: str) -> int:
    return parse_integer(name, value, INT64_RANGE)


def _copy_text(name: str, value: str) -> str:
    return restore_characters(value)


# Attribute name -> (SmsItem field, converter)
SMS_ATTRIBUTES: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    PROTOCOL: ("protocol", parse_integer),
    ADDRESS: ("address", _copy_text),
    DATE: ("date", _parse_long),
    TYPE: ("type", parse_integer),
    SUBJECT: ("subject", _copy_text),
    BODY: ("body", _copy_text),
    SERVICE_CENTER: ("service_center", _copy_text),
    READ: ("read", parse_integer),
    STATUS: ("status", parse_integer),
}


def item_from_attributes(attributes) -> SmsItem:
    """
    Build an SmsItem from the (name, value) pairs of one <sms> element.

    Unknown attribute names are ignored.
    """
    item = SmsItem()

    for attribute_name, value in attributes:
        known = SMS_ATTRIBUTES.get(attribute_name)
        if known is None:
            continue
        field_name, convert = known
        setattr(item, field_name, convert(attribute_name, value))

    return item


class XmlBackupReader:
    """
    Pull SmsItem records out of a backup file one at a time.

    Usage:
        with XmlBackupReader("sms-20240101.xml") as reader:
            for item in reader:
                ...

    Any error is final: once get_next() raises, the reader must be abandoned.
    """

    def __init__(self, path: str):
        self.path = path
        self._stream = open(path, "rb")
        # Control characters arrive as references libxml2 refuses, e.g. &#27;
        self._source = CharacterReferenceFilter(self._stream)
        # huge_tree: MMS attachments can make single attributes very large
        self._events = lxml.etree.iterparse(
            self._source,
            events=("start", "end"),
            huge_tree=True,
        )
        self._exhausted = False
        self.items_read = 0

    def get_next(self) -> Optional[SmsItem]:
        """
        Return the next <sms> record, or None once the document has ended.

        Raises:
            BackupFormatError: If a numeric attribute is malformed
            BackupParseError: If the XML itself is malformed
        """
        if self._exhausted:
            return None

        try:
            for event, elem in self._events:
                if event == "end":
                    self._release(elem)
                    continue

                if not isinstance(elem.tag, str) or elem.tag.lower() != SMS_TAG:
                    continue

                if not len(elem.attrib):
                    logger.debug(f"Skipping <{elem.tag}> without attributes in {self.path}")
                    continue

                item = item_from_attributes(elem.items())
                self.items_read += 1
                return item

        except lxml.etree.XMLSyntaxError as e:
            logger.error(f"XML parse error in {self.path}: {e}")
            raise BackupParseError(f"XML parse error in {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            logger.error(f"Invalid UTF-8 in {self.path}: {e}")
            raise BackupParseError(f"Invalid UTF-8 in {self.path}: {e}") from e
        except BackupFormatError as e:
            logger.error(f"Malformed <sms> record in {self.path}: {e}")
            raise

        self._exhausted = True
        logger.info(f"Read {self.items_read} SMS items from {self.path}")
        return None

    @staticmethod
    def _release(elem) -> None:
        # Free memory by clearing processed element
        elem.clear()
        parent = elem.getparent()
        if parent is not None:
            parent.remove(elem)

    def __iter__(self) -> Iterator[SmsItem]:
        while True:
            item = self.get_next()
            if item is None:
                return
            yield item

    def close(self) -> None:
        self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
