"""
Writer for SMS Backup & Restore XML files.

The output has to match what the backup app itself produces, so elements are
assembled from string fragments in a fixed attribute order rather than through an
XML serializer. Attribute values of None are written as the literal "null".
"""
import base64
import logging
from functools import partial
from typing import List, Optional

from . import mms_templates
from .attachment_store import AttachmentStore, parse_part_uri
from .backup_item import (
    ADDRESS, BODY, DATE, LOCKED, PROTOCOL, READ, SC_TOA, SERVICE_CENTER, STATUS,
    SUBJECT, TOA, TYPE, MmsAttachment, MmsRecord, SmsItem,
)
from .errors import AttachmentTooLargeError, XmlBackupError
from .escaping import escape_xml

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes" ?>'
CREATED_BY = "<!-- File Created By {created_by} -->"
OPEN_TAG_SMSES = '<smses count="{count}">'
CLOSE_TAG_SMSES = "</smses>"
OPEN_TAG_SMS = " <sms "
CLOSE_EMPTYTAG = "/>"
NEWLINE = "\n"
NULL = "null"

DEFAULT_CREATED_BY = "Signal"

# Attachment limit of older exports that read each part in a single call
LEGACY_ATTACHMENT_BUFFER_SIZE = 1_000_000
ATTACHMENT_READ_CHUNK_SIZE = 64 * 1024


def append_attribute(parts: List[str], name: str, value) -> None:
    """Append ``name="value" `` to parts; None becomes "null"."""
    parts.append(f'{name}="{NULL if value is None else value}" ')


class XmlBackupWriter:
    """
    Write SMS and MMS records to a new backup file.

    The header and the opening <smses> tag are written on construction. close()
    must be called exactly once after the last record; without it the file has
    no closing tag. Used as a context manager, close() runs only when the block
    exits without an exception.

    Args:
        path: Destination file, truncated if it exists
        count: Number of records the caller intends to write (not checked)
        created_by: Application name written in the header comment
        attachment_store: Source of MMS attachment bytes
        attachment_buffer_size: If set, attachments of this many bytes or more
            raise AttachmentTooLargeError; if None, attachments of any size are
            written
    """

    def __init__(self, path: str, count: int, *, created_by: str = DEFAULT_CREATED_BY,
                 attachment_store: Optional[AttachmentStore] = None,
                 attachment_buffer_size: Optional[int] = None):
        self.path = path
        self.count = count
        self.attachment_store = attachment_store
        self.attachment_buffer_size = attachment_buffer_size
        self.records_written = 0
        self._closed = False

        self._file = open(path, "w", encoding="utf-8", newline="")
        try:
            self._file.write(XML_HEADER)
            self._file.write(NEWLINE)
            self._file.write(CREATED_BY.format(created_by=created_by))
            self._file.write(NEWLINE)
            self._file.write(OPEN_TAG_SMSES.format(count=count))
        except Exception:
            self._file.close()
            raise

    def write_item(self, item: SmsItem) -> None:
        """Write one <sms/> element on its own line."""
        parts = [OPEN_TAG_SMS]
        append_attribute(parts, PROTOCOL, item.protocol)
        append_attribute(parts, ADDRESS, escape_xml(item.address))
        append_attribute(parts, DATE, item.date)
        append_attribute(parts, TYPE, item.type)
        append_attribute(parts, SUBJECT, escape_xml(item.subject))
        append_attribute(parts, BODY, escape_xml(item.body))
        append_attribute(parts, TOA, NULL)
        append_attribute(parts, SC_TOA, NULL)
        # The backup app does not escape the service center either
        append_attribute(parts, SERVICE_CENTER, item.service_center)
        append_attribute(parts, READ, item.read)
        append_attribute(parts, STATUS, item.status)
        append_attribute(parts, LOCKED, 0)
        parts.append(CLOSE_EMPTYTAG)

        self._write_record("".join(parts))

    def write_mms(self, record: MmsRecord) -> None:
        """
        Write one <mms> element with its text, SMIL and attachment parts.

        Attachment bytes are read from the attachment store before anything is
        written, so a failure leaves no partial element in the file.

        Raises:
            AttachmentTooLargeError: If an attachment reaches attachment_buffer_size
            XmlBackupError: If the record has attachments but no store is configured
            ValueError: If an attachment URI is not a part URI
        """
        parts = [mms_templates.MMS_OPEN, mms_templates.MMS_ATTRIBUTES_BEFORE_DATE]
        append_attribute(parts, DATE, record.date_sent)
        parts.append(mms_templates.MMS_ATTRIBUTES_BEFORE_READ)
        append_attribute(parts, READ, mms_templates.MMS_READ)
        parts.append(mms_templates.MMS_ATTRIBUTES_BEFORE_ADDRESS)
        append_attribute(parts, ADDRESS, escape_xml(record.address))
        parts.append(mms_templates.MMS_ATTRIBUTES_AFTER_ADDRESS)
        parts.append(mms_templates.MMS_OPEN_END)

        parts.append(mms_templates.TEXT_PART_OPEN)
        append_attribute(parts, "text", escape_xml(record.display_body))
        parts.append(mms_templates.PART_CLOSE)

        parts.append(mms_templates.SMIL_PART)

        for attachment in record.attachments:
            parts.append(mms_templates.ATTACHMENT_PART_OPEN)
            append_attribute(parts, "ct", attachment.content_type)
            parts.append(mms_templates.ATTACHMENT_PART_ATTRIBUTES)
            append_attribute(parts, "data", self._encode_attachment(attachment))
            parts.append(mms_templates.PART_CLOSE)

        parts.append(mms_templates.MMS_CLOSE)

        self._write_record("".join(parts))

    def _encode_attachment(self, attachment: MmsAttachment) -> str:
        if self.attachment_store is None:
            raise XmlBackupError("Cannot export MMS attachments without an attachment store")

        attachment_id = parse_part_uri(attachment.data_uri)
        data = bytearray()

        with self.attachment_store.open_attachment(attachment_id) as stream:
            for chunk in iter(partial(stream.read, ATTACHMENT_READ_CHUNK_SIZE), b""):
                data.extend(chunk)
                if (self.attachment_buffer_size is not None
                        and len(data) >= self.attachment_buffer_size):
                    raise AttachmentTooLargeError(
                        f"Attachment {attachment.data_uri} does not fit in "
                        f"{self.attachment_buffer_size} bytes"
                    )

        logger.debug(f"Encoding {attachment.content_type} attachment of {len(data)} bytes")
        return base64.b64encode(bytes(data)).decode("ascii")

    def _write_record(self, element: str) -> None:
        if self._closed:
            raise XmlBackupError(f"Backup writer for {self.path} is already closed")

        self._file.write(NEWLINE)
        self._file.write(element)
        self.records_written += 1

    def close(self) -> None:
        """Write the closing </smses> tag and close the file."""
        if self._closed:
            raise XmlBackupError(f"Backup writer for {self.path} is already closed")

        self._closed = True
        try:
            self._file.write(NEWLINE)
            self._file.write(CLOSE_TAG_SMSES)
        finally:
            self._file.close()

        logger.info(
            f"Backup written to {self.path}: {self.records_written} records "
            f"({self.count} declared)"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            self.close()
        elif not self._closed:
            self._closed = True
            self._file.close()
