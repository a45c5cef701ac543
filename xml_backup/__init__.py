"""
Reader and writer for SMS Backup & Restore XML backup files.
"""
from .attachment_store import (
    AttachmentId, AttachmentStore, DirectoryAttachmentStore, HttpAttachmentStore,
    parse_part_uri,
)
from .backup_item import MmsAttachment, MmsRecord, SmsItem
from .backup_reader import XmlBackupReader
from .backup_writer import LEGACY_ATTACHMENT_BUFFER_SIZE, XmlBackupWriter
from .errors import (
    AttachmentTooLargeError, BackupFormatError, BackupParseError, XmlBackupError,
)
from .escaping import escape_xml

__all__ = [
    "AttachmentId",
    "AttachmentStore",
    "AttachmentTooLargeError",
    "BackupFormatError",
    "BackupParseError",
    "DirectoryAttachmentStore",
    "HttpAttachmentStore",
    "LEGACY_ATTACHMENT_BUFFER_SIZE",
    "MmsAttachment",
    "MmsRecord",
    "SmsItem",
    "XmlBackupError",
    "XmlBackupReader",
    "XmlBackupWriter",
    "escape_xml",
    "parse_part_uri",
]
