"""
Exceptions raised while reading or writing SMS Backup & Restore XML files.

Every failure in this package is fatal for the file being processed: nothing is
retried and nothing is skipped. Plain ``OSError`` from opening or writing files is
not wrapped and propagates where it happens.
"""


class XmlBackupError(Exception):
    """Base class for backup codec errors, also raised on writer misuse."""
    pass


class BackupFormatError(XmlBackupError, ValueError):
    """A numeric attribute of an <sms> element could not be parsed."""
    pass


class BackupParseError(XmlBackupError):
    """The XML tokenizer rejected the document."""
    pass


class AttachmentTooLargeError(XmlBackupError):
    """An MMS attachment reached the configured attachment buffer size."""
    pass
