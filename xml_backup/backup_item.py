"""
Record types shared by the backup reader and writer.

SmsItem mirrors the attributes of one <sms> element. Text fields hold the natural
(unescaped) value; escaping happens only when the writer serializes an item.
MmsRecord is what the message store hands over for one MMS export. It is never
produced by the reader.
"""
from dataclasses import dataclass, field
from typing import List, Optional

# <sms> attribute names
PROTOCOL = "protocol"
ADDRESS = "address"
DATE = "date"
TYPE = "type"
SUBJECT = "subject"
BODY = "body"
SERVICE_CENTER = "service_center"
READ = "read"
STATUS = "status"
TOA = "toa"
SC_TOA = "sc_toa"
LOCKED = "locked"

# Message box types used by the "type" attribute
# Reference: https://developer.android.com/reference/android/provider/Telephony.TextBasedSmsColumns
MESSAGE_TYPE_INBOX = 1
MESSAGE_TYPE_SENT = 2
MESSAGE_TYPE_DRAFT = 3
MESSAGE_TYPE_OUTBOX = 4
MESSAGE_TYPE_FAILED = 5
MESSAGE_TYPE_QUEUED = 6


@dataclass
class SmsItem:
    """One SMS message as stored in a backup file."""
    protocol: int = 0
    address: Optional[str] = None
    date: int = 0               # epoch milliseconds
    type: int = 0               # MESSAGE_TYPE_*
    subject: Optional[str] = None
    body: Optional[str] = None
    service_center: Optional[str] = None
    read: int = 0
    status: int = 0


@dataclass
class MmsAttachment:
    """Content type and part URI of one MMS attachment."""
    content_type: str
    data_uri: str


@dataclass
class MmsRecord:
    """
    Data needed to export one MMS message.

    Args:
        date_sent: Sent timestamp in epoch milliseconds
        address: Sender phone number
        display_body: Rendered message text
        attachments: Attachments in slide order
    """
    date_sent: int
    address: str
    display_body: str
    attachments: List[MmsAttachment] = field(default_factory=list)
