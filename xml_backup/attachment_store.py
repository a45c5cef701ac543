"""
Attachment stores consumed by the MMS export path.

The writer only needs one operation from a store: open a readable byte stream for
an attachment id. Ids are parsed from the part URIs the message store keeps for
each attachment, e.g. ``content://org.thoughtcrime.securesms/part/12/1463318259018``.
"""
import os
from typing import BinaryIO, NamedTuple, Optional
from urllib.parse import urlparse

import requests

PART_PATH_SEGMENT = "part"
DEFAULT_HTTP_TIMEOUT = 30


class AttachmentId(NamedTuple):
    row_id: int
    unique_id: int


def parse_part_uri(uri: str) -> AttachmentId:
    """
    Extract the attachment id from a part URI.

    Args:
        uri: URI ending in ``/part/<row_id>/<unique_id>``

    Returns:
        The parsed AttachmentId

    Raises:
        ValueError: If the URI does not name a part

    Example:
        >>> parse_part_uri("content://org.thoughtcrime.securesms/part/4/1463318259018")
        AttachmentId(row_id=4, unique_id=1463318259018)
    """
    segments = [s for s in urlparse(uri).path.split("/") if s]

    if len(segments) < 3 or segments[-3] != PART_PATH_SEGMENT:
        raise ValueError(f"Not an attachment part URI: {uri!r}")

    try:
        return AttachmentId(int(segments[-2]), int(segments[-1]))
    except ValueError:
        raise ValueError(f"Malformed attachment id in part URI: {uri!r}") from None


class AttachmentStore:
    """
    Source of attachment bytes. Callers close the streams they open, and the
    store itself with close() or a with block once the export is done.
    """

    def open_attachment(self, attachment_id: AttachmentId) -> BinaryIO:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class DirectoryAttachmentStore(AttachmentStore):
    """
    Attachments kept as plain files, one per part.

    Files are named ``part<row_id>_<unique_id>.mms`` inside ``root``.
    """

    def __init__(self, root: str):
        self.root = root

    def path_for(self, attachment_id: AttachmentId) -> str:
        filename = f"part{attachment_id.row_id}_{attachment_id.unique_id}.mms"
        return os.path.join(self.root, filename)

    def open_attachment(self, attachment_id: AttachmentId) -> BinaryIO:
        return open(self.path_for(attachment_id), "rb")


class HttpAttachmentStore(AttachmentStore):
    """
    Attachments served over HTTP at ``<base_url>/part/<row_id>/<unique_id>``.

    Args:
        base_url: Server root, with or without a trailing slash
        session: requests session to reuse (a new one is created if None and
            closed by close(); a session passed in is left to the caller)
        timeout: Connect/read timeout in seconds for each request
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session
        self.timeout = timeout

    def url_for(self, attachment_id: AttachmentId) -> str:
        return (f"{self.base_url}/{PART_PATH_SEGMENT}/"
                f"{attachment_id.row_id}/{attachment_id.unique_id}")

    def open_attachment(self, attachment_id: AttachmentId) -> BinaryIO:
        url = self.url_for(attachment_id)
        response = self.session.get(url, stream=True, timeout=self.timeout)

        if not response.ok:
            response.close()
            raise RuntimeError(
                f"Couldn't download attachment from URL '{url}'. "
                f"HTTP status: {response.status_code}"
            )

        # Undo gzip/deflate transfer encoding so callers see the stored bytes
        response.raw.decode_content = True
        return response.raw

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
