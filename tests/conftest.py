"""Shared pytest fixtures."""
import io

import pytest

from xml_backup.attachment_store import AttachmentStore


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory as a pathlib.Path."""
    return tmp_path


class MemoryAttachmentStore(AttachmentStore):
    """Attachment store backed by a dict of AttachmentId -> bytes."""

    def __init__(self, attachments=None):
        self.attachments = dict(attachments or {})
        self.opened = []

    def open_attachment(self, attachment_id):
        self.opened.append(attachment_id)
        return io.BytesIO(self.attachments[attachment_id])


@pytest.fixture
def memory_store():
    return MemoryAttachmentStore()
