"""
External collaborator interfaces: message delivery and file storage.
"""

from dataclasses import dataclass
from typing import Protocol


class BlobReleaseError(Exception):
    """A stored file could not be released."""


class Notifier(Protocol):
    """Delivers a message to a recipient. Raises NotificationDeliveryException on failure."""

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        ...


class BlobStore(Protocol):
    """Opaque file storage addressed by path reference."""

    def store(self, filename: str, content: bytes) -> str:
        """Persist content and return its path reference."""
        ...

    def release(self, path_ref: str) -> None:
        """Remove a stored file. Raises BlobReleaseError on failure."""
        ...


@dataclass
class UploadedFile:
    """A file received from a client, not yet stored."""
    filename: str
    content: bytes
