"""Local filesystem blob store for intern documents and profile pictures."""

import os
import re
import uuid

import structlog

from intern_registry.domain.gateways import BlobReleaseError

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Keep only the base name and a conservative character set."""
    name = os.path.basename(filename.replace("\\", "/")).strip()
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "file"


class LocalBlobStore:
    """Stores files under ``root`` and hands out ``<prefix>/<name>`` path refs."""

    def __init__(self, root: str, prefix: str = "uploads"):
        self.root = os.path.normpath(root)
        self.prefix = prefix.strip("/")

    def _full_path(self, path_ref: str) -> str:
        name = path_ref.replace("\\", "/")
        if name.startswith(self.prefix + "/"):
            name = name[len(self.prefix) + 1:]
        full = os.path.normpath(os.path.join(self.root, name))
        if os.path.dirname(full) != self.root:
            raise BlobReleaseError(f"Path outside blob store: {path_ref}")
        return full

    def store(self, filename: str, content: bytes) -> str:
        os.makedirs(self.root, exist_ok=True)
        safe_name = f"{uuid.uuid4().hex}_{sanitize_filename(filename)}"
        with open(os.path.join(self.root, safe_name), "wb") as f:
            f.write(content)
        logger.debug("Blob stored", name=safe_name, size=len(content))
        return f"{self.prefix}/{safe_name}"

    def release(self, path_ref: str) -> None:
        full = self._full_path(path_ref)
        try:
            os.remove(full)
        except OSError as e:
            raise BlobReleaseError(f"Could not delete {path_ref}: {e}") from e
        logger.debug("Blob released", path=path_ref)
