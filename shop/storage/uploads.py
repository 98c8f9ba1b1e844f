"""Local "public disk" storage for uploaded files.

Files are written below a root directory and addressed by a path relative
to that root, e.g. ``products/1760812800/Xk3...q9.jpg``. That relative path
is what gets persisted (``products.cover``, ``product_images.src``) and what
``url()`` turns into a public URL.
"""

import asyncio
import secrets
import string
from pathlib import Path, PurePosixPath

import structlog
from fastapi import UploadFile

from shop.main_config import StorageConfig

__all__ = ["UploadStorage"]

logger = structlog.get_logger(__name__)

_NAME_ALPHABET = string.ascii_letters + string.digits
_NAME_LENGTH = 25


def random_name(length: int = _NAME_LENGTH) -> str:
    return "".join(secrets.choice(_NAME_ALPHABET) for _ in range(length))


class UploadStorage:
    """Stores uploads on the local filesystem."""

    def __init__(self, root: str | Path, public_url: str = "/storage") -> None:
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_config(cls, config: StorageConfig) -> "UploadStorage":
        return cls(root=config.root, public_url=config.public_url)

    def _full_path(self, path: str) -> Path:
        full_path = (self.root / path).resolve()
        if not full_path.is_relative_to(self.root.resolve()):
            msg = f"Path escapes the storage root: {path}"
            raise ValueError(msg)
        return full_path

    async def store(self, file: UploadFile, folder: str, filename: str | None = None) -> str:
        """Store an uploaded file under ``folder``.

        The stored name is ``filename`` (or 25 random alphanumerics) plus the
        client file's extension.

        Returns:
            Path of the stored file relative to the storage root
        """
        extension = PurePosixPath(file.filename or "").suffix
        relative = (PurePosixPath(folder) / f"{filename or random_name()}{extension}").as_posix()
        full_path = self._full_path(relative)

        content = await file.read()
        full_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(full_path.write_bytes, content)

        logger.info("file_stored", path=relative, size=len(content))
        return relative

    async def delete(self, path: str) -> bool:
        """Delete a stored file. Returns False when it does not exist."""
        full_path = self._full_path(path)
        if not full_path.is_file():
            return False
        await asyncio.to_thread(full_path.unlink)
        logger.info("file_deleted", path=path)
        return True

    async def exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def url(self, path: str) -> str:
        """Public URL of a stored file."""
        return f"{self.public_url}/{path.lstrip('/')}"
