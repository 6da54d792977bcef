import logging
from pathlib import Path

from crewdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Uploads kept on disk under ``base_dir``, for development and single-host installs."""

    def __init__(self, base_dir: str, public_base_url: str = "") -> None:
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url

    def _path(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir):
            raise ValueError(f"Storage key outside upload directory: {key}")
        return path

    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Saved %s (%d bytes, %s) to %s", key, len(data), content_type, path)
        return str(path)

    def get(self, key: str) -> bytes:
        path = self._path(key)
        logger.debug("Reading %s from %s", key, path)
        return path.read_bytes()

    def get_url(self, key: str) -> str:
        return str(self._path(key))

    def object_url(self, key: str) -> str:
        return self._path(key).as_uri()
