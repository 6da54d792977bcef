from abc import ABC, abstractmethod


class StorageBackend(ABC):
    # Avatars and event files keep their URL in the database, so it must not expire.
    public_base_url: str = ""

    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Save data and return the storage path/URL."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retrieve file data by key."""
        ...

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Return a presigned URL (S3) or absolute file path (local)."""
        ...

    @abstractmethod
    def object_url(self, key: str) -> str:
        """Permanent address of the stored object, used when no public base URL is set."""
        ...

    def public_url(self, key: str) -> str:
        """URL recorded on crew avatars and event files."""
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return self.object_url(key)
