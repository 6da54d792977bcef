import logging

from crewdesk.settings import settings
from crewdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def get_storage() -> StorageBackend:
    """Build the backend that holds crew avatars and event files.

    Misconfiguration fails here, at startup, rather than on the first upload.
    """
    backend = settings.storage_backend.strip().lower()
    public_base_url = settings.storage_public_base_url

    if backend == "local":
        from crewdesk.storage.local import LocalStorage

        logger.info("Using storage backend: local path=%s", settings.storage_local_path)
        return LocalStorage(settings.storage_local_path, public_base_url=public_base_url)

    if backend == "s3":
        from crewdesk.storage.s3 import S3Storage

        if not settings.s3_bucket:
            raise ValueError("CREWDESK_S3_BUCKET is required for the s3 storage backend")
        logger.info(
            "Using storage backend: s3 bucket=%s public_base_url=%s",
            settings.s3_bucket,
            public_base_url or "(object URL)",
        )
        return S3Storage(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            presigned_expiry=settings.s3_presigned_expiry,
            timeout=settings.s3_timeout,
            max_attempts=settings.s3_max_attempts,
            public_base_url=public_base_url,
        )

    raise ValueError(f"Unsupported storage backend: {backend}")
