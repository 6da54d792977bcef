from __future__ import annotations

import logging
from urllib.parse import quote

import boto3
from botocore.config import Config

from crewdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str = "",
        presigned_expiry: int = 604800,
        timeout: int = 10,
        max_attempts: int = 3,
        public_base_url: str = "",
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.presigned_expiry = presigned_expiry
        self.public_base_url = public_base_url

        client_kwargs: dict = {
            "service_name": "s3",
            "region_name": region,
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
            "config": Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": max_attempts, "mode": "standard"},
            ),
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        self.client = boto3.client(**client_kwargs)

    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info("Uploaded %s to s3://%s/%s (%d bytes)", key, self.bucket, key, len(data))
        return key

    def get(self, key: str) -> bytes:
        response = self.client.get_object(Bucket=self.bucket, Key=key)
        data = response["Body"].read()
        logger.debug("Downloaded s3://%s/%s (%d bytes)", self.bucket, key, len(data))
        return data

    def get_url(self, key: str) -> str:
        url = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.presigned_expiry,
        )
        logger.debug("Generated presigned URL for %s", key)
        return url

    def object_url(self, key: str) -> str:
        """Unsigned object URL. Resolves for anyone once the bucket allows public reads."""
        path = quote(key)
        if self.endpoint_url:
            # Path-style, which S3-compatible services such as MinIO expect.
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{path}"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{path}"
        return f"https://{self.bucket}.s3.amazonaws.com/{path}"
