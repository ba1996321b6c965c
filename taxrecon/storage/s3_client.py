from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from taxrecon.core.config import settings

logger = logging.getLogger(__name__)

StorageError = (BotoCoreError, ClientError, OSError)


class S3Client:
    def __init__(
        self,
        endpoint: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        bucket: str | None = None,
        presign_ttl: int | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize S3 client.

        Falls back to settings when parameters are omitted. A pre-built boto3 client
        (or a stand-in with the same methods) may be passed as ``client``.
        """
        self.bucket = bucket or settings.S3_BUCKET
        self._explicit_endpoint = endpoint or settings.S3_ENDPOINT or None
        self._access_key = access_key or settings.S3_ACCESS_KEY or None
        self._secret_key = secret_key or settings.S3_SECRET_KEY or None
        self.presign_ttl = presign_ttl or settings.S3_PRESIGN_TTL
        self._filesystem_root: Path | None = None
        self._client = client if client is not None else self._initialize_client()

    @property
    def uses_filesystem(self) -> bool:
        return self._client is None

    def put_bytes(self, data: bytes, key: str, content_type: str = "text/csv") -> None:
        """Write ``data`` under ``key``, replacing any existing object.

        Raises the underlying botocore/OS error on failure; nothing is retried here.
        """
        if self._client is None:
            path = self._write_to_filesystem(data, key)
            logger.debug("Stored %s locally at %s", key, path)
            return
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.debug("Uploaded %s to bucket %s", key, self.bucket)

    def presigned_url(self, key: str, expires_in: int | None = None) -> str:
        if self._client is None:
            return (self._ensure_filesystem_root() / key).resolve().as_uri()
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in or self.presign_ttl,
        )

    def _initialize_client(self):
        try:
            session = boto3.session.Session(
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
            )
            endpoint = self._explicit_endpoint
            region = getattr(settings, "S3_REGION", "us-east-1")

            # For AWS S3, don't set endpoint_url (let boto3 use default AWS endpoints)
            client_kwargs = {
                "service_name": "s3",
                "region_name": region,
                "config": Config(signature_version="s3v4"),
            }

            # Only set endpoint_url for non-AWS S3-compatible services
            if endpoint:
                client_kwargs["endpoint_url"] = endpoint

            client = session.client(**client_kwargs)
            client.head_bucket(Bucket=self.bucket)
            return client
        except (BotoCoreError, ClientError) as exc:
            if settings.ENV.lower() == "prod":
                raise
            logger.warning("Falling back to filesystem storage for bucket %s: %s", self.bucket, exc)
            return None

    def _write_to_filesystem(self, data: bytes, key: str) -> Path:
        base = self._ensure_filesystem_root()
        target = base / key
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target

    def _ensure_filesystem_root(self) -> Path:
        if self._filesystem_root is None:
            root = Path("storage") / self.bucket
            root.mkdir(parents=True, exist_ok=True)
            self._filesystem_root = root
            logger.info("Using filesystem storage fallback at %s", root)
        return self._filesystem_root


@lru_cache
def get_s3_client() -> S3Client:
    """Process-wide client, built on first use so imports stay side-effect free."""
    return S3Client()
