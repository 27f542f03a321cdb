from __future__ import annotations
import io
import uuid
from typing import Protocol
from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError
import structlog
from dailyguess.config import settings
from dailyguess.errors import StorageError
from dailyguess.services.media import ext_for_mime

log = structlog.get_logger()


class BlobStore(Protocol):
    def store(self, data: bytes, content_type: str) -> str: ...
    def delete(self, url: str) -> None: ...


def _parse_endpoint(ep: str) -> tuple[str, bool]:
    # Return (host:port, secure)
    secure = ep.startswith("https://")
    host = ep.replace("http://", "").replace("https://", "")
    return host, secure


class MinioBlobStore:
    """
    Challenge images in an S3-compatible bucket.
    URLs are `<public_url>/<bucket>/challenges/<uuid>.<ext>`; `delete` maps a URL back to its key.
    """

    def __init__(
        self,
        client: Minio | None = None,
        *,
        bucket: str | None = None,
        public_url: str | None = None,
        ensure_bucket: bool = True,
    ):
        if client is None:
            host, secure = _parse_endpoint(settings.s3_endpoint)
            client = Minio(host, access_key=settings.s3_access_key, secret_key=settings.s3_secret_key, secure=secure)
        self._client = client
        self.bucket = bucket or settings.s3_bucket_images
        self.public_url = (public_url or settings.s3_public_url).rstrip("/")
        if ensure_bucket:
            self._ensure_bucket()

    def _ensure_bucket(self) -> None:
        try:
            if not self._client.bucket_exists(self.bucket):
                self._client.make_bucket(self.bucket)
        except (MinioException, HTTPError) as e:
            # Another process may have created it first
            log.warning("bucket_ensure_failed", bucket=self.bucket, error=str(e))

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{self.bucket}/{key}"

    def key_for(self, url: str) -> str:
        prefix = f"{self.public_url}/{self.bucket}/"
        if not url.startswith(prefix):
            raise StorageError(f"URL is not in bucket {self.bucket}: {url}")
        return url[len(prefix):]

    def store(self, data: bytes, content_type: str) -> str:
        key = f"challenges/{uuid.uuid4()}.{ext_for_mime(content_type)}"
        try:
            self._client.put_object(self.bucket, key, io.BytesIO(data), length=len(data), content_type=content_type)
        except (MinioException, HTTPError) as e:
            raise StorageError(f"put {key} failed: {e}") from e
        return self.url_for(key)

    def delete(self, url: str) -> None:
        key = self.key_for(url)
        try:
            self._client.remove_object(self.bucket, key)
        except (MinioException, HTTPError) as e:
            raise StorageError(f"remove {key} failed: {e}") from e
