"""
S3-compatible object storage for article media.

Keys are ``<folder>/<uuid hex><ext>`` and public URLs are ``<base_url>/<key>``,
so a URL issued here can always be turned back into its key for deletion.
"""
import logging
import os
import uuid
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

import boto3
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class S3Storage:
    """Flask extension wrapping a boto3 S3 client."""

    def __init__(self, app=None, client=None):
        self._client = client
        self.bucket: Optional[str] = None
        self.region: Optional[str] = None
        self.endpoint_url: Optional[str] = None
        self.public_url: Optional[str] = None
        self._credentials = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.bucket = app.config.get("AWS_S3_BUCKET")
        self.region = app.config.get("AWS_S3_REGION")
        self.endpoint_url = app.config.get("AWS_S3_ENDPOINT_URL")
        self.public_url = app.config.get("AWS_S3_PUBLIC_URL")
        self._credentials = {
            "aws_access_key_id": app.config.get("AWS_S3_ACCESS_KEY_ID"),
            "aws_secret_access_key": app.config.get("AWS_S3_SECRET_ACCESS_KEY"),
        }
        app.extensions["storage"] = self

    @property
    def client(self):
        if self._client is None:
            if not self.bucket:
                raise RuntimeError("AWS_S3_BUCKET is not configured")
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                **self._credentials,
            )
        return self._client

    @property
    def base_url(self) -> str:
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    # -------------------------------------------------
    # Key <-> URL
    # -------------------------------------------------
    @staticmethod
    def build_key(folder: str, filename: str) -> str:
        ext = os.path.splitext(secure_filename(filename or ""))[1].lower()
        folder = (folder or "uploads").strip("/")
        return f"{folder}/{uuid.uuid4().hex}{ext}"

    def url_for_key(self, key: str) -> str:
        return f"{self.base_url}/{quote(key)}"

    def key_for_url(self, url: Optional[str]) -> Optional[str]:
        if not url:
            return None
        prefix = self.base_url + "/"
        if not url.startswith(prefix):
            return None
        key = unquote(urlsplit(url[len(prefix):]).path)
        return key or None

    def is_storage_url(self, url: Optional[str]) -> bool:
        return self.key_for_url(url) is not None

    # -------------------------------------------------
    # Operations
    # -------------------------------------------------
    def upload(self, data: bytes, mimetype: str, filename: str, folder: str = "uploads") -> str:
        key = self.build_key(folder, filename)
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=mimetype,
        )
        logger.debug("Uploaded %s (%s, %d bytes) to %s", filename, mimetype, len(data), key)
        return self.url_for_key(key)

    def delete(self, url: str) -> None:
        """Delete the object behind ``url``. Missing keys are not an error (S3 semantics)."""
        key = self.key_for_url(url)
        if not key:
            raise ValueError(f"Not a storage URL: {url}")
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.debug("Deleted storage object %s", key)
