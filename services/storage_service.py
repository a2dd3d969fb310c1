"""
Image Upload URL Issuer

Hands the browser a short-lived V4 signed PUT URL on Google Cloud Storage so
images go straight to the bucket, plus the public URL the record should store.
"""

import logging
import re
import time
from datetime import timedelta
from typing import Callable, Optional

from google.cloud import storage

from models.constants import MEDIA_FOLDERS, EntityKind
from utils.errors import StorageFault

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = 'jpg'
_EXTENSION_RE = re.compile(r'^[a-z0-9]{1,10}$')


def file_extension(file_name: str) -> str:
    """Lower-cased extension of ``file_name``, ``jpg`` when missing or odd."""
    if '.' not in file_name:
        return DEFAULT_EXTENSION
    extension = file_name.rsplit('.', 1)[-1].lower()
    return extension if _EXTENSION_RE.match(extension) else DEFAULT_EXTENSION


def object_key(entity_type: EntityKind, entity_id: str, file_name: str,
               image_index: Optional[int], timestamp_ms: int) -> str:
    """
    Build the bucket key for an uploaded image.

    Main images are ``{id}-main-{ms}``; gallery images ``{id}-img-{N}-{ms}``.
    """
    folder = MEDIA_FOLDERS[EntityKind(entity_type)]
    if image_index is None:
        unique_id = f"{entity_id}-main-{timestamp_ms}"
    else:
        unique_id = f"{entity_id}-img-{image_index}-{timestamp_ms}"
    return f"public/news/{folder}/{unique_id}.{file_extension(file_name)}"


class StorageService:
    """Issues signed upload URLs for news images."""

    def __init__(
        self,
        bucket_name: Optional[str],
        public_url: Optional[str] = None,
        expires_seconds: int = 3600,
        client_factory: Callable[[], storage.Client] = storage.Client,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            bucket_name: Target GCS bucket
            public_url: Base URL the bucket is served from; empty disables it
            expires_seconds: Lifetime of each signed URL
            client_factory: Builds the storage client on first use
            clock: Seconds since the epoch, used for the key timestamp
        """
        self.bucket_name = bucket_name
        self.public_url = (public_url or '').rstrip('/')
        self.expires_seconds = expires_seconds
        self.client_factory = client_factory
        self.clock = clock
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = self.client_factory()
        return self._client

    def image_upload_url(self, entity_type: EntityKind, entity_id: str, file_name: str,
                         content_type: str, image_index: Optional[int] = None) -> dict:
        """
        Create a signed PUT URL for one image.

        Returns:
            ``{"url": signed_put_url, "publicUrl": public_url_or_empty}``

        Raises:
            StorageFault: bucket not configured or signing failed
        """
        if not self.bucket_name:
            logger.error("NEWS_MEDIA_BUCKET is not configured")
            raise StorageFault("Image uploads are not configured")

        key = object_key(entity_type, entity_id, file_name, image_index, int(self.clock() * 1000))
        try:
            blob = self.client.bucket(self.bucket_name).blob(key)
            url = blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=self.expires_seconds),
                method="PUT",
                content_type=content_type,
            )
        except Exception as exc:
            logger.exception("Failed to sign upload URL for %s", key)
            raise StorageFault("Error generating upload URL") from exc

        logger.info("Issued upload URL for %s", key)
        public_url = f"{self.public_url}/{key}" if self.public_url else ""
        return {"url": url, "publicUrl": public_url}
