# dealership/storage.py
"""Listing image uploads to S3-compatible blob storage."""
import mimetypes
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import StorageConfig
from .utils import logger


class ImageRejected(ValueError):
    """An uploaded file failed validation; ``status_code`` is the HTTP status to report."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class StorageError(RuntimeError):
    pass


@dataclass
class ImageFile:
    filename: str
    content_type: Optional[str]
    content: bytes


def get_s3_client(config: StorageConfig):
    """Get configured S3 client."""
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        region_name=config.region,
    )


class ImageStorage:
    """Validates and uploads listing images, returning their public URLs."""

    def __init__(self, config: StorageConfig, client=None):
        self.config = config
        self._client = client

    @property
    def client(self):
        # created lazily so the app starts without AWS credentials
        if self._client is None:
            self._client = get_s3_client(self.config)
        return self._client

    def validate(self, image: ImageFile) -> str:
        content_type = image.content_type or mimetypes.guess_type(image.filename)[0] or ""
        if not content_type.startswith("image/"):
            raise ImageRejected("Please select only image files.")
        if len(image.content) > self.config.max_image_bytes:
            raise ImageRejected("Please select images smaller than 5MB.", status_code=413)
        return content_type

    def object_key(self, owner_id: int, filename: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"{owner_id}/{uuid.uuid4().hex}.{ext}"

    def upload(self, owner_id: int, image: ImageFile) -> str:
        content_type = self.validate(image)
        key = self.object_key(owner_id, image.filename)
        try:
            self.client.put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=image.content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to upload %s to bucket %s", key, self.config.bucket)
            raise StorageError(f"Failed to upload {image.filename}") from e
        logger.info("Uploaded image %s", key)
        return self.config.public_url(key)

    def upload_many(self, owner_id: int, images: List[ImageFile]) -> Tuple[List[str], List[Tuple[str, ImageRejected]]]:
        """Drop files that fail validation, then upload at most ``max_images_per_upload`` of the rest.

        Returns the public URLs and the ``(filename, reason)`` of every dropped file.
        """
        valid, rejected = [], []
        for image in images:
            try:
                self.validate(image)
            except ImageRejected as e:
                rejected.append((image.filename, e))
                continue
            valid.append(image)
        kept = valid[: self.config.max_images_per_upload]
        return [self.upload(owner_id, image) for image in kept], rejected
