"""
realty_frontend/uploads.py
Image uploads for profile pictures and listing photos.

The backend accepts one multipart file per request and answers
{"imageUrl": "..."}. Batches are sent concurrently and joined; one failure
fails the whole batch, but uploads that already succeeded stay uploaded
(the backend has no delete endpoint to roll them back).
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from realty_frontend.api_client import ApiClient
from realty_frontend.config import IS_DEV, UPLOAD_MAX_FILES, UPLOAD_MAX_SIZE_MB
from realty_frontend.errors import RealtyError, RequestFailed, ValidationError
from realty_frontend.notifications import Notifier, default_notifier

PROFILE_UPLOAD_ENDPOINT = "/api/upload/profile"
PROFILE_FIELD_NAME = "profileImage"
PROPERTY_UPLOAD_ENDPOINT = "/api/upload/property"
PROPERTY_FIELD_NAME = "propertyImage"

# A path on disk, or an in-memory (filename, content) pair
ImageFile = Union[str, Path, Tuple[str, bytes]]


def _describe(file: ImageFile) -> Tuple[str, int]:
    """(filename, size in bytes) without reading a file from disk."""
    if isinstance(file, tuple):
        name, content = file
        return name, len(content)
    path = Path(file)
    return path.name, os.path.getsize(path)


def _open(file: ImageFile) -> Tuple[str, bytes]:
    if isinstance(file, tuple):
        return file
    path = Path(file)
    return path.name, path.read_bytes()


class ImageUploader:
    def __init__(
        self,
        api: ApiClient,
        notifier: Optional[Notifier] = None,
        max_size_mb: float = UPLOAD_MAX_SIZE_MB,
        max_files: int = UPLOAD_MAX_FILES,
    ):
        self.api = api
        self.notifier = notifier or default_notifier()
        self.max_size_mb = max_size_mb
        self.max_files = max_files

    def check_size(self, file: ImageFile, field: str) -> None:
        name, size = _describe(file)
        size_mb = size / (1024 * 1024)
        if size_mb > self.max_size_mb:
            raise ValidationError(
                {field: f"Max file size is {self.max_size_mb:g}MB. {name} is {size_mb:.2f}MB."},
                message="File too large",
            )

    def _upload(self, endpoint: str, field: str, file: ImageFile) -> str:
        name, content = _open(file)
        data = self.api.request(
            "POST",
            endpoint,
            files={field: (name, content)},
            default_error=f"Upload failed for {name}",
        )
        image_url = data.get("imageUrl") if isinstance(data, dict) else None
        if not image_url:
            raise RequestFailed(f"Upload failed for {name}: no image URL returned")
        return image_url

    def _upload_one(self, endpoint: str, field: str, file: ImageFile) -> str:
        self.check_size(file, field)
        try:
            image_url = self._upload(endpoint, field, file)
        except RealtyError:
            self.notifier.failure("Upload failed", "An error occurred while uploading your image.")
            raise
        self.notifier.success("Upload successful", "Your image has been uploaded.")
        return image_url

    def upload_profile_image(self, file: ImageFile) -> str:
        """POST /api/upload/profile; returns the stored image URL."""
        return self._upload_one(PROFILE_UPLOAD_ENDPOINT, PROFILE_FIELD_NAME, file)

    def upload_property_image(self, file: ImageFile) -> str:
        """POST /api/upload/property for the main listing photo."""
        return self._upload_one(PROPERTY_UPLOAD_ENDPOINT, PROPERTY_FIELD_NAME, file)

    def upload_property_images(self, files: Sequence[ImageFile], already_uploaded: int = 0) -> List[str]:
        """
        Upload additional listing photos concurrently.

        Args:
            files: images to upload
            already_uploaded: images already attached to the draft (counts
                towards max_files)

        Returns:
            Image URLs in the same order as ``files``

        Raises:
            ValidationError: too many files or a file over the size limit
                (checked before anything is sent)
            RealtyError: any upload failed; earlier successes are not undone
        """
        if not files:
            return []
        if len(files) + already_uploaded > self.max_files:
            raise ValidationError(
                {PROPERTY_FIELD_NAME: f"You can upload a maximum of {self.max_files} images."},
                message="Too many files",
            )
        for file in files:
            self.check_size(file, PROPERTY_FIELD_NAME)

        with ThreadPoolExecutor(max_workers=len(files)) as pool:
            futures = [pool.submit(self._upload, PROPERTY_UPLOAD_ENDPOINT, PROPERTY_FIELD_NAME, f) for f in files]
            try:
                urls = [future.result() for future in futures]
            except RealtyError as e:
                if IS_DEV:
                    print(f"[UPLOAD] Batch failed: {e.message}")
                self.notifier.failure("Upload failed", "An error occurred while uploading your images.")
                raise

        count = len(urls)
        self.notifier.success(
            "Upload successful",
            f"{count} image{'s' if count > 1 else ''} uploaded successfully.",
        )
        return urls
