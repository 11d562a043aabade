"""
Image file helpers for dish, facility and student photos.

Images are written to the default storage (MEDIA_ROOT locally) and the
public URL under MEDIA_URL is stored on the owning row.
"""

import base64
import binascii
import re
import uuid

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp'}
MAX_IMAGE_BYTES = 10 * 1024 * 1024

DATA_URL_RE = re.compile(r'^data:image/(?P<ext>[a-zA-Z0-9.+-]+);base64,(?P<data>.+)$', re.DOTALL)


class InvalidImageError(ValueError):
    """Raised when an uploaded image cannot be accepted."""
    pass


def _store(folder: str, extension: str, content: ContentFile) -> str:
    extension = extension.lower()
    if extension == 'jpeg':
        extension = 'jpg'
    if extension not in ALLOWED_EXTENSIONS:
        raise InvalidImageError('Only image files are allowed')
    if content.size > MAX_IMAGE_BYTES:
        raise InvalidImageError('Image must be 10MB or smaller')

    name = default_storage.save(f"{folder}/{uuid.uuid4().hex}.{extension}", content)
    return default_storage.url(name)


def save_uploaded_image(upload, folder: str) -> str:
    """
    Save an uploaded image file and return its URL.

    Args:
        upload: Django UploadedFile
        folder: Sub-directory under the media root, e.g. ``dishes``
    """
    if not (upload.content_type or '').startswith('image/'):
        raise InvalidImageError('Only image files are allowed')
    extension = upload.name.rsplit('.', 1)[-1] if '.' in upload.name else upload.content_type.split('/')[-1]
    return _store(folder, extension, ContentFile(upload.read()))


def save_base64_image(payload: str, folder: str) -> str:
    """
    Save a base64 image (data URL or bare base64 JPEG) and return its URL.
    """
    match = DATA_URL_RE.match(payload.strip())
    if match:
        extension, encoded = match.group('ext'), match.group('data')
    else:
        extension, encoded = 'jpg', payload.strip()

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError('Invalid base64 image data')

    return _store(folder, extension, ContentFile(raw))


def delete_image(url: str) -> None:
    """Remove a previously saved image given its public URL."""
    if not url or not url.startswith(settings.MEDIA_URL):
        return
    name = url[len(settings.MEDIA_URL):]
    if default_storage.exists(name):
        default_storage.delete(name)
