import logging
import os
import string
import time

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.crypto import get_random_string

from donations.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

DEFAULT_SUBDIR = "documents"


def subdirectory_for(field: str) -> str:
    """
    Storage folder for a document field, matched on substrings in this order:
    id, certificate/cert, clearance, contract/permit.
    """
    field = (field or "").lower()
    if "id" in field:
        return "ids"
    if "certificate" in field or "cert" in field:
        return "certificates"
    if "clearance" in field:
        return "clearances"
    if "contract" in field or "permit" in field:
        return "contracts"
    return DEFAULT_SUBDIR


class UploadService:
    """Stores registration and eligibility documents."""

    def store(self, uploaded_file, field: str = None) -> dict:
        """
        Validate and save an uploaded document.

        Args:
            uploaded_file: Django UploadedFile from the multipart body
            field: Form field the document belongs to, selects the folder

        Returns:
            dict: Contains 'file_path' (/uploads/<subdir>/<name>), 'file_name',
            'file_size' and 'file_type'
        """
        if uploaded_file is None:
            raise ValidationFailed("No file uploaded")
        if uploaded_file.content_type not in settings.UPLOAD_ALLOWED_TYPES:
            raise ValidationFailed("Invalid file type. Only JPEG, PNG, and PDF files are allowed.")
        if uploaded_file.size > settings.UPLOAD_MAX_SIZE:
            raise ValidationFailed("File too large. Maximum size is 5MB.")

        subdir = subdirectory_for(field or DEFAULT_SUBDIR)
        extension = os.path.splitext(uploaded_file.name)[1].lstrip(".").lower() or "bin"
        random_part = get_random_string(11, allowed_chars=string.ascii_lowercase + string.digits)
        name = f"{int(time.time() * 1000)}-{random_part}.{extension}"

        stored = default_storage.save(f"{subdir}/{name}", uploaded_file)
        logger.info(f"Stored upload for field {field!r} at {stored} ({uploaded_file.size} bytes)")

        return {
            "file_path": f"{settings.MEDIA_URL.rstrip('/')}/{stored}",
            "file_name": uploaded_file.name,
            "file_size": uploaded_file.size,
            "file_type": uploaded_file.content_type,
        }
