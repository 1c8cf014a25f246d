import logging
import os
import time

from PIL import Image, UnidentifiedImageError

from ..errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def save_image(file_storage, upload_folder):
    """Validate an uploaded image and store it under a generated name."""
    if file_storage is None or not file_storage.filename:
        raise ValidationError("Error retrieving file")

    ext = os.path.splitext(file_storage.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Invalid file type")

    try:
        with Image.open(file_storage.stream) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("File is not a valid image")
    file_storage.stream.seek(0)

    os.makedirs(upload_folder, exist_ok=True)
    filename = f"{time.time_ns()}{ext}"
    file_storage.save(os.path.join(upload_folder, filename))
    logger.info("Stored upload %s", filename)
    return f"/uploads/{filename}"
