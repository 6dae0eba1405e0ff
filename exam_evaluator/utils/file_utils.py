import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import UploadFile

from exam_evaluator.config import ALLOWED_UPLOAD_TYPES, MAX_UPLOAD_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedDocument:
    """An uploaded page held in memory, ready to be sent inline to the model."""
    filename: str
    data: bytes
    mime_type: str


def mime_type_for(filename: str) -> Optional[str]:
    """
    Map a filename to the mime type sent to the model.

    Returns None for extensions the grader does not accept.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    return ALLOWED_UPLOAD_TYPES.get(ext)


async def read_upload_file(file: UploadFile, max_size: int = MAX_UPLOAD_SIZE) -> Tuple[bool, Optional[UploadedDocument], Optional[str]]:
    """
    Read an uploaded file with type and size validation.

    Args:
        file: The uploaded file
        max_size: Largest accepted size in bytes

    Returns:
        Tuple of (success, document, error_message)
    """
    mime_type = mime_type_for(file.filename)
    if mime_type is None:
        allowed = ", ".join(sorted(ALLOWED_UPLOAD_TYPES))
        return False, None, f"Unsupported file type for {file.filename}. Allowed: {allowed}"

    try:
        data = bytearray()
        chunk_size = 1024 * 1024  # 1MB chunks

        while True:
            chunk = await file.read(chunk_size)
            if not chunk:
                break
            data.extend(chunk)
            if len(data) > max_size:
                return False, None, f"File exceeds maximum allowed size of {max_size / (1024*1024)}MB"

        if not data:
            return False, None, f"{file.filename} is empty"

        return True, UploadedDocument(filename=file.filename, data=bytes(data), mime_type=mime_type), None

    except OSError as e:
        logger.error(f"Error reading upload {file.filename}: {str(e)}")
        return False, None, str(e)
