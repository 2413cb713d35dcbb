"""
File Upload Utility - read an uploaded CSV as text.

Max file size: 5MB
"""

from fastapi import HTTPException, UploadFile

MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024


async def read_text_upload(file: UploadFile) -> str:
    """
    Read an uploaded file and decode it.

    Returns an empty string for an empty upload; the caller decides what
    that means.

    Raises:
        HTTPException 413 when the file exceeds the size limit
    """
    content = await file.read(MAX_FILE_SIZE_BYTES + 1)

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )

    return decode_text(content)


def decode_text(content: bytes) -> str:
    """Decode bytes, trying UTF-8 (with or without BOM) first."""
    for encoding in ['utf-8-sig', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode('latin-1')
