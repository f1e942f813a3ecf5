"""
Pre-flight media checks, run before any upload touches the network.
Limits follow the provider's documented caps for each media category.
"""

import os

from dialog360.errors import MediaTooLarge, UnsupportedMediaType, ValidationError

KB = 1024
MB = 1024 * KB

MAX_FILE_SIZE = 100 * MB
AUDIO_MAX_SIZE = 16 * MB
IMAGE_MAX_SIZE = 5 * MB
STICKER_MAX_SIZE = 500 * KB
VIDEO_MAX_SIZE = 16 * MB

# Base types only; parameters such as "; codecs=opus" are stripped before matching
SUPPORTED_MIME_TYPES = frozenset({
    # audio
    "audio/aac",
    "audio/amr",
    "audio/mpeg",
    "audio/mp4",
    "audio/ogg",
    # image
    "image/jpeg",
    "image/png",
    "image/webp",
    # video
    "video/mp4",
    "video/3gp",
    # document
    "text/plain",
    "application/pdf",
    "application/msword",
    "application/vnd.ms-excel",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})


def base_mime_type(mime_type: str) -> str:
    """'audio/ogg; codecs=opus' -> 'audio/ogg'"""
    return mime_type.split(";", 1)[0].strip().lower()


def validate_media(size: int, mime_type: str) -> None:
    """Raise MediaTooLarge or UnsupportedMediaType if the provider would reject this file."""
    base = base_mime_type(mime_type)

    if size > MAX_FILE_SIZE:
        raise MediaTooLarge("max", MAX_FILE_SIZE, size)

    if base.startswith("audio/") and size > AUDIO_MAX_SIZE:
        raise MediaTooLarge("audio", AUDIO_MAX_SIZE, size)

    if base == "image/webp":
        if size > STICKER_MAX_SIZE:
            raise MediaTooLarge("sticker", STICKER_MAX_SIZE, size)
    elif base.startswith("image/") and size > IMAGE_MAX_SIZE:
        raise MediaTooLarge("image", IMAGE_MAX_SIZE, size)

    if base.startswith("video/") and size > VIDEO_MAX_SIZE:
        raise MediaTooLarge("video", VIDEO_MAX_SIZE, size)

    if base not in SUPPORTED_MIME_TYPES:
        raise UnsupportedMediaType(mime_type)


def validate_media_file(file_path: str | os.PathLike, mime_type: str) -> int:
    """Validate a file on disk. Returns its size in bytes."""
    if not os.path.isfile(file_path):
        raise ValidationError(f"File not found: {file_path}")
    size = os.path.getsize(file_path)
    validate_media(size, mime_type)
    return size
