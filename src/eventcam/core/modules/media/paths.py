"""Object key layout in the media bucket."""

import mimetypes
from uuid import UUID


def file_extension(file_type: str) -> str:
    if file_type == "image/jpeg":
        return "jpg"
    extension = mimetypes.guess_extension(file_type)
    return extension.lstrip(".") if extension else "bin"


def original_object_path(event_id: UUID, media_id: UUID, file_type: str) -> str:
    return f"events/{event_id}/original/{media_id}.{file_extension(file_type)}"


def thumb_object_path(event_id: UUID, media_id: UUID) -> str:
    return f"events/{event_id}/thumb/{media_id}.jpg"
