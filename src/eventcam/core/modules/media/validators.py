from eventcam.errors import ValidationError

ALLOWED_MEDIA_PREFIXES = ("image/", "video/")
MAX_TAGS = 10
MAX_TAG_LENGTH = 32


def validate_file_type(file_type: str) -> str:
    normalized = file_type.strip().lower()
    if not normalized.startswith(ALLOWED_MEDIA_PREFIXES) or "/" not in normalized.rstrip("/"):
        raise ValidationError("Only image and video uploads are allowed")
    return normalized


def validate_file_size(file_size: int, max_size: int) -> None:
    if file_size <= 0:
        raise ValidationError("File size must be positive")
    if file_size > max_size:
        raise ValidationError(f"File is too large (max {max_size} bytes)")


def normalize_tags(tags: list[str]) -> list[str]:
    """Lowercase, trim and de-duplicate tags, keeping first-seen order."""
    result: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if not value or value in result:
            continue
        if len(value) > MAX_TAG_LENGTH:
            raise ValidationError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        result.append(value)
    if len(result) > MAX_TAGS:
        raise ValidationError(f"At most {MAX_TAGS} tags are allowed")
    return result
