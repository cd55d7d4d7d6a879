from eventcam.core.modules.guest.models import MAX_DISPLAY_NAME_LENGTH
from eventcam.errors import ValidationError


def normalize_display_name(value: str | None) -> str | None:
    """Trim and collapse whitespace. Blank clears the name tag.

    Raises:
        ValidationError: If the name is longer than the limit
    """
    if value is None:
        return None
    name = " ".join(value.split())
    if not name:
        return None
    if len(name) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError(f"Display name must be at most {MAX_DISPLAY_NAME_LENGTH} characters")
    return name
