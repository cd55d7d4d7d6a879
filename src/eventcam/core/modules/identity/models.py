from pydantic import BaseModel


class Identity(BaseModel):
    """Normalized identity returned by the identity provider."""

    id: str
    email: str | None = None
    name: str | None = None


def fallback_name_from_email(email: str | None) -> str:
    """Derive a display name from the email local part."""
    if not email:
        return "Organizer"
    local_part = email.split("@")[0].strip()
    return local_part or "Organizer"
