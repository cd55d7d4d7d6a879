import hashlib
import re
from datetime import UTC, datetime

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_slug(value: str) -> bool:
    return bool(SLUG_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)


def hash_token(value: str) -> str:
    """SHA-256 hex digest of an opaque token. Only the digest is ever persisted."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
