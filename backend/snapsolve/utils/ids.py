"""Public ID generation using ULID."""

from ulid import ULID


def new_public_id(prefix: str) -> str:
    """Return a prefixed ULID string, e.g. ``qs_01J5K…``; sorts by creation time."""
    return f"{prefix}{ULID()}"
