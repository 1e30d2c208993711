"""Track ID generation."""

from __future__ import annotations

import uuid


def generate_track_id() -> str:
    """Return a fresh random correlation id for one request."""
    return str(uuid.uuid4())


def resolve_track_id(track_id: str | None) -> str:
    """Use the caller's track id verbatim, or generate one."""
    return track_id or generate_track_id()
