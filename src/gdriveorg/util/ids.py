from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_run_id() -> str:
    """Generate an identifier for one SyncExecutor run."""
    return new_uuid()


def new_local_file_id() -> str:
    """Generate a session id for a file read from local disk (no Drive id)."""
    return f"local-{new_uuid()}"
