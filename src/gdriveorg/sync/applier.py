"""Remote Mutation Applier: one rename/reparent request per file."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from gdriveorg.errors import GDriveOrgError, InvalidArgumentError, MutationError


class RemoteMutationApplier:
    """Issue rename-and-reparent updates against the remote store. Never retries."""

    def __init__(self, store: Any) -> None:
        self._store = store

    def apply_update(
        self,
        file_id: str,
        new_name: str,
        current_parents: Optional[Sequence[str]],
        target_folder_id: Optional[str] = None,
    ) -> None:
        """
        Rename file_id to new_name, moving it into target_folder_id if given.

        A move adds target_folder_id as a parent and removes every current
        parent. It is skipped when target_folder_id is already a parent.

        Raises:
            InvalidArgumentError: if new_name is empty.
            MutationError: if the store rejects the update.
        """
        if not new_name or not new_name.strip():
            raise InvalidArgumentError(
                "new_name must be a non-empty string",
                details={"file_id": file_id},
            )

        parents = list(current_parents or [])
        add_parents: list[str] = []
        remove_parents: list[str] = []
        if target_folder_id and target_folder_id not in parents:
            add_parents = [target_folder_id]
            remove_parents = parents

        try:
            self._store.update_file(
                file_id,
                name=new_name,
                add_parents=add_parents or None,
                remove_parents=remove_parents or None,
            )
        except GDriveOrgError as exc:
            raise MutationError(
                f"Failed to update file {file_id}: {exc}",
                details={
                    "file_id": file_id,
                    "new_name": new_name,
                    "target_folder_id": target_folder_id,
                    "error_type": exc.__class__.__name__,
                },
                cause=exc,
            ) from exc
