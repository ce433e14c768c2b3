from __future__ import annotations

import logging
from contextlib import contextmanager

from django.db import transaction

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE = 10 * 1024 * 1024


def _remove(storage, path: str) -> None:
    try:
        storage.delete(path)
    except OSError:
        logger.warning("Could not remove stored file %s", path, exc_info=True)


def discard_file_on_commit(field_file) -> None:
    """
    Remove a stored blob once the surrounding transaction commits, so a
    rolled back delete/replace never loses the file.
    """
    if not field_file:
        return
    storage, path = field_file.storage, field_file.name
    transaction.on_commit(lambda: _remove(storage, path))


@contextmanager
def discard_saved_files_on_error():
    """
    Yields a `keep(field_file)` callback. If the block raises, every file
    kept so far is removed from storage before the error propagates; the
    database rows for them roll back with the transaction.
    """
    saved: list[tuple] = []

    def keep(field_file) -> None:
        saved.append((field_file.storage, field_file.name))

    try:
        yield keep
    except Exception:
        for storage, path in saved:
            _remove(storage, path)
        raise
