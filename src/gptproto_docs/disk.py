"""On-disk index copies: the per-user cache file and the bundled snapshot.

Reads are permissive (a missing or corrupt file is reported as ``None``) and
writes report success as a bool. Neither ever raises, so the IndexStore can
treat every filesystem problem as "try the next source".
"""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from typing import TYPE_CHECKING

import structlog

from gptproto_docs.models.index import DocsIndex

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger()


def parse_index(payload: bytes | str) -> DocsIndex:
    """Parse raw JSON into a DocsIndex. Raises ``pydantic.ValidationError``."""
    return DocsIndex.model_validate_json(payload)


def load_index_file(path: Path, *, source: str) -> DocsIndex | None:
    """Load an index from ``path``, or None if it is absent or unreadable."""
    if not path.is_file():
        log.debug("index_file_missing", source=source, path=str(path))
        return None

    try:
        index = parse_index(path.read_bytes())
    except Exception:
        log.warning(
            "index_file_invalid",
            source=source,
            path=str(path),
            exc_info=True,
        )
        return None

    log.info(
        "index_loaded",
        source=source,
        version=index.version,
        entries=index.total_docs,
        path=str(path),
    )
    return index


def save_index_to_disk(payload: bytes, path: Path) -> bool:
    """Persist raw index bytes with atomic replace semantics.

    Returns False (after logging) instead of raising on any OS error.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_bytes_fsync(tmp_path, payload)
        os.replace(tmp_path, path)
        _fsync_directory(path.parent)
    except OSError as exc:
        log.warning("index_persist_failed", path=str(path), error=str(exc))
        return False
    finally:
        with suppress(OSError):
            tmp_path.unlink(missing_ok=True)

    log.debug("index_persisted", path=str(path), size=len(payload))
    return True


def _write_bytes_fsync(path: Path, data: bytes) -> None:
    with path.open("wb") as file_obj:
        file_obj.write(data)
        file_obj.flush()
        os.fsync(file_obj.fileno())


def _fsync_directory(path: Path) -> None:
    if sys.platform == "win32":
        return  # Windows does not support fsync on directory handles
    directory_fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(directory_fd)
    finally:
        os.close(directory_fd)
