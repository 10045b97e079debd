"""File ingestion for SmartQuote.

Reads user-selected files into in-memory UploadedFile records. Reads run
concurrently and may finish out of order; a batch is handed over only once
every file in it has been processed.
"""

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Union

import structlog

from smartquote.models.uploaded_file import UploadedFile, ACCEPTED_EXTENSIONS

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


async def read_file(path: PathLike, mime_type: Optional[str] = None) -> UploadedFile:
    """Read one file off the event loop and wrap it as an UploadedFile.

    Raises:
        OSError: If the file cannot be read.
    """
    path = Path(path)
    content = await asyncio.to_thread(_read_bytes, path)
    return UploadedFile.from_bytes(path.name, content, mime_type)


async def ingest_files(paths: Iterable[PathLike]) -> List[UploadedFile]:
    """Read a batch of files concurrently.

    Files are collected in completion order. Unreadable files are logged
    and skipped.

    Returns:
        UploadedFile records for every file that could be read.
    """
    paths = [Path(p) for p in paths]
    if not paths:
        return []

    for path in paths:
        if path.suffix.lower() not in ACCEPTED_EXTENSIONS:
            logger.info("file_type_not_accepted", file_name=path.name, suffix=path.suffix)

    uploaded: List[UploadedFile] = []
    processed = 0

    tasks = [asyncio.create_task(read_file(p)) for p in paths]
    for future in asyncio.as_completed(tasks):
        try:
            uploaded.append(await future)
        except OSError as e:
            logger.warning("file_read_failed", error=str(e), error_type=type(e).__name__)
        processed += 1

    logger.info(
        "files_ingested",
        requested=len(paths),
        processed=processed,
        ingested=len(uploaded),
    )
    return uploaded


class FileBatch:
    """The session's attachment list.

    New batches accumulate after existing entries; removal keeps the
    remaining files in their original relative order.
    """

    def __init__(self, files: Optional[Iterable[UploadedFile]] = None):
        self._files: List[UploadedFile] = list(files or [])

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self):
        return iter(self._files)

    def __getitem__(self, index: int) -> UploadedFile:
        return self._files[index]

    @property
    def files(self) -> List[UploadedFile]:
        """Snapshot of the current attachments."""
        return list(self._files)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self._files]

    def add(self, files: Iterable[UploadedFile]) -> None:
        """Append a batch without clearing prior entries."""
        batch = list(files)
        self._files.extend(batch)
        logger.debug("files_added", added=len(batch), total=len(self._files))

    async def add_paths(self, paths: Iterable[PathLike]) -> List[UploadedFile]:
        """Read files from disk and append them once the whole batch is done."""
        batch = await ingest_files(paths)
        self.add(batch)
        return batch

    def remove(self, index: int) -> UploadedFile:
        """Remove the file at ``index``.

        Raises:
            IndexError: If ``index`` is out of range.
        """
        if index < 0 or index >= len(self._files):
            raise IndexError(f"No attachment at index {index}")
        removed = self._files.pop(index)
        logger.debug("file_removed", file_name=removed.name, total=len(self._files))
        return removed

    def clear(self) -> None:
        self._files.clear()
