# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Static file resolution for the public directory.

``resolve()`` maps a request path onto a regular file inside the configured
public root. It is a read-only filesystem query with no shared state, so any
number of requests may call it concurrently.

Resolution rules:
    - static serving disabled, or no root configured: no match
    - the candidate is ``root / path`` after full resolution (``..`` segments
      and symlinks included); anything outside the resolved root: no match
    - the root itself, missing files and directories: no match (no index
      documents); a file path followed by "/" is a directory path: no match
    - files the process cannot read: no match
    - filesystem errors (NUL bytes, overlong names): no match

Every miss is logged at DEBUG.

A ``None`` result is the pass-through signal: the caller continues with its
own routing, which answers 404 when nothing else matches.

Example::

    config = StaticConfig(enabled=True, root=Path("./public"))
    found = resolve("/css/site.css", config)
    if found is not None:
        print(found.size, found.last_modified_header)
"""

from __future__ import annotations

import logging
import mimetypes
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from email.utils import formatdate
from pathlib import Path
from typing import BinaryIO

__all__ = ["DEFAULT_CHUNK_SIZE", "ResolvedFile", "StaticConfig", "resolve"]

DEFAULT_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger("stoa_asgi.static")

mimetypes.add_type("application/javascript", ".js")
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("image/svg+xml", ".svg")


@dataclass(frozen=True)
class StaticConfig:
    """Snapshot of the static-serving settings read on each request.

    Attributes:
        enabled: Whether static files are served at all.
        root: Public directory, or None when unset.
    """

    enabled: bool = False
    root: Path | None = None


@dataclass(frozen=True)
class ResolvedFile:
    """A regular file found under the public root.

    Attributes:
        path: Absolute, fully resolved file path.
        size: File size in bytes.
        last_modified: Modification time as POSIX timestamp.
    """

    path: Path
    size: int
    last_modified: float

    @property
    def media_type(self) -> str:
        """MIME type guessed from the extension."""
        guessed, _ = mimetypes.guess_type(self.path.name)
        return guessed or "application/octet-stream"

    @property
    def last_modified_header(self) -> str:
        """Modification time formatted for the Last-Modified header."""
        return formatdate(self.last_modified, usegmt=True)

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield file content lazily, at most ``size`` bytes.

        The file handle lives in the generator frame, so closing the generator
        early (client gone) releases it as well.
        """
        with self.path.open("rb") as fh:
            yield from self.read_chunks(fh, chunk_size)

    def read_chunks(self, fh: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Read up to ``size`` bytes from an open handle of this file.

        Bytes appended after the ``stat()`` are not sent, so the body never
        exceeds the ``Content-Length`` announced from ``size``.
        """
        remaining = self.size
        while remaining > 0:
            chunk = fh.read(min(chunk_size, remaining))
            if not chunk:
                return
            remaining -= len(chunk)
            yield chunk


def resolve(request_path: str, config: StaticConfig) -> ResolvedFile | None:
    """Find the file for ``request_path`` under ``config.root``.

    Args:
        request_path: URL path, already percent-decoded.
        config: Current static settings.

    Returns:
        ResolvedFile, or None to let the caller fall through.
    """
    if not config.enabled or config.root is None:
        return None

    try:
        root = Path(config.root).resolve()
        candidate = (root / request_path.lstrip("/")).resolve()
        if not candidate.relative_to(root).parts:
            logger.debug(f"Static miss (root itself): {request_path!r}")
            return None
        st = candidate.stat()
    except ValueError:
        logger.debug(f"Static miss (outside root or invalid): {request_path!r}")
        return None
    except OSError as e:
        logger.debug(f"Static miss ({e.__class__.__name__}): {request_path!r}")
        return None

    if not stat.S_ISREG(st.st_mode):
        logger.debug(f"Static miss (not a regular file): {request_path!r}")
        return None

    # "file.txt/" names a directory
    if request_path.endswith("/"):
        logger.debug(f"Static miss (trailing slash on a file): {request_path!r}")
        return None

    if not os.access(candidate, os.R_OK):
        logger.debug(f"Static miss (not readable): {request_path!r}")
        return None

    logger.debug(f"Static hit: {request_path!r} -> {candidate}")
    return ResolvedFile(path=candidate, size=st.st_size, last_modified=st.st_mtime)
