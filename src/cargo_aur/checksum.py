# SPDX-License-Identifier: MIT
"""Checksum utilities for tarball integrity verification."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from .errors import PackagingIOError

CHUNK_SIZE = 8192


def compute_sha256_stream(stream: BinaryIO) -> str:
    """Compute SHA256 hash from a binary stream.

    Args:
        stream: Binary file-like object, read until EOF in CHUNK_SIZE chunks

    Returns:
        Lowercase hex-encoded SHA256 hash

    Raises:
        PackagingIOError: If the stream can't be read to completion
    """
    sha256 = hashlib.sha256()
    try:
        for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
            sha256.update(chunk)
    except OSError as e:
        raise PackagingIOError(f"Failed to read stream: {e}") from e
    return sha256.hexdigest()


def compute_sha256_file(file_path: str | Path) -> str:
    """Compute SHA256 hash of a file.

    Args:
        file_path: Path to the file

    Returns:
        Lowercase hex-encoded SHA256 hash

    Raises:
        PackagingIOError: If the file can't be opened or read
    """
    try:
        with open(file_path, "rb") as f:
            return compute_sha256_stream(f)
    except OSError as e:
        raise PackagingIOError(f"Failed to read {file_path}: {e}") from e
