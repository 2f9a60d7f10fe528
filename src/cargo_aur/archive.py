# SPDX-License-Identifier: MIT
"""Release tarball builder.

The tarball is flat: the compiled binaries and any extra LICENSE files sit at
the archive root. Its bytes only depend on the inputs' contents, so building
twice from the same binary gives the same sha256sum:

- entries are added in a fixed order (primary binary, other binaries in
  declaration order, then license files in the order given)
- tar headers carry no timestamps or owner information
- the gzip header has no timestamp or original file name
"""

from __future__ import annotations

import gzip
import logging
import os
import tarfile
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .errors import PackagingIOError
from .toolchain import CargoToolchain

if TYPE_CHECKING:
    from .metadata import Manifest

logger = logging.getLogger(__name__)

BINARY_MODE = 0o755
LICENSE_MODE = 0o644
ARCHIVE_MODE = 0o644
COMPRESS_LEVEL = 9

# Suffixes dropped from binary names in the tarball
EXECUTABLE_SUFFIXES = (".exe",)


@dataclass
class ArchiveResult:
    """Result of tarball building.

    Attributes:
        path: Path to the created .tar.gz file
        filename: Name of the created file
        files_included: Archive entry names, in archive order
        size: Size of the archive in bytes
    """

    path: Path
    filename: str
    files_included: list[str]
    size: int


def bare_binary_name(path: Path) -> str:
    """File name of a compiled binary without a platform executable suffix.

    Examples:
        >>> bare_binary_name(Path("target/release/foo.exe"))
        'foo'
        >>> bare_binary_name(Path("target/release/foo"))
        'foo'
    """
    if path.suffix in EXECUTABLE_SUFFIXES:
        return path.stem
    return path.name


def _tarinfo(arcname: str, size: int, mode: int) -> tarfile.TarInfo:
    info = tarfile.TarInfo(arcname)
    info.size = size
    info.mode = mode
    info.mtime = 0
    info.uid = info.gid = 0
    info.uname = info.gname = ""
    info.type = tarfile.REGTYPE
    return info


def write_tarball(entries: list[tuple[Path, str, int]], archive_path: Path) -> None:
    """Write a reproducible .tar.gz at archive_path.

    The archive is written to a temporary file next to archive_path and moved
    into place once complete, so a failed write never leaves a partial file.

    Args:
        entries: (source file, archive name, mode) triples in archive order
        archive_path: Destination of the tarball

    Raises:
        PackagingIOError: If a source can't be read or the archive can't be written
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{archive_path.name}.", suffix=".tmp", dir=archive_path.parent
        )
    except OSError as e:
        raise PackagingIOError(f"Failed to write {archive_path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as raw:
            with gzip.GzipFile(
                filename="", mode="wb", fileobj=raw, compresslevel=COMPRESS_LEVEL, mtime=0
            ) as gz:
                with tarfile.open(fileobj=gz, mode="w", format=tarfile.GNU_FORMAT) as tar:
                    for source, arcname, mode in entries:
                        with open(source, "rb") as f:
                            size = os.fstat(f.fileno()).st_size
                            tar.addfile(_tarinfo(arcname, size, mode), f)
            raw.flush()
            os.fsync(raw.fileno())
        os.chmod(tmp_path, ARCHIVE_MODE)
        os.replace(tmp_path, archive_path)
    except (OSError, tarfile.TarError) as e:
        tmp_path.unlink(missing_ok=True)
        raise PackagingIOError(f"Failed to write {archive_path}: {e}") from e
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def collect_entries(
    manifest: "Manifest",
    licenses: list[Path],
    toolchain: CargoToolchain,
    musl: bool = False,
) -> list[tuple[Path, str, int]]:
    """Work out what goes into the tarball, in archive order.

    Raises:
        PackagingIOError: If a compiled binary or license file is missing
    """
    entries: list[tuple[Path, str, int]] = []

    for name in manifest.binary_names():
        binary = toolchain.binary_path(name, musl)
        if not binary.is_file():
            raise PackagingIOError(f"Compiled binary not found: {binary}")
        entries.append((binary, bare_binary_name(binary), BINARY_MODE))

    for license_file in licenses:
        if not license_file.is_file():
            raise PackagingIOError(f"License file not found: {license_file}")
        entries.append((license_file, license_file.name, LICENSE_MODE))

    return entries


def build_package(
    manifest: "Manifest",
    output_dir: str | Path,
    licenses: list[Path],
    musl: bool = False,
    toolchain: Optional[CargoToolchain] = None,
    project_dir: str | Path = ".",
    compile: bool = True,
) -> ArchiveResult:
    """Compile the crate and bundle its binaries into a release tarball.

    Args:
        manifest: Parsed Cargo.toml
        output_dir: Directory to write the tarball to (created if missing)
        licenses: Extra license files to bundle
        musl: Build a static binary with the MUSL target
        toolchain: Toolchain to compile with (defaults to cargo in project_dir)
        project_dir: Crate root, used when no toolchain is given
        compile: Run cargo before bundling; False reuses existing binaries

    Returns:
        ArchiveResult with information about the created tarball

    Raises:
        ToolchainError: If compiling fails
        PackagingIOError: If a binary is missing or the tarball can't be written
    """
    output_path = Path(output_dir)
    try:
        output_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PackagingIOError(f"Failed to create {output_path}: {e}") from e

    if toolchain is None:
        toolchain = CargoToolchain(project_dir)

    if compile:
        toolchain.build(musl)
        for name in manifest.binary_names():
            binary = toolchain.binary_path(name, musl)
            if binary.is_file():
                toolchain.strip(binary)

    entries = collect_entries(manifest, licenses, toolchain, musl)

    filename = manifest.package.tarball_file_name()
    archive_path = output_path / filename
    write_tarball(entries, archive_path)

    files_included = [arcname for _, arcname, _ in entries]
    logger.debug("Wrote %s: %s", archive_path, ", ".join(files_included))

    return ArchiveResult(
        path=archive_path,
        filename=filename,
        files_included=files_included,
        size=archive_path.stat().st_size,
    )
