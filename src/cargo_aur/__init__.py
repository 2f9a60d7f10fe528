# SPDX-License-Identifier: MIT
"""Prepare Rust projects for release on the Arch User Repository.

This package turns a crate's Cargo.toml into AUR release artifacts:
- A release tarball (.tar.gz) with the compiled binaries and LICENSE files
- A PKGBUILD that downloads, verifies and installs that tarball

Example:
    >>> from pathlib import Path
    >>> from cargo_aur import PipelineConfig, run
    >>>
    >>> result = run(PipelineConfig(project_dir=Path(".")))
    >>> result.tarball.path
    PosixPath('target/cargo-aur/my_crate-1.0.0-x86_64.tar.gz')
    >>> result.pkgbuild_path
    PosixPath('target/cargo-aur/PKGBUILD')
"""

__version__ = "1.7.0"

from .archive import ArchiveResult, build_package, write_tarball
from .checksum import compute_sha256_file, compute_sha256_stream
from .errors import (
    CargoAurError,
    ManifestError,
    MissingLicenseError,
    MissingMuslTargetError,
    PackagingIOError,
    ToolchainError,
)
from .hosting import DEFAULT_GIT_HOST, GitHost, classify_repository, source_url
from .licenses import (
    DEFAULT_STANDARD_LICENSES,
    LICENSE_PREFIX,
    collect_license_files,
    find_license_files,
    is_standard_license,
)
from .metadata import (
    ARCHITECTURE,
    ARCHIVE_EXTENSION,
    AurMetadata,
    Binary,
    DependencySet,
    Manifest,
    Package,
    PackageMetadata,
    resolve_dependencies,
)
from .pipeline import OUTPUT_SUBDIR, PipelineConfig, PipelineResult, run
from .pkgbuild import (
    PKGBUILD_FILENAME,
    pkgbuild_text,
    render_array,
    render_dependencies,
    render_pkgbuild,
    write_pkgbuild,
)
from .toolchain import MUSL_TARGET, CargoToolchain

__all__ = [
    # Errors
    "CargoAurError",
    "ManifestError",
    "MissingLicenseError",
    "MissingMuslTargetError",
    "PackagingIOError",
    "ToolchainError",
    # Metadata
    "ARCHITECTURE",
    "ARCHIVE_EXTENSION",
    "AurMetadata",
    "Binary",
    "DependencySet",
    "Manifest",
    "Package",
    "PackageMetadata",
    "resolve_dependencies",
    # Hosting
    "DEFAULT_GIT_HOST",
    "GitHost",
    "classify_repository",
    "source_url",
    # Licenses
    "DEFAULT_STANDARD_LICENSES",
    "LICENSE_PREFIX",
    "collect_license_files",
    "find_license_files",
    "is_standard_license",
    # Toolchain
    "MUSL_TARGET",
    "CargoToolchain",
    # Archive
    "ArchiveResult",
    "build_package",
    "write_tarball",
    # Checksum
    "compute_sha256_file",
    "compute_sha256_stream",
    # PKGBUILD
    "PKGBUILD_FILENAME",
    "pkgbuild_text",
    "render_array",
    "render_dependencies",
    "render_pkgbuild",
    "write_pkgbuild",
    # Pipeline
    "OUTPUT_SUBDIR",
    "PipelineConfig",
    "PipelineResult",
    "run",
]
