# SPDX-License-Identifier: MIT
"""The end-to-end cargo-aur run.

Steps run strictly in order, and any error stops the run:

1. create target/cargo-aur
2. read Cargo.toml
3. find LICENSE files (skipped on dry runs, like everything below)
4. remove any PKGBUILD left by an earlier run
5. compile and build the release tarball
6. hash the tarball
7. write the PKGBUILD

The PKGBUILD is only written after the tarball has been written, closed and
hashed, so a failure never leaves a PKGBUILD that points at a bad tarball.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Callable, Optional

from .archive import ArchiveResult, build_package
from .checksum import compute_sha256_file
from .errors import PackagingIOError
from .hosting import GitHost
from .licenses import DEFAULT_STANDARD_LICENSES, find_license_files
from .metadata import Manifest
from .pkgbuild import PKGBUILD_FILENAME, write_pkgbuild
from .toolchain import CargoToolchain

logger = logging.getLogger(__name__)

OUTPUT_SUBDIR = Path("target") / "cargo-aur"
CARGO_TOML = "Cargo.toml"

LEGACY_METADATA_WARNING = (
    "Use of [package.metadata] is deprecated. "
    "Please specify extra dependencies under [package.metadata.aur]."
)
MANUAL_LICENSE_WARNING = "LICENSE file will be installed manually."
UNKNOWN_HOST_WARNING = (
    "Repository {repository} is not hosted on GitHub or GitLab; "
    "assuming GitHub-style release URLs in the PKGBUILD source."
)

WarningCallback = Callable[[str], None]


@dataclass
class PipelineConfig:
    """Options for a cargo-aur run.

    Attributes:
        project_dir: Crate root containing Cargo.toml and LICENSE files
        musl: Build a static binary with the MUSL target
        dry_run: Validate Cargo.toml without building anything
        standard_licenses: Licenses that don't need a LICENSE file
        toolchain: Toolchain override (defaults to cargo in project_dir)
    """

    project_dir: Path = field(default_factory=Path.cwd)
    musl: bool = False
    dry_run: bool = False
    standard_licenses: AbstractSet[str] = DEFAULT_STANDARD_LICENSES
    toolchain: Optional[CargoToolchain] = None

    @property
    def output_dir(self) -> Path:
        return self.project_dir / OUTPUT_SUBDIR

    @property
    def cargo_toml(self) -> Path:
        return self.project_dir / CARGO_TOML


@dataclass
class PipelineResult:
    """Result of a cargo-aur run.

    Attributes:
        manifest: The parsed Cargo.toml
        git_host: Hosting variant detected from the repository URL
        used_legacy_metadata: Dependencies came from [package.metadata]
        licenses: Extra license files shipped in the tarball
        tarball: The built tarball, None on dry runs
        sha256: Hex digest of the tarball, None on dry runs
        pkgbuild_path: Path of the written PKGBUILD, None on dry runs
    """

    manifest: Manifest
    git_host: GitHost
    used_legacy_metadata: bool
    licenses: list[Path] = field(default_factory=list)
    tarball: Optional[ArchiveResult] = None
    sha256: Optional[str] = None
    pkgbuild_path: Optional[Path] = None


def _log_warning(message: str) -> None:
    logger.warning(message)


def run(config: PipelineConfig, warn: Optional[WarningCallback] = None) -> PipelineResult:
    """Produce the release tarball and PKGBUILD for a crate.

    Args:
        config: Run options
        warn: Called with user-facing warnings (defaults to logging)

    Returns:
        PipelineResult describing what was produced

    Raises:
        ManifestError: If Cargo.toml is invalid
        MissingLicenseError: If a LICENSE file is required but absent
        MissingMuslTargetError: If --musl is used without the target installed
        PackagingIOError: On filesystem or toolchain failures
    """
    warn = warn or _log_warning
    output_dir = config.output_dir

    # Make sure the tarball can be written before doing any real work.
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PackagingIOError(f"Failed to create {output_dir}: {e}") from e

    manifest = Manifest.from_cargo_toml(config.cargo_toml)
    package = manifest.package

    used_legacy = package.uses_legacy_metadata()
    if used_legacy:
        warn(LEGACY_METADATA_WARNING)

    git_host = package.git_host()
    result = PipelineResult(
        manifest=manifest,
        git_host=git_host,
        used_legacy_metadata=used_legacy,
    )

    if config.dry_run:
        return result

    if git_host is GitHost.UNKNOWN:
        warn(UNKNOWN_HOST_WARNING.format(repository=package.repository))

    toolchain = config.toolchain or CargoToolchain(config.project_dir)
    if config.musl:
        toolchain.ensure_musl_target()

    licenses = find_license_files(config.project_dir, package.license, config.standard_licenses)
    if licenses:
        warn(MANUAL_LICENSE_WARNING)
    result.licenses = licenses

    # A PKGBUILD from an earlier run would not match the tarball built below.
    pkgbuild_path = output_dir / PKGBUILD_FILENAME
    try:
        pkgbuild_path.unlink(missing_ok=True)
    except OSError as e:
        raise PackagingIOError(f"Failed to remove old {pkgbuild_path}: {e}") from e

    tarball = build_package(
        manifest,
        output_dir,
        licenses,
        musl=config.musl,
        toolchain=toolchain,
    )
    result.tarball = tarball
    logger.info("Built %s (%d bytes)", tarball.filename, tarball.size)

    result.sha256 = compute_sha256_file(tarball.path)
    result.pkgbuild_path = write_pkgbuild(pkgbuild_path, manifest, result.sha256, licenses)
    return result
