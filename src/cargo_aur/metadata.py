# SPDX-License-Identifier: MIT
"""Cargo.toml metadata for AUR packaging.

This module reads the ``[package]`` and ``[[bin]]`` sections of a Cargo
manifest into read-only dataclasses. Extra AUR dependencies can be declared
in two places:

    [package.metadata.aur]      # preferred
    depends = ["git"]
    optdepends = ["bat: colored output"]

    [package.metadata]          # deprecated, still honoured
    depends = ["git"]

When ``[package.metadata.aur]`` exists it always wins.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ManifestError, PackagingIOError
from .hosting import GitHost, classify_repository

ARCHITECTURE = "x86_64"
ARCHIVE_EXTENSION = "tar.gz"

# Fields of [package] that must be present and non-empty
REQUIRED_PACKAGE_FIELDS = ("name", "version", "description", "license", "repository")


@dataclass(frozen=True)
class DependencySet:
    """Effective runtime dependencies for the PKGBUILD.

    Attributes:
        depends: Mandatory dependencies
        optdepends: Optional dependencies, usually "name: reason"
    """

    depends: tuple[str, ...] = ()
    optdepends: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.depends and not self.optdepends


@dataclass(frozen=True)
class AurMetadata:
    """The ``[package.metadata.aur]`` table."""

    depends: tuple[str, ...] = ()
    optdepends: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageMetadata:
    """The ``[package.metadata]`` table.

    Attributes:
        depends: Deprecated top-level dependency list
        optdepends: Deprecated top-level optional dependency list
        aur: The preferred ``[package.metadata.aur]`` table, if declared
    """

    depends: tuple[str, ...] = ()
    optdepends: tuple[str, ...] = ()
    aur: Optional[AurMetadata] = None


@dataclass(frozen=True)
class Binary:
    """A ``[[bin]]`` target."""

    name: str


@dataclass(frozen=True)
class Package:
    """The ``[package]`` section of Cargo.toml.

    Attributes:
        name: Crate name
        version: Crate version
        authors: Author strings in declaration order
        description: One-line description
        homepage: Project homepage (falls back to repository)
        repository: Source repository URL
        license: SPDX license identifier or expression
        metadata: Optional ``[package.metadata]`` table
    """

    name: str
    version: str
    description: str
    repository: str
    license: str
    homepage: str = ""
    authors: tuple[str, ...] = ()
    metadata: Optional[PackageMetadata] = None

    architecture = ARCHITECTURE
    archive_extension = ARCHIVE_EXTENSION

    def tarball_file_name(self) -> str:
        """The name of the tarball that should be produced from this package.

        Examples:
            >>> Package("foo", "1.2.0", "d", "https://github.com/a/foo", "MIT").tarball_file_name()
            'foo-1.2.0-x86_64.tar.gz'
        """
        return f"{self.name}-{self.version}-{self.architecture}.{self.archive_extension}"

    def git_host(self) -> GitHost:
        return classify_repository(self.repository)

    def dependencies(self) -> DependencySet:
        deps, _ = resolve_dependencies(self)
        return deps

    def uses_legacy_metadata(self) -> bool:
        """Whether dependencies are only declared in the deprecated location."""
        _, used_legacy = resolve_dependencies(self)
        return used_legacy


def resolve_dependencies(package: Package) -> tuple[DependencySet, bool]:
    """Reconcile where extra dependency information is read from.

    Returns:
        Tuple of (effective dependencies, whether the legacy
        ``[package.metadata]`` lists were used)
    """
    metadata = package.metadata
    if metadata is None:
        return DependencySet(), False

    if metadata.aur is not None:
        return DependencySet(metadata.aur.depends, metadata.aur.optdepends), False

    legacy = DependencySet(metadata.depends, metadata.optdepends)
    return legacy, not legacy.is_empty()


@dataclass(frozen=True)
class Manifest:
    """A parsed Cargo.toml, limited to what AUR packaging needs.

    Attributes:
        package: The ``[package]`` section
        bins: ``[[bin]]`` targets in declaration order
    """

    package: Package
    bins: tuple[Binary, ...] = field(default_factory=tuple)

    def primary_binary_name(self) -> str:
        """The name of the compiled binary that should be copied to the tarball."""
        if self.bins:
            return self.bins[0].name
        return self.package.name

    def additional_binary_names(self) -> list[str]:
        return [b.name for b in self.bins[1:]]

    def binary_names(self) -> list[str]:
        return [self.primary_binary_name(), *self.additional_binary_names()]

    @classmethod
    def from_cargo_toml(cls, cargo_toml_path: str | Path) -> "Manifest":
        """Load a Manifest from a Cargo.toml file.

        Raises:
            PackagingIOError: If the file can't be read
            ManifestError: If the file is invalid or missing required fields
        """
        path = Path(cargo_toml_path)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise PackagingIOError(f"Cargo.toml not found: {path}") from e
        except OSError as e:
            raise PackagingIOError(f"Failed to read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ManifestError(f"Invalid TOML syntax in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ManifestError(f"{path} is not valid UTF-8: {e}") from e

        return cls.from_cargo_dict(data)

    @classmethod
    def from_cargo_dict(cls, data: dict[str, Any]) -> "Manifest":
        """Create a Manifest from a parsed Cargo.toml dictionary.

        Raises:
            ManifestError: If required fields are missing or have the wrong type
        """
        package_table = data.get("package")
        if not isinstance(package_table, dict):
            raise ManifestError("Missing required section: [package]")

        values: dict[str, str] = {}
        for key in REQUIRED_PACKAGE_FIELDS:
            value = package_table.get(key)
            if isinstance(value, dict) and value.get("workspace"):
                raise ManifestError(
                    f"[package].{key} is inherited from the workspace; "
                    "run cargo aur from a crate that declares it directly"
                )
            if not value:
                raise ManifestError(f"Missing required field: [package].{key}")
            values[key] = _expect_str(value, f"[package].{key}")

        homepage = package_table.get("homepage") or values["repository"]
        authors = _expect_str_list(package_table.get("authors", []), "[package].authors")

        metadata = None
        metadata_table = package_table.get("metadata")
        if metadata_table is not None:
            metadata = _parse_metadata(metadata_table)

        package = Package(
            name=values["name"],
            version=values["version"],
            description=values["description"],
            repository=values["repository"],
            license=values["license"],
            homepage=_expect_str(homepage, "[package].homepage"),
            authors=tuple(authors),
            metadata=metadata,
        )

        bins: list[Binary] = []
        raw_bins = data.get("bin", [])
        if not isinstance(raw_bins, list):
            raise ManifestError("[[bin]] must be an array of tables")
        for i, entry in enumerate(raw_bins):
            if not isinstance(entry, dict) or not entry.get("name"):
                raise ManifestError(f"[[bin]] entry {i} is missing a name")
            bins.append(Binary(name=_expect_str(entry["name"], f"[[bin]] entry {i} name")))

        return cls(package=package, bins=tuple(bins))


def _parse_metadata(table: Any) -> PackageMetadata:
    if not isinstance(table, dict):
        raise ManifestError("[package.metadata] must be a table")

    aur = None
    aur_table = table.get("aur")
    if aur_table is not None:
        if not isinstance(aur_table, dict):
            raise ManifestError("[package.metadata.aur] must be a table")
        aur = AurMetadata(
            depends=tuple(
                _expect_str_list(aur_table.get("depends", []), "[package.metadata.aur].depends")
            ),
            optdepends=tuple(
                _expect_str_list(
                    aur_table.get("optdepends", []), "[package.metadata.aur].optdepends"
                )
            ),
        )

    return PackageMetadata(
        depends=tuple(_expect_str_list(table.get("depends", []), "[package.metadata].depends")),
        optdepends=tuple(
            _expect_str_list(table.get("optdepends", []), "[package.metadata].optdepends")
        ),
        aur=aur,
    )


def _expect_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ManifestError(f"{where} must be a string")
    return value


def _expect_str_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"{where} must be an array of strings")
    return value
