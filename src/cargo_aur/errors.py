# SPDX-License-Identifier: MIT
"""Exceptions raised while producing AUR release artifacts."""

from __future__ import annotations


class CargoAurError(Exception):
    """Base exception for all cargo-aur errors."""

    pass


class ManifestError(CargoAurError):
    """Raised when Cargo.toml is malformed or missing required fields."""

    pass


class PackagingIOError(CargoAurError):
    """Raised when a filesystem or stream operation fails."""

    pass


class ToolchainError(PackagingIOError):
    """Raised when the native toolchain fails to produce a binary."""

    pass


class MissingLicenseError(CargoAurError):
    """Raised when no LICENSE file is found for a non-standard license."""

    def __init__(self, license: str | None = None):
        message = "Missing LICENSE file. See https://choosealicense.com/"
        if license:
            message = f"{message} ({license} is not provided by the Arch 'licenses' package)"
        super().__init__(message)
        self.license = license


class MissingMuslTargetError(CargoAurError):
    """Raised when --musl is requested but the MUSL target isn't installed."""

    def __init__(self, target: str):
        super().__init__(
            f"Missing target {target}. Install it with: rustup target add {target}"
        )
        self.target = target
