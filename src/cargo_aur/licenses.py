# SPDX-License-Identifier: MIT
"""LICENSE file discovery.

Licenses shipped by Arch's ``licenses`` package don't need their text copied
into the package. Anything else needs a ``LICENSE*`` file in the project root,
which is put in the tarball and installed to /usr/share/licenses manually.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import AbstractSet

from .errors import MissingLicenseError, PackagingIOError

LICENSE_PREFIX = "LICENSE"

# Licenses available from the Arch Linux `licenses` package, minus those
# unlikely to be used by Rust crates.
DEFAULT_STANDARD_LICENSES: frozenset[str] = frozenset(
    {
        "AGPL-3.0-only",
        "AGPL-3.0-or-later",
        "Apache-2.0",
        "BSL-1.0",  # Boost Software License
        "GPL-2.0-only",
        "GPL-2.0-or-later",
        "GPL-3.0-only",
        "GPL-3.0-or-later",
        "LGPL-2.0-only",
        "LGPL-2.0-or-later",
        "LGPL-3.0-only",
        "LGPL-3.0-or-later",
        "MPL-2.0",  # Mozilla Public License
        "Unlicense",  # Not to be confused with "Unlicensed"
    }
)

# Separators of alternatives in an SPDX expression, e.g. "MIT OR Apache-2.0"
# or the older "MIT/Apache-2.0".
_SPDX_SEPARATOR = re.compile(r"\s+OR\s+|\s+AND\s+|/")


def is_standard_license(license: str, standard_licenses: AbstractSet[str]) -> bool:
    """Check whether every part of a license expression is a standard license.

    Examples:
        >>> is_standard_license("Apache-2.0", DEFAULT_STANDARD_LICENSES)
        True
        >>> is_standard_license("MIT OR Apache-2.0", DEFAULT_STANDARD_LICENSES)
        False
    """
    parts = [p.strip("() ") for p in _SPDX_SEPARATOR.split(license)]
    parts = [p for p in parts if p]
    return bool(parts) and all(p in standard_licenses for p in parts)


def collect_license_files(
    directory: str | Path,
    standard_licenses: AbstractSet[str] = DEFAULT_STANDARD_LICENSES,
) -> list[Path]:
    """Collect the ``LICENSE*`` files at the top level of a directory.

    Args:
        directory: Project root to scan (not recursive)
        standard_licenses: Names that are never treated as extra license files

    Returns:
        Paths sorted by file name

    Raises:
        PackagingIOError: If the directory can't be listed
    """
    try:
        with os.scandir(directory) as entries:
            names = [
                entry.name
                for entry in entries
                if entry.name.startswith(LICENSE_PREFIX)
                and entry.name not in standard_licenses
                and entry.is_file()
            ]
    except OSError as e:
        raise PackagingIOError(f"Failed to list {directory}: {e}") from e

    return [Path(directory) / name for name in sorted(names)]


def find_license_files(
    directory: str | Path,
    license: str,
    standard_licenses: AbstractSet[str] = DEFAULT_STANDARD_LICENSES,
) -> list[Path]:
    """Collect license files, failing if the declared license needs one.

    Args:
        directory: Project root to scan
        license: The ``[package].license`` value from Cargo.toml
        standard_licenses: Licenses provided by the Arch ``licenses`` package

    Returns:
        License files to ship, possibly empty when the license is standard

    Raises:
        MissingLicenseError: If no file was found and the license isn't standard
        PackagingIOError: If the directory can't be listed
    """
    licenses = collect_license_files(directory, standard_licenses)
    if not licenses and not is_standard_license(license, standard_licenses):
        raise MissingLicenseError(license)
    return licenses
