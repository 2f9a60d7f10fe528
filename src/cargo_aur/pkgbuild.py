# SPDX-License-Identifier: MIT
"""PKGBUILD rendering.

makepkg sources the PKGBUILD as bash, so every line written here has to be
valid shell: arrays are ``name=("a" "b")`` and the description is single
quoted.
"""

from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Sequence, TextIO

from .errors import PackagingIOError
from .hosting import source_url

if TYPE_CHECKING:
    from .metadata import DependencySet, Manifest

PKGBUILD_FILENAME = "PKGBUILD"
PKGREL = 1
OUTPUT_FILE_MODE = 0o644
GENERATED_BY = (
    "# This PKGBUILD was generated by `cargo aur`: https://crates.io/crates/cargo-aur"
)


def single_quoted(value: str) -> str:
    """Quote a value for bash, escaping embedded single quotes.

    Examples:
        >>> single_quoted("it's fast")
        "'it'\\\\''s fast'"
    """
    escaped = value.replace("'", "'\\''")
    return f"'{escaped}'"


def render_array(name: str, items: Sequence[str]) -> str:
    """Render a bash array of double-quoted items, or "" when items is empty.

    Examples:
        >>> render_array("depends", ["git", "bat"])
        'depends=("git" "bat")'
        >>> render_array("depends", [])
        ''
    """
    if not items:
        return ""
    return f"{name}=(" + " ".join(f'"{item}"' for item in items) + ")"


def render_dependencies(deps: "DependencySet") -> str:
    """Render the depends/optdepends arrays.

    Empty lists are omitted entirely. When both are present they are
    separated by exactly one newline. No trailing newline is added.
    """
    rendered = [
        render_array("depends", deps.depends),
        render_array("optdepends", deps.optdepends),
    ]
    return "\n".join(r for r in rendered if r)


def render_pkgbuild(
    sink: TextIO,
    manifest: "Manifest",
    sha256: str,
    licenses: Sequence[Path],
) -> None:
    """Write a complete PKGBUILD to sink.

    Args:
        sink: Text stream to write to
        manifest: Parsed Cargo.toml
        sha256: Hex digest of the release tarball
        licenses: Extra license files bundled in the tarball
    """
    package = manifest.package
    source = source_url(package.git_host(), package)

    for author in package.authors:
        sink.write(f"# Maintainer: {author}\n")
    sink.write("#\n")
    sink.write(f"{GENERATED_BY}\n")
    sink.write("\n")
    sink.write(f"pkgname={package.name}-bin\n")
    sink.write(f"pkgver={package.version}\n")
    sink.write(f"pkgrel={PKGREL}\n")
    sink.write(f"pkgdesc={single_quoted(package.description)}\n")
    sink.write(f'url="{package.homepage}"\n')
    sink.write(f'license=("{package.license}")\n')
    sink.write(f"arch=('{package.architecture}')\n")
    sink.write(f'provides=("{package.name}")\n')
    sink.write(f'conflicts=("{package.name}")\n')

    dependencies = render_dependencies(package.dependencies())
    if dependencies:
        sink.write(f"{dependencies}\n")

    sink.write(f'source=("{source}")\n')
    sink.write(f'sha256sums=("{sha256}")\n')
    sink.write("\n")
    sink.write("package() {\n")
    for name in manifest.binary_names():
        sink.write(f'    install -Dm755 {name} -t "$pkgdir/usr/bin"\n')
    for license_file in licenses:
        name = license_file.name
        sink.write(f'    install -Dm644 {name} "$pkgdir/usr/share/licenses/$pkgname/{name}"\n')
    sink.write("}\n")


def pkgbuild_text(manifest: "Manifest", sha256: str, licenses: Sequence[Path]) -> str:
    """Render a PKGBUILD to a string."""
    buffer = io.StringIO()
    render_pkgbuild(buffer, manifest, sha256, licenses)
    return buffer.getvalue()


def write_pkgbuild(
    path: str | Path,
    manifest: "Manifest",
    sha256: str,
    licenses: Sequence[Path],
) -> Path:
    """Render a PKGBUILD and write it to path as UTF-8.

    The file only appears once it has been completely written.

    Raises:
        PackagingIOError: If the file can't be written
    """
    target = Path(path)
    content = pkgbuild_text(manifest, sha256, licenses)

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".PKGBUILD.", suffix=".tmp", dir=target.parent)
    except OSError as e:
        raise PackagingIOError(f"Failed to write {target}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(tmp_path, OUTPUT_FILE_MODE)
        os.replace(tmp_path, target)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise PackagingIOError(f"Failed to write {target}: {e}") from e

    return target
