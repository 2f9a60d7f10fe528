# SPDX-License-Identifier: MIT
"""Tests for PKGBUILD rendering."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
from hypothesis import given, strategies as st

from cargo_aur.errors import PackagingIOError
from cargo_aur.metadata import DependencySet, Manifest
from cargo_aur.pkgbuild import (
    pkgbuild_text,
    render_array,
    render_dependencies,
    render_pkgbuild,
    single_quoted,
    write_pkgbuild,
)

SHA256 = "a" * 64

EXPECTED_PKGBUILD = """# Maintainer: Jane Doe <jane@example.com>
#
# This PKGBUILD was generated by `cargo aur`: https://crates.io/crates/cargo-aur

pkgname=foo-bin
pkgver=1.2.0
pkgrel=1
pkgdesc='A test crate'
url="https://github.com/a/foo"
license=("MIT")
arch=('x86_64')
provides=("foo")
conflicts=("foo")
source=("https://github.com/a/foo/releases/download/$pkgver/foo-$pkgver-x86_64.tar.gz")
sha256sums=("aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa")

package() {
    install -Dm755 foo -t "$pkgdir/usr/bin"
    install -Dm644 LICENSE "$pkgdir/usr/share/licenses/$pkgname/LICENSE"
}
"""

DEP_NAMES = st.lists(
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-:. ", min_size=1, max_size=15),
    max_size=4,
)


def manifest(bins: tuple[str, ...] = (), **package: Any) -> Manifest:
    table = {
        "name": "foo",
        "version": "1.2.0",
        "authors": ["Jane Doe <jane@example.com>"],
        "description": "A test crate",
        "repository": "https://github.com/a/foo",
        "license": "MIT",
    }
    table.update(package)
    return Manifest.from_cargo_dict({"package": table, "bin": [{"name": b} for b in bins]})


class TestRenderArray:
    def test_single(self):
        assert render_array("depends", ["git"]) == 'depends=("git")'

    def test_many(self):
        assert render_array("depends", ["a", "b", "c"]) == 'depends=("a" "b" "c")'

    def test_empty(self):
        assert render_array("depends", []) == ""


class TestRenderDependencies:
    """Tests for the depends/optdepends block."""

    def test_depends_only(self):
        assert render_dependencies(DependencySet(("a", "b"), ())) == 'depends=("a" "b")'

    def test_optdepends_only(self):
        assert render_dependencies(DependencySet((), ("c",))) == 'optdepends=("c")'

    def test_both_empty(self):
        assert render_dependencies(DependencySet()) == ""

    def test_both(self):
        assert (
            render_dependencies(DependencySet(("a",), ("b: for bees",)))
            == 'depends=("a")\noptdepends=("b: for bees")'
        )

    @given(depends=DEP_NAMES, optdepends=DEP_NAMES)
    def test_newlines(self, depends, optdepends):
        rendered = render_dependencies(DependencySet(tuple(depends), tuple(optdepends)))

        assert rendered.count("\n") == (1 if depends and optdepends else 0)
        assert ("depends=(" in rendered.split("\n")[0]) == bool(depends or optdepends)
        assert ("optdepends=" in rendered) == bool(optdepends)
        assert not rendered.endswith("\n")


class TestSingleQuoted:
    def test_plain(self):
        assert single_quoted("A test crate") == "'A test crate'"

    def test_embedded_quote(self):
        assert single_quoted("it's fast") == "'it'\\''s fast'"


class TestRenderPkgbuild:
    """Tests for the full PKGBUILD."""

    def test_exact_output(self):
        text = pkgbuild_text(manifest(), SHA256, [Path("LICENSE")])
        assert text == EXPECTED_PKGBUILD

    def test_render_to_sink(self):
        sink = io.StringIO()
        render_pkgbuild(sink, manifest(), SHA256, [Path("LICENSE")])
        assert sink.getvalue() == EXPECTED_PKGBUILD

    def test_no_dependency_fields_when_empty(self):
        text = pkgbuild_text(manifest(), SHA256, [])
        assert "depends" not in text

    def test_dependencies(self):
        text = pkgbuild_text(
            manifest(metadata={"aur": {"depends": ["a", "b"], "optdepends": ["c"]}}),
            SHA256,
            [],
        )
        assert 'conflicts=("foo")\ndepends=("a" "b")\noptdepends=("c")\nsource=(' in text

    def test_legacy_dependencies(self):
        text = pkgbuild_text(manifest(metadata={"depends": ["a", "b"]}), SHA256, [])

        assert 'depends=("a" "b")\nsource=(' in text
        assert "optdepends" not in text

    def test_gitlab_source(self):
        text = pkgbuild_text(manifest(repository="https://gitlab.com/a/foo"), SHA256, [])
        assert (
            'source=("https://gitlab.com/a/foo/-/archive/$pkgver/foo-$pkgver-x86_64.tar.gz")'
            in text
        )

    def test_no_license_install_without_files(self):
        text = pkgbuild_text(manifest(license="Apache-2.0"), SHA256, [])

        assert "install -Dm644" not in text
        assert 'license=("Apache-2.0")' in text

    def test_multiple_license_files(self):
        text = pkgbuild_text(manifest(), SHA256, [Path("LICENSE-APACHE"), Path("LICENSE-MIT")])

        assert (
            'install -Dm644 LICENSE-APACHE "$pkgdir/usr/share/licenses/$pkgname/LICENSE-APACHE"'
            in text
        )
        assert 'install -Dm644 LICENSE-MIT "$pkgdir/usr/share/licenses/$pkgname/LICENSE-MIT"' in text

    def test_binaries(self):
        text = pkgbuild_text(manifest(bins=("foo-cli", "foo-daemon")), SHA256, [])

        assert 'install -Dm755 foo-cli -t "$pkgdir/usr/bin"\n' in text
        assert 'install -Dm755 foo-daemon -t "$pkgdir/usr/bin"\n' in text
        assert "install -Dm755 foo -t" not in text

    def test_no_authors(self):
        text = pkgbuild_text(manifest(authors=[]), SHA256, [])
        assert text.startswith("#\n# This PKGBUILD was generated")

    def test_quoted_description(self):
        text = pkgbuild_text(manifest(description="Bob's tool"), SHA256, [])
        assert "pkgdesc='Bob'\\''s tool'\n" in text


class TestWritePkgbuild:
    def test_writes_utf8(self, tmp_path: Path):
        path = write_pkgbuild(
            tmp_path / "PKGBUILD", manifest(description="Über fast"), SHA256, []
        )

        assert path == tmp_path / "PKGBUILD"
        assert "pkgdesc='Über fast'" in path.read_text(encoding="utf-8")
        assert [p.name for p in tmp_path.iterdir()] == ["PKGBUILD"]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(PackagingIOError):
            write_pkgbuild(tmp_path / "nope" / "PKGBUILD", manifest(), SHA256, [])
