# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for cargo-aur tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import pytest
from click.testing import CliRunner

from cargo_aur.errors import MissingMuslTargetError
from cargo_aur.toolchain import MUSL_TARGET, CargoToolchain

CARGO_TOML = """[package]
name = "foo"
version = "1.2.0"
authors = ["Jane Doe <jane@example.com>"]
description = "A test crate"
homepage = "https://github.com/a/foo"
repository = "https://github.com/a/foo"
license = "MIT"
"""

BINARY_CONTENT = b"\x7fELF fake binary"


class FakeToolchain(CargoToolchain):
    """Toolchain that writes placeholder binaries instead of running cargo."""

    def __init__(self, project_dir: Path, binaries: list[str], musl_installed: bool = True):
        super().__init__(project_dir)
        self.binaries = binaries
        self.musl_installed = musl_installed
        self.builds: list[bool] = []
        self.stripped: list[Path] = []

    def build(self, musl: bool = False) -> None:
        self.builds.append(musl)
        for name in self.binaries:
            path = self.binary_path(name, musl)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(BINARY_CONTENT + name.encode())

    def ensure_musl_target(self) -> None:
        if not self.musl_installed:
            raise MissingMuslTargetError(MUSL_TARGET)

    def strip(self, binary: Path) -> None:
        self.stripped.append(binary)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def crate_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a crate directory with Cargo.toml and a LICENSE file."""
    project_dir = tmp_path / "foo"
    project_dir.mkdir()
    (project_dir / "Cargo.toml").write_text(CARGO_TOML)
    (project_dir / "LICENSE").write_text("MIT License\n")
    yield project_dir


@pytest.fixture
def fake_toolchain(crate_dir: Path) -> FakeToolchain:
    """A toolchain for crate_dir that "compiles" a single foo binary."""
    return FakeToolchain(crate_dir, ["foo"])


@pytest.fixture
def make_toolchain() -> Callable[..., CargoToolchain]:
    """Factory for fake toolchains with a chosen set of binaries."""

    def factory(
        project_dir: Path, binaries: list[str], musl_installed: bool = True
    ) -> CargoToolchain:
        return FakeToolchain(project_dir, binaries, musl_installed=musl_installed)

    return factory
