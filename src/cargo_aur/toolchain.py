# SPDX-License-Identifier: MIT
"""Cargo toolchain invocation.

Compiles the crate in release mode and locates the resulting binaries under
``target/``. With ``musl=True`` the static x86_64-unknown-linux-musl target is
used instead of the host target.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import MissingMuslTargetError, ToolchainError

logger = logging.getLogger(__name__)

MUSL_TARGET = "x86_64-unknown-linux-musl"


class CargoToolchain:
    """Runs cargo, rustup and strip for a project directory."""

    def __init__(
        self,
        project_dir: str | Path,
        cargo: str = "cargo",
        strip: str = "strip",
        rustup: str = "rustup",
    ) -> None:
        self.project_dir = Path(project_dir)
        self.cargo = cargo
        self.strip_command = strip
        self.rustup = rustup

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        logger.debug("Running command: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            raise ToolchainError(f"Executable not found: {cmd[0]}") from None
        except OSError as e:
            raise ToolchainError(f"Failed to run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            raise ToolchainError(
                f"Command failed with exit code {result.returncode}: {' '.join(cmd)}\n"
                f"{result.stderr}{result.stdout}"
            )
        return result

    def build(self, musl: bool = False) -> None:
        """Run ``cargo build --release``."""
        cmd = [self.cargo, "build", "--release"]
        if musl:
            cmd.append(f"--target={MUSL_TARGET}")
        self._run(cmd)

    def ensure_musl_target(self) -> None:
        """Check that the MUSL target is installed through rustup.

        Raises:
            MissingMuslTargetError: If the target isn't listed as installed
            ToolchainError: If rustup can't be run
        """
        result = self._run([self.rustup, "target", "list", "--installed"])
        installed = {line.strip() for line in result.stdout.splitlines()}
        if MUSL_TARGET not in installed:
            raise MissingMuslTargetError(MUSL_TARGET)

    def binary_path(self, name: str, musl: bool = False) -> Path:
        """Where cargo puts the release binary called ``name``."""
        if musl:
            return self.project_dir / "target" / MUSL_TARGET / "release" / name
        return self.project_dir / "target" / "release" / name

    def strip(self, binary: Path) -> None:
        """Strip debug symbols from a binary in place.

        A missing ``strip`` executable only skips the step.
        """
        if shutil.which(self.strip_command) is None:
            logger.warning("%s not found, leaving %s unstripped", self.strip_command, binary)
            return
        self._run([self.strip_command, str(binary)])
