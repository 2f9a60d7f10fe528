# SPDX-License-Identifier: MIT
"""Code hosting detection and PKGBUILD source URLs.

The repository URL from Cargo.toml decides where the release tarball is
expected to be downloaded from:

- GitHub: {repository}/releases/download/$pkgver/{name}-$pkgver-x86_64.tar.gz
- GitLab: {repository}/-/archive/$pkgver/{name}-$pkgver-x86_64.tar.gz

``$pkgver`` is left as-is for makepkg to expand.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .metadata import Package


GITHUB_PREFIX = "https://github"
GITLAB_PREFIX = "https://gitlab"


class GitHost(Enum):
    """Known shapes of code hosting providers."""

    GITHUB = "github"
    GITLAB = "gitlab"
    UNKNOWN = "unknown"


# Hosts we can't classify get GitHub-style release URLs.
DEFAULT_GIT_HOST = GitHost.GITHUB


def classify_repository(repository: str) -> GitHost:
    """Classify a repository URL by its prefix.

    The match is case-sensitive and only looks at the start of the string.

    Examples:
        >>> classify_repository("https://github.com/fosskers/cargo-aur")
        <GitHost.GITHUB: 'github'>
        >>> classify_repository("https://gitlab.com/x/y")
        <GitHost.GITLAB: 'gitlab'>
        >>> classify_repository("https://codeberg.org/x/y")
        <GitHost.UNKNOWN: 'unknown'>
    """
    if repository.startswith(GITHUB_PREFIX):
        return GitHost.GITHUB
    if repository.startswith(GITLAB_PREFIX):
        return GitHost.GITLAB
    return GitHost.UNKNOWN


def source_url(host: GitHost, package: "Package") -> str:
    """Build the PKGBUILD ``source`` URL for a package on the given host.

    Args:
        host: Hosting variant, usually from classify_repository()
        package: Package providing the repository URL and name

    Returns:
        URL template containing a literal ``$pkgver``
    """
    if host is GitHost.UNKNOWN:
        host = DEFAULT_GIT_HOST

    repository = package.repository.rstrip("/")
    tarball = f"{package.name}-$pkgver-{package.architecture}.{package.archive_extension}"

    if host is GitHost.GITLAB:
        return f"{repository}/-/archive/$pkgver/{tarball}"
    return f"{repository}/releases/download/$pkgver/{tarball}"
