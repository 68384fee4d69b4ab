#!/usr/bin/env python3
"""
Rootless Setup Git Provider
Provider for tools installed as a git checkout (pyenv, nvm)
"""

import logging
from pathlib import Path
from typing import List, Tuple

from rootless.errors import ArtifactUnavailable, InstallFailure, ResolutionFailure
from rootless.platform.detector import PlatformTag
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact, replace_tree
from rootless.platform.installers.http import HttpToolProvider

logger = logging.getLogger(__name__)


class GitToolProvider(HttpToolProvider):
    """
    Clone a repository into the scratch directory, check out the resolved
    ref, then swap it in for the previous checkout.
    """

    prerequisites = ('git',)
    repo_url: str = ''
    # Subdirectories carried over from the previous checkout on reinstall
    preserve: Tuple[str, ...] = ()

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        checkout = workdir / self.name
        try:
            self.run_command(['git', 'clone', '--quiet', self.repo_url, str(checkout)])
        except InstallFailure as e:
            raise ArtifactUnavailable(f"Could not clone {self.repo_url}: {e}") from e
        if version != 'HEAD':
            try:
                self.run_command(['git', '-C', str(checkout), 'checkout', '--quiet', version])
            except InstallFailure as e:
                raise ArtifactUnavailable(f"{self.repo_url} has no ref {version}") from e
        return ArtifactHandle(self.name, version, platform, checkout, 'git')

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        root = self.descriptor.install_root
        # Stage next to the old checkout so preserved data moves by rename
        staging = root.with_name(f'{root.name}.rootless-new')
        replace_tree(handle.path, staging)
        for name in self.preserve:
            previous = root / name
            if previous.is_dir() and not (staging / name).exists():
                logger.info("Keeping %s from the previous installation", previous)
                previous.rename(staging / name)
        replace_tree(staging, root)
        return InstalledArtifact(self.name, (root,), handle.version)

    def known_artifact(self) -> InstalledArtifact:
        return InstalledArtifact(self.name, (self.descriptor.install_root,))

    def remote_head(self) -> str:
        """Commit id of the remote default branch"""
        try:
            result = self.run_command(['git', 'ls-remote', self.repo_url, 'HEAD'])
        except InstallFailure as e:
            raise ResolutionFailure(f"Could not query {self.repo_url}: {e}") from e
        fields: List[str] = result.stdout.split()
        if not fields:
            raise ResolutionFailure(f"{self.repo_url} returned no HEAD")
        return fields[0]
