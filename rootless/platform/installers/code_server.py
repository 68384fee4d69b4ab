#!/usr/bin/env python3
"""
Rootless Setup code-server Provider
Release tarball unpacked under <prefix>/lib with a symlink in the bin dir
"""

import logging
from pathlib import Path

from rootless.errors import InstallFailure
from rootless.platform.detector import OSType, PlatformTag
from rootless.platform.installers.base import (
    ArtifactHandle,
    InstalledArtifact,
    remove_path,
    replace_tree,
)
from rootless.platform.installers.http import HttpToolProvider

logger = logging.getLogger(__name__)

RELEASES = "https://github.com/coder/code-server/releases/download"
OS_NAMES = {OSType.DARWIN: 'macos'}


class CodeServerProvider(HttpToolProvider):
    """code-server provider"""

    def resolve_version(self) -> str:
        version = self.pinned_version() or self.latest_github_release('coder/code-server')
        return version.lstrip('v')

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        os_name, arch = platform.vendor(OS_NAMES)
        filename = f"code-server-{version}-{os_name}-{arch}.tar.gz"
        archive = self.download(f"{RELEASES}/v{version}/{filename}", workdir / filename)
        return ArtifactHandle(self.name, version, platform, archive, 'archive')

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        os_name, arch = handle.platform.vendor(OS_NAMES)
        unpacked = self.extract(handle.path, handle.path.parent / 'unpacked')
        source = unpacked / f"code-server-{handle.version}-{os_name}-{arch}"
        if not (source / 'bin' / 'code-server').exists():
            raise InstallFailure(f"{handle.path.name} does not contain bin/code-server")

        # Only one release is kept
        for old in self._release_dirs():
            logger.info("Removing old release %s", old)
            remove_path(old)

        target = self.descriptor.install_root / f"code-server-{handle.version}"
        replace_tree(source, target)

        link = self.env.bin_dir / 'code-server'
        link.parent.mkdir(parents=True, exist_ok=True)
        if link.exists() or link.is_symlink():
            link.unlink()
        link.symlink_to(target / 'bin' / 'code-server')

        return InstalledArtifact(self.name, (target, link), handle.version)

    def known_artifact(self) -> InstalledArtifact:
        return InstalledArtifact(
            self.name,
            tuple(self._release_dirs()) + (self.env.bin_dir / 'code-server',),
        )

    def _release_dirs(self):
        root = self.descriptor.install_root
        if not root.is_dir():
            return []
        return sorted(p for p in root.glob('code-server-*') if p.is_dir())

    def notices(self):
        return ["Start it with: code-server"]
