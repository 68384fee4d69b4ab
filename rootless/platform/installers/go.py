#!/usr/bin/env python3
"""
Rootless Setup Go Provider
Official Go tarballs from go.dev unpacked to <prefix>/go
"""

from pathlib import Path

from rootless.errors import InstallFailure, ResolutionFailure
from rootless.platform.detector import PlatformTag
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact, replace_tree
from rootless.platform.installers.http import HttpToolProvider

GO_DOWNLOADS = "https://go.dev/dl/"


class GoProvider(HttpToolProvider):
    """Go toolchain provider"""

    def resolve_version(self) -> str:
        pinned = self.pinned_version()
        if pinned:
            return pinned if pinned.startswith('go') else f'go{pinned}'

        releases = self.get_json(f"{GO_DOWNLOADS}?mode=json")
        if not isinstance(releases, list):
            raise ResolutionFailure(f"Unexpected reply from {GO_DOWNLOADS}: {str(releases)[:200]}")
        for release in releases:
            if isinstance(release, dict) and release.get('stable') and release.get('version'):
                return release['version']
        raise ResolutionFailure("Could not fetch the latest Go version")

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        os_name, arch = platform.vendor()
        filename = f"{version}.{os_name}-{arch}.tar.gz"
        archive = self.download(f"{GO_DOWNLOADS}{filename}", workdir / filename)
        return ArtifactHandle(self.name, version, platform, archive, 'archive')

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        unpacked = self.extract(handle.path, handle.path.parent / 'unpacked')
        goroot = unpacked / 'go'
        if not (goroot / 'bin').is_dir():
            raise InstallFailure(f"{handle.path.name} does not contain go/bin")
        replace_tree(goroot, self.descriptor.install_root)
        return InstalledArtifact(self.name, (self.descriptor.install_root,), handle.version)

    def known_artifact(self) -> InstalledArtifact:
        # GOPATH ($HOME/go) holds user code and is never touched
        return InstalledArtifact(self.name, (self.descriptor.install_root,))
