#!/usr/bin/env python3
"""
Rootless Setup direnv Provider
Single static binary from the direnv GitHub releases
"""

from pathlib import Path

from rootless.platform.detector import PlatformTag
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact
from rootless.platform.installers.http import HttpToolProvider

RELEASES = "https://github.com/direnv/direnv/releases/download"


class DirenvProvider(HttpToolProvider):
    """direnv provider (version pinned in tool-versions.lock)"""

    def resolve_version(self) -> str:
        return self.pinned_version() or self.latest_github_release('direnv/direnv')

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        os_name, arch = platform.vendor()
        url = f"{RELEASES}/{version}/direnv.{os_name}-{arch}"
        binary = self.download(url, workdir / 'direnv')
        return ArtifactHandle(self.name, version, platform, binary, 'binary')

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        target = self.install_binary(handle.path, self.env.bin_dir / 'direnv')
        return InstalledArtifact(self.name, (target,), handle.version)

    def known_artifact(self) -> InstalledArtifact:
        return InstalledArtifact(self.name, (self.env.bin_dir / 'direnv',))

    def notices(self):
        return [
            "Use it per project: echo 'layout uv' > .envrc && direnv allow",
        ]
