#!/usr/bin/env python3
"""
Rootless Setup uv Provider
Runs the official uv installer with profile editing disabled
"""

from pathlib import Path

from rootless.platform.detector import PlatformTag
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact
from rootless.platform.installers.http import HttpToolProvider

INSTALLER_URL = "https://astral.sh/uv/{version}/install.sh"


class UvProvider(HttpToolProvider):
    """uv provider"""

    prerequisites = ('sh',)

    def resolve_version(self) -> str:
        return self.pinned_version() or self.latest_github_release('astral-sh/uv')

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        script = self.download(INSTALLER_URL.format(version=version), workdir / 'uv-install.sh')
        return ArtifactHandle(self.name, version, platform, script, 'script')

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        # The installer must not touch profiles, rootless owns them
        self.run_command(
            ['sh', str(handle.path)],
            extra_env={
                'UV_NO_MODIFY_PATH': '1',
                'UV_INSTALL_DIR': str(self.env.bin_dir),
            },
        )
        artifact = self.known_artifact()
        return InstalledArtifact(self.name, artifact.paths, handle.version)

    def known_artifact(self) -> InstalledArtifact:
        return InstalledArtifact(self.name, (
            self.env.bin_dir / 'uv',
            self.env.bin_dir / 'uvx',
            self.env.config_dir / 'uv' / 'uv-receipt.json',
        ))
