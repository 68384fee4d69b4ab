#!/usr/bin/env python3
"""
Rootless Setup SQLite Provider
Prebuilt sqlite-tools binary when one exists for the platform, otherwise
an autoconf source build installed with --prefix=<prefix>
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

from rootless.errors import ArtifactUnavailable, InstallFailure, ResolutionFailure
from rootless.platform.detector import Arch, OSType, PlatformTag
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact
from rootless.platform.installers.http import HttpToolProvider

logger = logging.getLogger(__name__)

SQLITE_SITE = "https://www.sqlite.org/"
DOWNLOAD_PAGE = f"{SQLITE_SITE}download.html"

OS_NAMES = {OSType.DARWIN: 'osx'}
ARCH_NAMES = {Arch.AMD64: 'x64'}

# (os, arch) pairs with an official sqlite-tools build
BINARY_PLATFORMS = {
    ('osx', 'x64'),
    ('osx', 'arm64'),
    ('linux', 'x64'),
}

BUILD_TOOLS = ('make', 'cc')

SOURCE_PATTERN = r'(\d{{4}}/sqlite-autoconf-{version}\.tar\.gz)'
BINARY_PATTERN = r'(\d{{4}}/sqlite-tools-{os}-{arch}-{version}\.zip)'


class SqliteProvider(HttpToolProvider):
    """SQLite CLI provider"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._page: Optional[str] = None

    def download_page(self) -> str:
        if self._page is None:
            self._page = self.get_text(DOWNLOAD_PAGE)
        return self._page

    def resolve_version(self) -> str:
        pinned = self.pinned_version()
        if pinned:
            return pinned

        # Every release ships an autoconf tarball, its number is the version
        match = re.search(r'sqlite-autoconf-(\d+)\.tar\.gz', self.download_page())
        if not match:
            raise ResolutionFailure("Could not find the latest SQLite version")
        return match.group(1)

    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        os_name, arch = platform.vendor(OS_NAMES, ARCH_NAMES)
        page = self.download_page()

        relative = None
        kind = 'source'
        if (os_name, arch) in BINARY_PLATFORMS:
            relative = _find(page, BINARY_PATTERN.format(os=os_name, arch=arch, version=version))
            if relative:
                kind = 'binary'
            else:
                logger.warning("No sqlite-tools binary for %s-%s, building from source", os_name, arch)

        if relative is None:
            relative = _find(page, SOURCE_PATTERN.format(version=version))
            if relative is None:
                raise ArtifactUnavailable(f"No SQLite {version} download for {platform}")
            # Fail before downloading when the build cannot run
            self.check_prerequisites(BUILD_TOOLS)

        filename = relative.rsplit('/', 1)[-1]
        archive = self.download(f"{SQLITE_SITE}{relative}", workdir / filename)
        return ArtifactHandle(self.name, version, platform, archive, kind)

    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        unpacked = self.extract(handle.path, handle.path.parent / 'unpacked')
        if handle.kind == 'binary':
            return self._place_binary(handle, unpacked)
        return self._build_source(handle, unpacked)

    def _place_binary(self, handle: ArtifactHandle, unpacked: Path) -> InstalledArtifact:
        candidates = sorted(p for p in unpacked.rglob('sqlite3') if p.is_file())
        if not candidates:
            raise InstallFailure(f"sqlite3 binary not found in {handle.path.name}")
        target = self.install_binary(candidates[0], self.env.bin_dir / 'sqlite3')
        return InstalledArtifact(self.name, (target,), handle.version)

    def _build_source(self, handle: ArtifactHandle, unpacked: Path) -> InstalledArtifact:
        sources = sorted(p for p in unpacked.glob('sqlite-autoconf-*') if p.is_dir())
        if not sources:
            raise InstallFailure(f"No source tree in {handle.path.name}")
        source = sources[0]
        prefix = self.env.install_base

        logger.info("Building SQLite %s from source", handle.version)
        self.run_command(['./configure', f'--prefix={prefix}', f'--bindir={self.env.bin_dir}'], cwd=source)
        self.run_command(['make', f'-j{os.cpu_count() or 2}'], cwd=source)
        self.run_command(['make', 'install'], cwd=source)

        installed = [p for p in self.known_artifact().paths if p.exists() or p.is_symlink()]
        return InstalledArtifact(self.name, tuple(installed), handle.version)

    def known_artifact(self) -> InstalledArtifact:
        prefix = self.env.install_base
        lib_dir = self.env.lib_dir
        paths = [
            self.env.bin_dir / 'sqlite3',
            prefix / 'include' / 'sqlite3.h',
            prefix / 'include' / 'sqlite3ext.h',
            lib_dir / 'pkgconfig' / 'sqlite3.pc',
            prefix / 'share' / 'man' / 'man1' / 'sqlite3.1',
        ]
        if lib_dir.is_dir():
            paths.extend(sorted(lib_dir.glob('libsqlite3*')))
        return InstalledArtifact(self.name, tuple(paths))


def _find(page: str, pattern: str) -> Optional[str]:
    match = re.search(pattern, page)
    return match.group(1) if match else None
