#!/usr/bin/env python3
"""
Rootless Setup Platform Detection
Maps the host OS and machine architecture to a canonical platform tag
"""

import logging
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from rootless.errors import UnsupportedPlatform

logger = logging.getLogger(__name__)


class OSType(Enum):
    """Supported operating systems"""
    LINUX = "linux"
    DARWIN = "darwin"


class Arch(Enum):
    """Supported CPU architectures"""
    AMD64 = "amd64"
    ARM64 = "arm64"


# Raw identifiers as reported by uname / platform, lowercased
OS_ALIASES: Dict[str, OSType] = {
    'linux': OSType.LINUX,
    'darwin': OSType.DARWIN,
}

ARCH_ALIASES: Dict[str, Arch] = {
    'x86_64': Arch.AMD64,
    'amd64': Arch.AMD64,
    'aarch64': Arch.ARM64,
    'arm64': Arch.ARM64,
}


@dataclass(frozen=True)
class PlatformTag:
    """Canonical (os, arch) pair used to pick an artifact variant"""
    os: OSType
    arch: Arch

    def __str__(self) -> str:
        return f"{self.os.value}/{self.arch.value}"

    def vendor(self, os_map: Optional[Dict[OSType, str]] = None,
               arch_map: Optional[Dict[Arch, str]] = None) -> tuple:
        """
        Translate the tag into a vendor's release naming

        Args:
            os_map: Overrides for OS names (e.g. DARWIN -> 'macos')
            arch_map: Overrides for arch names (e.g. AMD64 -> 'x64')

        Returns:
            Tuple of (os_name, arch_name)
        """
        os_map = os_map or {}
        arch_map = arch_map or {}
        return (
            os_map.get(self.os, self.os.value),
            arch_map.get(self.arch, self.arch.value),
        )


class PlatformDetector:
    """
    Detect the canonical platform tag of the host
    """

    def __init__(self, system: Optional[str] = None, machine: Optional[str] = None):
        self.system = system
        self.machine = machine

    def detect(self) -> PlatformTag:
        """
        Map the reported OS name and machine string to a PlatformTag

        Returns:
            PlatformTag for the host

        Raises:
            UnsupportedPlatform: if either dimension has no mapping
        """
        system = self.system if self.system is not None else platform.system()
        machine = self.machine if self.machine is not None else platform.machine()

        os_type = OS_ALIASES.get(system.strip().lower())
        arch = ARCH_ALIASES.get(machine.strip().lower())
        if os_type is None or arch is None:
            raise UnsupportedPlatform(system, machine)

        tag = PlatformTag(os=os_type, arch=arch)
        logger.debug("Detected platform %s (raw %s/%s)", tag, system, machine)
        return tag


def detect_platform() -> PlatformTag:
    """Detect the platform of the running host"""
    return PlatformDetector().detect()


def linux_distro(os_release: Path = Path('/etc/os-release')) -> str:
    """Get the Linux distribution ID ('' when unknown)"""
    if os_release.exists():
        try:
            with open(os_release, 'r') as f:
                for line in f:
                    if line.startswith('ID='):
                        return line.split('=', 1)[1].strip().strip('"').lower()
        except OSError:
            logger.debug("Could not read %s", os_release)
    return ''
