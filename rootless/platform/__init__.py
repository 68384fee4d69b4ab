"""
Rootless Setup Platform Detection & Installation
Platform tags, version pins and tool providers
"""

from rootless.platform.detector import (
    Arch,
    OSType,
    PlatformDetector,
    PlatformTag,
    detect_platform,
)

__all__ = [
    'Arch',
    'OSType',
    'PlatformDetector',
    'PlatformTag',
    'detect_platform',
]
