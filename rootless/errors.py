#!/usr/bin/env python3
"""
Rootless Setup Errors
Error taxonomy shared by the detector, providers, profile mutator and lifecycle
"""

from pathlib import Path
from typing import Iterable, List


class RootlessError(Exception):
    """Base class for every error raised by rootless"""

    # Fatal errors abort the running operation, the rest become report warnings
    fatal = True


class PrerequisiteMissing(RootlessError):
    """A required external command is not on PATH"""

    def __init__(self, command: str, hint: str = ''):
        self.command = command
        self.hint = hint
        message = f"'{command}' is required but not installed"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class UnsupportedPlatform(RootlessError):
    """The host (os, arch) pair has no canonical mapping"""

    def __init__(self, os_name: str, arch: str):
        self.os = os_name
        self.arch = arch
        super().__init__(f"Unsupported platform: {os_name}/{arch}")


class ResolutionFailure(RootlessError):
    """The version source is unreachable or returned no match"""


class ArtifactUnavailable(RootlessError):
    """No distribution exists for the requested version and platform"""


class InstallFailure(RootlessError):
    """Placing or building an artifact under the prefix failed"""


class ProfileMutationFailure(RootlessError):
    """A shell profile could not be read or rewritten"""

    fatal = False

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not update {path}: {reason}")


class PurgeIncomplete(RootlessError):
    """Some installed paths survived an uninstall"""

    fatal = False

    def __init__(self, paths: Iterable[Path]):
        self.paths: List[Path] = list(paths)
        listed = ', '.join(str(p) for p in self.paths)
        super().__init__(f"Could not remove: {listed}")
