#!/usr/bin/env python3
"""
Rootless Setup Base Provider Class
Base class for tool providers: version resolution, fetch, placement and purge
"""

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from rootless.config import Environment, RootlessConfig
from rootless.errors import InstallFailure, PrerequisiteMissing
from rootless.platform.detector import PlatformTag
from rootless.platform.version_manager import LOCK_FILE_NAME, VersionManager

if TYPE_CHECKING:
    from rootless.tools import ToolDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactHandle:
    """A fetched artifact waiting in the scratch directory"""
    tool: str
    version: str
    platform: PlatformTag
    path: Path
    # binary | archive | source | script | git
    kind: str


@dataclass(frozen=True)
class InstalledArtifact:
    """Paths a provider created under the rootless prefix"""
    tool: str
    paths: Tuple[Path, ...]
    version: Optional[str] = None


class ToolProvider(ABC):
    """
    Abstract base class for tool providers.

    Subclasses must define:
    - resolve_version(): version to install, no disk side effects
    - fetch(): download/build into the scratch directory
    - place(): move the artifact under the prefix, replacing a prior install
    - known_artifact(): the paths place() creates, used by uninstall
    """

    # External commands that must be on PATH before anything is touched
    prerequisites: Tuple[str, ...] = ()

    def __init__(self, descriptor: 'ToolDescriptor', env: Environment,
                 config: Optional[RootlessConfig] = None,
                 versions: Optional[VersionManager] = None):
        self.descriptor = descriptor
        self.env = env
        self.config = config or RootlessConfig()
        self.versions = versions or VersionManager(
            overrides=self.config.versions,
            user_lock_file=env.config_dir / 'rootless' / LOCK_FILE_NAME,
        )

    @property
    def name(self) -> str:
        return self.descriptor.name

    def check_prerequisites(self, commands: Optional[Sequence[str]] = None) -> None:
        """
        Ensure required commands exist

        Args:
            commands: Commands to check (default: the class prerequisites)

        Raises:
            PrerequisiteMissing: for the first missing command
        """
        for command in self.prerequisites if commands is None else commands:
            if shutil.which(command) is None:
                raise PrerequisiteMissing(command, f"Please install {command} first.")

    def pinned_version(self) -> Optional[str]:
        """Version pinned in config.yml or tool-versions.lock"""
        return self.versions.get_version(self.name)

    @abstractmethod
    def resolve_version(self) -> str:
        """
        Determine the version to install

        Raises:
            ResolutionFailure: if the source is unreachable or has no match
        """

    @abstractmethod
    def fetch(self, version: str, platform: PlatformTag, workdir: Path) -> ArtifactHandle:
        """
        Download or build the artifact inside workdir

        Raises:
            ArtifactUnavailable: if nothing matches the platform
        """

    @abstractmethod
    def place(self, handle: ArtifactHandle) -> InstalledArtifact:
        """Install the artifact under the prefix, replacing any prior install"""

    @abstractmethod
    def known_artifact(self) -> InstalledArtifact:
        """The deterministic set of paths this provider installs"""

    def purge(self, artifact: InstalledArtifact) -> List[Path]:
        """
        Delete the artifact's paths

        Args:
            artifact: Paths to remove

        Returns:
            Paths that still exist after removal (missing ones are fine)
        """
        leftovers = []
        for path in artifact.paths:
            try:
                remove_path(path)
            except OSError as e:
                logger.warning("Could not remove %s: %s", path, e)
                leftovers.append(path)
        return leftovers

    def notices(self) -> List[str]:
        """Extra hints shown after a successful install"""
        return []

    def run_command(self, cmd: List[str], cwd: Optional[Path] = None,
                    extra_env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
        """
        Run a command, raising InstallFailure when it fails

        Args:
            cmd: Command and arguments
            cwd: Working directory
            extra_env: Variables added to the child environment only

        Returns:
            CompletedProcess result
        """
        env = None
        if extra_env:
            env = dict(os.environ)
            env.update(extra_env)
        logger.debug("Running %s", ' '.join(cmd))
        try:
            result = subprocess.run(
                cmd, cwd=cwd, env=env, capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise InstallFailure(f"{cmd[0]} could not be started: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()[-500:]
            raise InstallFailure(f"{' '.join(cmd)} failed ({result.returncode}): {detail}")
        return result


def remove_path(path: Path) -> bool:
    """
    Remove a file, symlink or directory tree

    Returns:
        True if something was removed, False if the path was already gone
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def replace_tree(source: Path, destination: Path) -> None:
    """Move source to destination, removing whatever was there before"""
    if destination.exists() or destination.is_symlink():
        logger.info("Removing existing installation at %s", destination)
        remove_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))
