#!/usr/bin/env python3
"""
Rootless Setup Configuration Management
Handles the optional config.yml and the environment snapshot taken at startup
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """
    Read-only snapshot of the invoking user's environment.

    Taken once per run. Nothing in rootless writes back to os.environ; exported
    variables only reach future shells through the profile files.
    """
    home: Path
    install_base: Path
    bin_dir: Path
    lib_dir: Path
    config_dir: Path
    path_entries: Tuple[str, ...] = ()
    shell: str = ''

    @classmethod
    def from_os(cls, environ: Optional[Mapping[str, str]] = None,
                home: Optional[Path] = None) -> 'Environment':
        """
        Build the snapshot from environment variables

        Args:
            environ: Mapping to read (default: os.environ)
            home: Home directory override (default: Path.home())

        Returns:
            Environment with rootless locations resolved
        """
        environ = os.environ if environ is None else environ
        home = Path(home) if home is not None else Path.home()

        install_base = _env_path(environ, 'ROOTLESS_PREFIX') or home / '.local'
        bin_dir = _env_path(environ, 'XDG_BIN_HOME') or install_base / 'bin'
        config_dir = _env_path(environ, 'XDG_CONFIG_HOME') or home / '.config'

        return cls(
            home=home,
            install_base=install_base,
            bin_dir=bin_dir,
            lib_dir=install_base / 'lib',
            config_dir=config_dir,
            path_entries=tuple(p for p in environ.get('PATH', '').split(os.pathsep) if p),
            shell=Path(environ.get('SHELL', '')).name,
        )

    def on_path(self, directory: Path) -> bool:
        """Check if directory is in the PATH of the current session"""
        return str(directory) in self.path_entries

    def shell_path(self, path: Path) -> str:
        """Render a path for a profile file, using $HOME where possible"""
        try:
            relative = Path(path).relative_to(self.home)
        except ValueError:
            return str(path)
        if str(relative) == '.':
            return '$HOME'
        return f'$HOME/{relative.as_posix()}'


def _env_path(environ: Mapping[str, str], name: str) -> Optional[Path]:
    value = environ.get(name, '').strip()
    if not value:
        return None
    return Path(value).expanduser()


@dataclass
class RootlessConfig:
    """Rootless Setup configuration structure"""

    # Shell startup files managed by rootless; missing ones are skipped
    profile_files: List[str] = field(default_factory=lambda: [
        '~/.bashrc',
        '~/.zshrc',
    ])

    # Seconds before a version query or download gives up
    http_timeout: float = 30.0

    # Per-tool version pins, take precedence over tool-versions.lock
    versions: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RootlessConfig':
        """Create config from dictionary"""
        config = cls()

        profiles = data.get('profile_files')
        if isinstance(profiles, list):
            if profiles:
                config.profile_files = [str(p) for p in profiles]
        elif profiles is not None:
            logger.warning("Ignoring profile_files %r, expected a list of paths", profiles)

        timeout = data.get('http_timeout', config.http_timeout)
        try:
            config.http_timeout = max(1.0, float(timeout))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid http_timeout %r", timeout)

        versions = data.get('versions')
        if isinstance(versions, dict):
            config.versions = {str(k): str(v) for k, v in versions.items()}
        elif versions is not None:
            logger.warning("Ignoring versions %r, expected a tool: version mapping", versions)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for YAML export"""
        return {
            'profile_files': self.profile_files,
            'http_timeout': self.http_timeout,
            'versions': self.versions,
        }

    def resolve_profiles(self, env: Environment) -> List[Path]:
        """Expand ~ in the configured profile paths against the snapshot home"""
        resolved = []
        for entry in self.profile_files:
            path = env.home / entry[2:] if entry.startswith('~/') else Path(entry)
            if path not in resolved:
                resolved.append(path)
        return resolved


class ConfigManager:
    """Manage Rootless Setup configuration files"""

    DEFAULT_CONFIG_NAME = "config.yml"

    @staticmethod
    def find_config(env: Environment, environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        """
        Locate the config file

        Args:
            env: Environment snapshot
            environ: Mapping checked for ROOTLESS_CONFIG (default: os.environ)

        Returns:
            Path to the config file or None if not found
        """
        environ = os.environ if environ is None else environ
        explicit = _env_path(environ, 'ROOTLESS_CONFIG')
        if explicit is not None:
            return explicit

        candidate = env.config_dir / 'rootless' / ConfigManager.DEFAULT_CONFIG_NAME
        if candidate.exists():
            return candidate

        return None

    @staticmethod
    def load_config(config_path: Optional[Path] = None) -> RootlessConfig:
        """
        Load configuration from YAML

        Args:
            config_path: Path to config file (None = defaults)

        Returns:
            RootlessConfig object
        """
        if config_path is None or not config_path.exists():
            return RootlessConfig()

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)
            return RootlessConfig()

        if not isinstance(data, dict):
            return RootlessConfig()

        return RootlessConfig.from_dict(data)

    @staticmethod
    def save_config(config: RootlessConfig, config_path: Path) -> bool:
        """
        Save configuration as YAML

        Args:
            config: RootlessConfig object
            config_path: Path where to save

        Returns:
            True if successful
        """
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w') as f:
                yaml.dump(
                    config.to_dict(),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2
                )
            return True
        except OSError as e:
            logger.error("Failed to save config to %s: %s", config_path, e)
            return False
