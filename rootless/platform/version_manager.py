#!/usr/bin/env python3
"""
Rootless Setup Version Manager

Resolves pinned tool versions from tool-versions.lock and the user config.
Lookup order: config.yml overrides, the user lock file, the packaged lock file.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import toml

logger = logging.getLogger(__name__)

DEFAULT_LOCK_FILE = Path(__file__).parent.parent / "tool-versions.lock"
LOCK_FILE_NAME = "tool-versions.lock"


class VersionManager:
    """Manages pinned versions of provisioned tools"""

    def __init__(self, lock_file: Optional[Path] = None,
                 overrides: Optional[Dict[str, str]] = None,
                 user_lock_file: Optional[Path] = None):
        """
        Initialize version manager.

        Args:
            lock_file: Path to tool-versions.lock (default: packaged lock file)
            overrides: Pins from config.yml, these win over both lock files
            user_lock_file: Optional lock file in the user's config dir, its
                entries win over the packaged lock file
        """
        self.lock_file = lock_file or DEFAULT_LOCK_FILE
        self.user_lock_file = user_lock_file
        self.overrides = dict(overrides or {})
        self.versions = self._load_versions(self.lock_file)
        self.user_versions = self._load_versions(user_lock_file) if user_lock_file else {}

    @staticmethod
    def _load_versions(lock_file: Path) -> Dict[str, str]:
        """Load pinned versions from a lock file"""
        if not lock_file.exists():
            logger.debug("No lock file at %s", lock_file)
            return {}

        try:
            with open(lock_file) as f:
                data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning("Error loading %s: %s", lock_file, e)
            return {}

        tools = data.get('tools', {})
        if not isinstance(tools, dict):
            logger.warning("Ignoring %s: [tools] is not a table", lock_file)
            return {}
        return {str(k): str(v) for k, v in tools.items()}

    def get_version(self, tool: str) -> Optional[str]:
        """
        Get pinned version for a tool.

        Args:
            tool: Tool name (e.g., 'direnv', 'go')

        Returns:
            Version string or None if not pinned
        """
        for source in (self.overrides, self.user_versions, self.versions):
            if tool in source:
                return source[tool]
            for key in source:
                if tool.replace('-', '_') == key.replace('-', '_'):
                    return source[key]
        return None

    def is_pinned(self, tool: str) -> bool:
        """Check if a tool has a pinned version"""
        return self.get_version(tool) is not None
