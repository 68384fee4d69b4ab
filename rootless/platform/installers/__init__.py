"""
Rootless Setup Tool Providers
Version resolution, fetch, placement and purge for each provisioned tool
"""

from rootless.platform.installers.base import (
    ArtifactHandle,
    InstalledArtifact,
    ToolProvider,
)
from rootless.platform.installers.code_server import CodeServerProvider
from rootless.platform.installers.direnv import DirenvProvider
from rootless.platform.installers.git import GitToolProvider
from rootless.platform.installers.go import GoProvider
from rootless.platform.installers.http import HttpToolProvider
from rootless.platform.installers.nvm import NvmProvider
from rootless.platform.installers.pyenv import PyenvProvider
from rootless.platform.installers.sqlite import SqliteProvider
from rootless.platform.installers.uv import UvProvider

__all__ = [
    'ArtifactHandle',
    'InstalledArtifact',
    'ToolProvider',
    'HttpToolProvider',
    'GitToolProvider',
    'CodeServerProvider',
    'DirenvProvider',
    'GoProvider',
    'NvmProvider',
    'PyenvProvider',
    'SqliteProvider',
    'UvProvider',
]
