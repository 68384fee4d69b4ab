#!/usr/bin/env python3
"""
Rootless Setup nvm Provider
Git checkout of nvm-sh/nvm at the latest release tag
"""

from rootless.platform.installers.git import GitToolProvider


class NvmProvider(GitToolProvider):
    """nvm provider"""

    prerequisites = ('git',)
    repo_url = "https://github.com/nvm-sh/nvm.git"
    # Node versions installed through nvm survive a reinstall
    preserve = ('versions', 'alias')

    def resolve_version(self) -> str:
        return self.pinned_version() or self.latest_github_release('nvm-sh/nvm')

    def notices(self):
        return ["Verify installation: nvm --version"]
