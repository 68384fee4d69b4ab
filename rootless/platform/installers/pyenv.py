#!/usr/bin/env python3
"""
Rootless Setup pyenv Provider
Git checkout of pyenv/pyenv at the remote HEAD
"""

from typing import List

from rootless.platform.detector import OSType, detect_platform, linux_distro
from rootless.platform.installers.git import GitToolProvider

# Suggested build environment per distribution, see
# https://github.com/pyenv/pyenv/wiki#suggested-build-environment
BUILD_DEPENDENCIES = {
    ('ubuntu', 'debian', 'kali'): (
        "sudo apt update; sudo apt install -y build-essential libssl-dev zlib1g-dev "
        "libbz2-dev libreadline-dev libsqlite3-dev curl libncursesw5-dev xz-utils "
        "tk-dev libxml2-dev libxmlsec1-dev libffi-dev liblzma-dev"
    ),
    ('fedora', 'rhel', 'centos'): (
        "sudo dnf install -y make gcc zlib-devel bzip2 bzip2-devel readline-devel "
        "sqlite sqlite-devel openssl-devel tk-devel libffi-devel xz-devel"
    ),
    ('arch',): "sudo pacman -S --needed base-devel openssl zlib xz tk",
    ('opensuse', 'opensuse-leap', 'opensuse-tumbleweed', 'suse'): (
        "sudo zypper install -y gcc automake bzip2 libbz2-devel xz xz-devel "
        "openssl-devel ncurses-devel readline-devel zlib-devel tk-devel "
        "libffi-devel sqlite3-devel"
    ),
    ('alpine',): (
        "sudo apk add --no-cache git bash build-base libffi-dev openssl-dev "
        "bzip2-dev zlib-dev readline-dev sqlite-dev tk-dev xz-dev"
    ),
}

MACOS_BUILD_DEPENDENCIES = "brew install openssl readline sqlite3 xz zlib tcl-tk"


class PyenvProvider(GitToolProvider):
    """pyenv provider"""

    prerequisites = ('git',)
    repo_url = "https://github.com/pyenv/pyenv.git"
    # Python builds installed through pyenv survive a reinstall
    preserve = ('versions',)

    def resolve_version(self) -> str:
        return self.pinned_version() or self.remote_head()

    def notices(self) -> List[str]:
        return [
            "Python builds need system libraries, install them with:",
            f"  {build_dependency_hint()}",
        ]


def build_dependency_hint(os_type: OSType = None, distro: str = None) -> str:
    """Command installing pyenv's suggested build environment"""
    if os_type is None:
        os_type = detect_platform().os
    if os_type == OSType.DARWIN:
        return MACOS_BUILD_DEPENDENCIES

    distro = linux_distro() if distro is None else distro
    for ids, command in BUILD_DEPENDENCIES.items():
        if distro in ids:
            return command
    return "(Unable to detect your distribution, see https://github.com/pyenv/pyenv/wiki)"
