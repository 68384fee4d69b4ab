"""
Shared fixtures for Rootless Setup tests
"""
import io
import json
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from rootless.config import Environment, RootlessConfig
from rootless.core.lifecycle import Lifecycle
from rootless.errors import ResolutionFailure
from rootless.platform.detector import PlatformDetector
from rootless.platform.installers.base import ArtifactHandle, InstalledArtifact, ToolProvider
from rootless.shell.blocks import ConfigBlock
from rootless.tools import ToolDescriptor

MARKER = '# X-BLOCK'
BODY = ('export X_HOME="$HOME/.x"', 'export PATH="$X_HOME/bin:$PATH"')


@pytest.fixture
def home(tmp_path) -> Path:
    """Empty home directory"""
    path = tmp_path / 'home'
    path.mkdir()
    return path


@pytest.fixture
def env(home) -> Environment:
    """Environment snapshot rooted at the temporary home"""
    return Environment.from_os(environ={'PATH': '/usr/bin:/bin', 'SHELL': '/bin/bash'}, home=home)


class FakeProvider(ToolProvider):
    """Provider returning canned versions and writing a single binary"""

    def __init__(self, *args, version: str = '1.0.0', fail_on: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.version = version
        self.fail_on = fail_on
        self.calls: List[str] = []
        self.scratch_dirs: List[Path] = []

    def resolve_version(self) -> str:
        self.calls.append('resolve')
        if self.fail_on == 'resolve':
            raise ResolutionFailure("version source unreachable")
        return self.version

    def fetch(self, version, platform, workdir):
        self.calls.append('fetch')
        self.scratch_dirs.append(workdir)
        artifact = workdir / 'x'
        artifact.write_text(f'#!/bin/sh\necho x {version}\n')
        if self.fail_on == 'fetch':
            raise OSError("disk full")
        return ArtifactHandle(self.name, version, platform, artifact, 'binary')

    def place(self, handle):
        self.calls.append('place')
        target = self.descriptor.install_root / 'bin' / 'x'
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(handle.path.read_text())
        return InstalledArtifact(self.name, (self.descriptor.install_root,), handle.version)

    def known_artifact(self):
        return InstalledArtifact(self.name, (self.descriptor.install_root,))


def make_descriptor(env: Environment, profiles=None) -> ToolDescriptor:
    profiles = profiles or [env.home / '.bashrc', env.home / '.zshrc']
    root = env.home / '.x'
    return ToolDescriptor(
        name='x',
        title='X',
        install_root=root,
        bin_dir=root / 'bin',
        profile_files=tuple(profiles),
        blocks=tuple(ConfigBlock(MARKER, BODY, p) for p in profiles),
        provider_class=FakeProvider,
    )


@pytest.fixture
def descriptor(env) -> ToolDescriptor:
    return make_descriptor(env)


@pytest.fixture
def make_lifecycle(env, descriptor):
    """Factory building a lifecycle around FakeProvider on linux/amd64"""
    def _make(system='Linux', machine='x86_64', **provider_kwargs) -> Lifecycle:
        provider = descriptor.create_provider(env, RootlessConfig(), **provider_kwargs)
        return Lifecycle(descriptor, provider, detector=PlatformDetector(system, machine))
    return _make


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code: int = 200, content: bytes = b''):
        self.status_code = status_code
        self.content = content

    @property
    def text(self) -> str:
        return self.content.decode('utf-8')

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Serves canned bodies by URL; unknown URLs answer 404"""

    def __init__(self, routes: Optional[Dict[str, object]] = None):
        self.routes = dict(routes or {})
        self.requested: List[str] = []

    def get(self, url, timeout=None, stream=False):
        self.requested.append(url)
        body = self.routes.get(url)
        if isinstance(body, Exception):
            raise body
        if body is None:
            return FakeResponse(404)
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode('utf-8')
        return FakeResponse(200, body)


def tar_bytes(files: Dict[str, str], modes: Optional[Dict[str, int]] = None) -> bytes:
    """Build a .tar.gz in memory from {member: content}"""
    modes = modes or {}
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode='w:gz') as tar:
        for name, content in files.items():
            data = content.encode('utf-8')
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = modes.get(name, 0o644)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def zip_bytes(files: Dict[str, str]) -> bytes:
    """Build a .zip in memory from {member: content}"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()
