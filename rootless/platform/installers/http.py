#!/usr/bin/env python3
"""
Rootless Setup HTTP Provider
Default provider for tools distributed as downloadable releases
"""

import logging
import shutil
import tarfile
import zipfile
from pathlib import Path
from typing import Any, Optional, Type

import requests

from rootless import __version__
from rootless.errors import ArtifactUnavailable, InstallFailure, ResolutionFailure, RootlessError
from rootless.platform.installers.base import ToolProvider

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
CHUNK_SIZE = 64 * 1024


class HttpToolProvider(ToolProvider):
    """
    Provider backed by HTTP downloads.

    Requests block until complete or until config.http_timeout expires. There
    are no retries; a failed request fails the operation.
    """

    def __init__(self, *args, session: Optional[requests.Session] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers['User-Agent'] = f'rootless-setup/{__version__}'
        return self._session

    @property
    def timeout(self) -> float:
        return self.config.http_timeout

    def _get(self, url: str, error: Type[RootlessError], stream: bool = False) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout, stream=stream)
            response.raise_for_status()
        except requests.RequestException as e:
            raise error(f"Request to {url} failed: {e}") from e
        return response

    def get_json(self, url: str) -> Any:
        """Fetch and decode a JSON document (ResolutionFailure on error)"""
        response = self._get(url, ResolutionFailure)
        try:
            return response.json()
        except ValueError as e:
            raise ResolutionFailure(f"Invalid JSON from {url}") from e

    def get_text(self, url: str) -> str:
        """Fetch a text document (ResolutionFailure on error)"""
        return self._get(url, ResolutionFailure).text

    def latest_github_release(self, repo: str) -> str:
        """
        Get the tag of the latest GitHub release

        Args:
            repo: owner/name

        Returns:
            Tag name as published (e.g. 'v0.40.1')
        """
        data = self.get_json(f"{GITHUB_API}/repos/{repo}/releases/latest")
        tag = data.get('tag_name') if isinstance(data, dict) else None
        if not tag:
            raise ResolutionFailure(f"No release tag found for {repo}")
        return tag

    def download(self, url: str, destination: Path) -> Path:
        """
        Stream a URL to a file

        Raises:
            ArtifactUnavailable: if the download fails (including 404)
        """
        logger.info("Downloading %s", url)
        response = self._get(url, ArtifactUnavailable, stream=True)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with response, open(destination, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
        except requests.RequestException as e:
            raise ArtifactUnavailable(f"Download of {url} interrupted: {e}") from e
        return destination

    def extract(self, archive: Path, destination: Path) -> Path:
        """
        Unpack a .tar.gz/.tgz or .zip archive

        Raises:
            InstallFailure: for unknown formats, corrupt archives or members
                escaping the destination
        """
        destination.mkdir(parents=True, exist_ok=True)
        root = destination.resolve()
        name = archive.name

        try:
            if name.endswith(('.tar.gz', '.tgz')):
                with tarfile.open(archive, mode='r:gz') as tar:
                    for member in tar.getmembers():
                        _ensure_inside(root, member.name)
                    tar.extractall(path=destination)
            elif name.endswith('.zip'):
                with zipfile.ZipFile(archive) as zip_file:
                    for member in zip_file.namelist():
                        _ensure_inside(root, member)
                    zip_file.extractall(path=destination)
            else:
                raise InstallFailure(f"Cannot extract {name}: unknown archive type")
        except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
            raise InstallFailure(f"Could not extract {name}: {e}") from e

        logger.debug("Extracted %s to %s", name, destination)
        return destination

    def install_binary(self, source: Path, destination: Path) -> Path:
        """Copy an executable into place with mode 0755"""
        destination.parent.mkdir(parents=True, exist_ok=True)
        if destination.is_symlink():
            destination.unlink()
        shutil.copy2(source, destination)
        destination.chmod(destination.stat().st_mode | 0o755)
        logger.info("Installed %s", destination)
        return destination


def _ensure_inside(root: Path, member: str) -> None:
    target = (root / member).resolve()
    if target != root and root not in target.parents:
        raise InstallFailure(f"Archive member {member!r} escapes {root}")
