#!/usr/bin/env python3
"""
Rootless Setup Shell Profile Mutator
Idempotent insertion and exact removal of config blocks in shell startup files
"""

import contextlib
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rootless.errors import ProfileMutationFailure
from rootless.shell.blocks import ConfigBlock, insert_block, is_present, strip_block

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one upsert/remove against one file"""
    path: Path
    changed: bool
    # The target file does not exist and was left alone
    skipped: bool = False


class ProfileMutator:
    """
    Read-modify-write of profile files.

    Content is computed in memory, written to a temporary file next to the
    target and moved over it with os.replace, so a profile is never left
    truncated. Concurrent rootless processes against the same file are not
    guarded against.
    """

    def upsert(self, block: ConfigBlock) -> MutationResult:
        """
        Append block to its target file unless already present

        Returns:
            MutationResult with changed=True when the block was inserted

        Raises:
            ProfileMutationFailure: if the file cannot be read or replaced
        """
        path = block.target
        text = self._read(path, create=block.create_missing)
        if text is None:
            logger.info("Skipping %s (file does not exist)", path)
            return MutationResult(path, changed=False, skipped=True)

        new_text = insert_block(text, block)
        if new_text is None:
            logger.info("%s already configured in %s", block.marker, path)
            return MutationResult(path, changed=False)

        self._write(path, new_text)
        logger.info("Added %s to %s", block.marker, path)
        return MutationResult(path, changed=True)

    def remove(self, block: ConfigBlock) -> MutationResult:
        """
        Delete every occurrence of block from its target file

        Returns:
            MutationResult with changed=True when something was removed

        Raises:
            ProfileMutationFailure: if the file cannot be read or replaced
        """
        path = block.target
        text = self._read(path)
        if text is None:
            return MutationResult(path, changed=False, skipped=True)

        new_text = strip_block(text, block)
        if new_text is None:
            logger.debug("%s not found in %s", block.marker, path)
            return MutationResult(path, changed=False)

        self._write(path, new_text)
        logger.info("Removed %s from %s", block.marker, path)
        return MutationResult(path, changed=True)

    def is_present(self, block: ConfigBlock) -> bool:
        """Check if block is present in its target file"""
        text = self._read(block.target)
        return text is not None and is_present(text, block.marker)

    def _read(self, path: Path, create: bool = False) -> Optional[str]:
        if not path.exists():
            if not create:
                return None
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ProfileMutationFailure(path, str(e)) from e
            return ''

        try:
            # newline='' keeps CRLF files byte-for-byte
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ProfileMutationFailure(path, str(e)) from e

    def _write(self, path: Path, text: str) -> None:
        # Replace the link target, not a dotfiles-manager symlink
        target = path.resolve()
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f'.{target.name}.', suffix='.tmp', dir=str(target.parent)
            )
        except OSError as e:
            raise ProfileMutationFailure(path, str(e)) from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            if target.exists():
                shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
        except OSError as e:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise ProfileMutationFailure(path, str(e)) from e
