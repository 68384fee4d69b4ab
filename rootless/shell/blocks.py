#!/usr/bin/env python3
"""
Rootless Setup Config Blocks
Marker-delimited blocks written into shell profiles, and the text protocol
that inserts and removes them.

A block is a marker comment followed by a fixed body:

    <blank separator>
    # Go Environment (Rootless)
    export GOROOT=$HOME/.local/go
    ...

The marker both proves a prior insertion and anchors the removal. Removal
deletes exactly the lines the template renders (marker + body) plus the blank
separator above it, so the span never depends on what follows the block.
Blocks edited by hand are handled best-effort only.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ConfigBlock:
    """A marker line plus fixed body lines destined for one file"""
    marker: str
    body: Tuple[str, ...]
    target: Path
    # Only tool-owned files (e.g. direnvrc) may be created; profiles never are
    create_missing: bool = False

    def __post_init__(self):
        if not self.marker.strip():
            raise ValueError("Block marker cannot be empty")
        if '\n' in self.marker or any('\n' in line for line in self.body):
            raise ValueError(f"Block {self.marker!r} lines must not contain newlines")

    @property
    def lines(self) -> List[str]:
        """Marker followed by the body, as written"""
        return [self.marker, *self.body]

    @property
    def span(self) -> int:
        """Number of lines removed for this block, excluding the separator"""
        return len(self.body) + 1

    def render(self) -> str:
        """Text appended on insertion: separator, marker, body"""
        return '\n' + '\n'.join(self.lines) + '\n'


def find_block(lines: Sequence[str], marker: str) -> Optional[int]:
    """
    Presence test for a block.

    Args:
        lines: File content split into lines (line endings may be kept)
        marker: Block marker

    Returns:
        Index of the first line equal to or containing the marker, or None
    """
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return None


def is_present(text: str, marker: str) -> bool:
    """Check if the block identified by marker exists in text"""
    return find_block(text.splitlines(), marker) is not None


def insert_block(text: str, block: ConfigBlock) -> Optional[str]:
    """
    Append a block to text unless it is already present

    Args:
        text: Current file content
        block: Block to insert

    Returns:
        New content, or None if the block is already present
    """
    if is_present(text, block.marker):
        return None
    if text and not text.endswith('\n'):
        text += '\n'
    return text + block.render()


def strip_block(text: str, block: ConfigBlock) -> Optional[str]:
    """
    Remove every occurrence of a block from text

    Args:
        text: Current file content
        block: Block template giving the marker and the exact span

    Returns:
        New content, or None if the block is absent
    """
    lines = text.splitlines(keepends=True)
    index = find_block(lines, block.marker)
    if index is None:
        return None

    while index is not None:
        start = index
        if index > 0 and lines[index - 1] in ('\n', '\r\n'):
            start = index - 1
        end = min(index + block.span, len(lines))
        del lines[start:end]
        index = find_block(lines, block.marker)

    return ''.join(lines)


@dataclass
class BlockRegistry:
    """
    Registry of every block known to the system.

    A marker belongs to exactly one tool. The same marker may target several
    files (one block per profile) but is never shared between tools.
    """
    _owners: Dict[str, str] = field(default_factory=dict)
    _blocks: Dict[str, List[ConfigBlock]] = field(default_factory=dict)

    def register(self, tool: str, block: ConfigBlock) -> ConfigBlock:
        """
        Register a block for a tool

        Raises:
            ValueError: if the marker already belongs to another tool, overlaps
                another marker, or is registered twice for one target file
        """
        owner = self._owners.get(block.marker)
        if owner is not None and owner != tool:
            raise ValueError(
                f"Marker {block.marker!r} of {tool} is already used by {owner}"
            )
        # The presence test matches substrings, so markers must not nest
        for marker, other_owner in self._owners.items():
            if marker != block.marker and (marker in block.marker or block.marker in marker):
                raise ValueError(
                    f"Marker {block.marker!r} of {tool} overlaps {marker!r} of {other_owner}"
                )
        existing = self._blocks.setdefault(tool, [])
        for other in existing:
            if other.marker == block.marker and other.target == block.target:
                raise ValueError(f"Duplicate block {block.marker!r} for {block.target}")
        self._owners[block.marker] = tool
        existing.append(block)
        return block

    def owner(self, marker: str) -> Optional[str]:
        """Tool owning a marker, if any"""
        return self._owners.get(marker)

    def blocks_for(self, tool: str) -> List[ConfigBlock]:
        """Blocks registered for a tool, in registration order"""
        return list(self._blocks.get(tool, []))

    def markers(self) -> List[str]:
        """All registered markers"""
        return list(self._owners)
