#!/usr/bin/env python3
"""
Rootless Setup Operation Report
Outcome of one install/uninstall/repair, rendered for the operator
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from rootless.errors import RootlessError
from rootless.platform.installers.base import InstalledArtifact


@dataclass
class OperationReport:
    """Created fresh per operation and discarded once shown"""
    operation: str
    tool: str
    updated_files: List[Path] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
    fatal: Optional[RootlessError] = None
    artifact: Optional[InstalledArtifact] = None

    @property
    def ok(self) -> bool:
        return self.fatal is None

    def mark_updated(self, path: Path) -> None:
        """Record a modified file once, keeping first-seen order"""
        if path not in self.updated_files:
            self.updated_files.append(path)

    def warn(self, error) -> None:
        self.warnings.append(str(error))

    def fail(self, error: RootlessError) -> None:
        self.fatal = error

    def merge(self, other: 'OperationReport') -> None:
        """Fold another report into this one (used by repair)"""
        for path in other.updated_files:
            self.mark_updated(path)
        self.warnings.extend(other.warnings)
        for notice in other.notices:
            if notice not in self.notices:
                self.notices.append(notice)
        if other.fatal is not None:
            self.fatal = other.fatal
        if other.artifact is not None:
            self.artifact = other.artifact

    def render(self, console: Console) -> None:
        """Print the summary: failure or success, reload list, warnings, notices"""
        console.print("-" * 50)
        if self.fatal is not None:
            console.print(f"[red]✗ {self.tool} {self.operation} failed: {escape(str(self.fatal))}[/red]")
        else:
            console.print(f"[green]✓ {self.tool} {self.operation} completed[/green]")
            if self.artifact is not None and self.artifact.version:
                console.print(f"  Version: {escape(self.artifact.version)}")

        if self.updated_files:
            console.print("\nPlease run the following command to apply changes:")
            for path in self.updated_files:
                console.print(f"  source {escape(str(path))}")

        for warning in self.warnings:
            console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

        for notice in self.notices:
            console.print(f"[dim]{escape(notice)}[/dim]")
        console.print("-" * 50)
