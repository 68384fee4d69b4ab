#!/usr/bin/env python3
"""
Rootless Setup Lifecycle Orchestrator

Drives install, uninstall and repair for any tool described by a
ToolDescriptor and implemented by a ToolProvider:

    install:   prerequisites -> detect -> resolve -> fetch -> place -> upsert blocks
    uninstall: purge known paths -> remove blocks -> "new shell required" notice
    repair:    uninstall, then install

Nothing is persisted between runs. Whether a tool is configured is decided
only by the marker presence test in the profile files.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from rootless.config import Environment, RootlessConfig
from rootless.core.report import OperationReport
from rootless.errors import (
    InstallFailure,
    ProfileMutationFailure,
    PurgeIncomplete,
    RootlessError,
)
from rootless.platform.detector import PlatformDetector
from rootless.platform.installers.base import ToolProvider
from rootless.shell.profile import ProfileMutator
from rootless.tools import ToolDescriptor, get_descriptor

logger = logging.getLogger(__name__)

SESSION_NOTICE = (
    "Variables already exported into the current shell session cannot be unset "
    "from here. Start a new shell to drop them."
)


class Lifecycle:
    """
    Install / uninstall / repair state machine for one tool
    """

    def __init__(self, descriptor: ToolDescriptor, provider: ToolProvider,
                 mutator: Optional[ProfileMutator] = None,
                 detector: Optional[PlatformDetector] = None):
        self.descriptor = descriptor
        self.provider = provider
        self.mutator = mutator or ProfileMutator()
        self.detector = detector or PlatformDetector()

    @property
    def name(self) -> str:
        return self.descriptor.name

    def install(self) -> OperationReport:
        """
        Install the artifact, then configure every profile block.

        Artifact errors are fatal and stop before any profile is touched.
        Profile errors only produce warnings, the tool is usable without them.
        """
        report = OperationReport('install', self.name)

        try:
            self._install_artifact(report)
        except RootlessError as e:
            logger.error("%s install aborted: %s", self.name, e)
            report.fail(e)
            return report

        for block in self.descriptor.blocks:
            try:
                result = self.mutator.upsert(block)
            except ProfileMutationFailure as e:
                logger.warning("%s", e)
                report.warn(e)
                continue
            if result.changed:
                self._mark_reload(report, result.path)

        report.notices.extend(self.provider.notices())
        if self.provider.env.on_path(self.descriptor.bin_dir):
            report.notices.append(f"{self.descriptor.bin_dir} is already on PATH in this session.")
        return report

    def _install_artifact(self, report: OperationReport) -> None:
        self.provider.check_prerequisites()
        platform = self.detector.detect()
        logger.info("Installing %s for %s", self.name, platform)

        version = self.provider.resolve_version()
        logger.info("Resolved %s version %s", self.name, version)

        # Scratch space is removed on every exit path
        with tempfile.TemporaryDirectory(prefix=f'rootless-{self.name}-') as scratch:
            try:
                handle = self.provider.fetch(version, platform, Path(scratch))
                report.artifact = self.provider.place(handle)
            except OSError as e:
                raise InstallFailure(f"{self.name}: {e}") from e

        logger.info("Installed %s at %s", self.name, self.descriptor.install_root)

    def _mark_reload(self, report: OperationReport, path: Path) -> None:
        # Only shell profiles are sourced; tool-owned files like direnvrc are not
        if path in self.descriptor.profile_files:
            report.mark_updated(path)

    def uninstall(self) -> OperationReport:
        """
        Remove the artifact and every profile block, continuing past failures
        """
        report = OperationReport('uninstall', self.name)

        leftovers = self.provider.purge(self.provider.known_artifact())
        if leftovers:
            report.warn(PurgeIncomplete(leftovers))

        for block in self.descriptor.blocks:
            try:
                result = self.mutator.remove(block)
            except ProfileMutationFailure as e:
                logger.warning("%s", e)
                report.warn(e)
                continue
            if result.changed:
                self._mark_reload(report, result.path)

        report.notices.append(SESSION_NOTICE)
        return report

    def repair(self) -> OperationReport:
        """Uninstall followed by install; uninstall warnings do not stop install"""
        report = OperationReport('repair', self.name)
        report.merge(self.uninstall())
        report.merge(self.install())
        return report

    def status(self) -> dict:
        """
        Current state as seen through the presence test

        Returns:
            Dict with 'installed' (bool) and 'blocks' {path: [(marker, present)]}
        """
        blocks = {}
        for block in self.descriptor.blocks:
            present = self.mutator.is_present(block)
            blocks.setdefault(block.target, []).append((block.marker, present))
        installed = any(
            p.exists() or p.is_symlink() for p in self.provider.known_artifact().paths
        )
        return {'installed': installed, 'blocks': blocks}


def create_lifecycle(name: str, env: Environment, config: Optional[RootlessConfig] = None,
                     **provider_kwargs) -> Lifecycle:
    """Build the lifecycle for a catalog tool"""
    descriptor = get_descriptor(name, env, config)
    provider = descriptor.create_provider(env, config, **provider_kwargs)
    return Lifecycle(descriptor, provider)
