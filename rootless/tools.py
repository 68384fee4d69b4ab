#!/usr/bin/env python3
"""
Rootless Setup Tool Catalog
Static per-tool facts: install root, profile blocks and provider class
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type

from rootless.config import Environment, RootlessConfig
from rootless.platform.installers import (
    CodeServerProvider,
    DirenvProvider,
    GoProvider,
    NvmProvider,
    PyenvProvider,
    SqliteProvider,
    ToolProvider,
    UvProvider,
)
from rootless.shell.blocks import BlockRegistry, ConfigBlock

# Shell name per profile file, used for shell-specific hooks
PROFILE_SHELLS = {
    '.bashrc': 'bash',
    '.bash_profile': 'bash',
    '.zshrc': 'zsh',
}


@dataclass(frozen=True)
class ToolDescriptor:
    """Static facts about one tool for one invocation"""
    name: str
    title: str
    install_root: Path
    bin_dir: Path
    profile_files: Tuple[Path, ...]
    blocks: Tuple[ConfigBlock, ...]
    provider_class: Type[ToolProvider]

    def create_provider(self, env: Environment, config: RootlessConfig, **kwargs) -> ToolProvider:
        return self.provider_class(self, env, config, **kwargs)


def _per_profile(marker: str, body: Sequence[str], profiles: Sequence[Path]) -> List[ConfigBlock]:
    return [ConfigBlock(marker, tuple(body), profile) for profile in profiles]


def _path_export(env: Environment, directory: Path) -> str:
    return f'export PATH="{env.shell_path(directory)}:$PATH"'


def _go(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    root = env.install_base / 'go'
    body = (
        f'export GOROOT={env.shell_path(root)}',
        'export GOPATH=$HOME/go',
        'export PATH=$PATH:$GOROOT/bin:$GOPATH/bin',
    )
    return ToolDescriptor(
        'go', 'Go', root, root / 'bin', tuple(profiles),
        tuple(_per_profile('# Go Environment (Rootless)', body, profiles)),
        GoProvider,
    )


def _direnv(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    blocks = _per_profile(
        '# direnv path added by rootless', (_path_export(env, env.bin_dir),), profiles
    )
    for profile in profiles:
        shell = PROFILE_SHELLS.get(profile.name)
        if shell:
            blocks.append(ConfigBlock(
                '# direnv hook added by rootless',
                (f'eval "$(direnv hook {shell})"',),
                profile,
            ))
    blocks.append(ConfigBlock(
        '# Custom layout for uv (rootless)',
        (
            'layout_uv() {',
            '    if [[ ! -x "$(command -v uv)" ]]; then',
            '        log_error "uv is not installed. Please install uv first."',
            '        return 1',
            '    fi',
            '',
            '    if [[ ! -d ".venv" ]]; then',
            '        log_status "Creating virtual environment with uv..."',
            '        uv venv',
            '    fi',
            '',
            '    export VIRTUAL_ENV="$(pwd)/.venv"',
            '    PATH_add "$VIRTUAL_ENV/bin"',
            '}',
        ),
        env.config_dir / 'direnv' / 'direnvrc',
        create_missing=True,
    ))
    return ToolDescriptor(
        'direnv', 'direnv', env.bin_dir, env.bin_dir, tuple(profiles),
        tuple(blocks), DirenvProvider,
    )


def _uv(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    return ToolDescriptor(
        'uv', 'uv', env.bin_dir, env.bin_dir, tuple(profiles),
        tuple(_per_profile('# uv path added by rootless', (_path_export(env, env.bin_dir),), profiles)),
        UvProvider,
    )


def _nvm(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    root = env.home / '.nvm'
    body = (
        f'export NVM_DIR="{env.shell_path(root)}"',
        '[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"  # This loads nvm',
        '[ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"  # This loads nvm bash_completion',
    )
    return ToolDescriptor(
        'nvm', 'NVM', root, root, tuple(profiles),
        tuple(_per_profile('# NVM Configuration', body, profiles)),
        NvmProvider,
    )


def _pyenv(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    root = env.home / '.pyenv'
    body = (
        f'export PYENV_ROOT="{env.shell_path(root)}"',
        '[[ -d $PYENV_ROOT/bin ]] && export PATH="$PYENV_ROOT/bin:$PATH"',
        'eval "$(pyenv init -)"',
    )
    return ToolDescriptor(
        'pyenv', 'pyenv', root, root / 'bin', tuple(profiles),
        tuple(_per_profile('# section: pyenv', body, profiles)),
        PyenvProvider,
    )


def _code_server(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    return ToolDescriptor(
        'code-server', 'code-server', env.lib_dir, env.bin_dir, tuple(profiles),
        tuple(_per_profile(
            '# code-server path added by rootless', (_path_export(env, env.bin_dir),), profiles
        )),
        CodeServerProvider,
    )


def _sqlite(env: Environment, profiles: Sequence[Path]) -> ToolDescriptor:
    # Library paths are always written so the block is the same for binary
    # and source installs
    body = (
        _path_export(env, env.bin_dir),
        f'export LD_LIBRARY_PATH="{env.shell_path(env.lib_dir)}:$LD_LIBRARY_PATH"',
        f'export PKG_CONFIG_PATH="{env.shell_path(env.lib_dir / "pkgconfig")}:$PKG_CONFIG_PATH"',
    )
    return ToolDescriptor(
        'sqlite', 'SQLite', env.install_base, env.bin_dir, tuple(profiles),
        tuple(_per_profile('# SQLite User Install', body, profiles)),
        SqliteProvider,
    )


CATALOG: Dict[str, Callable[[Environment, Sequence[Path]], ToolDescriptor]] = {
    'go': _go,
    'direnv': _direnv,
    'uv': _uv,
    'nvm': _nvm,
    'pyenv': _pyenv,
    'code-server': _code_server,
    'sqlite': _sqlite,
}


def tool_names() -> List[str]:
    """Names of every tool in the catalog"""
    return list(CATALOG)


def build_registry(env: Environment, config: Optional[RootlessConfig] = None) -> BlockRegistry:
    """
    Register the blocks of every tool

    Raises:
        ValueError: if two tools share a marker
    """
    config = config or RootlessConfig()
    profiles = config.resolve_profiles(env)
    registry = BlockRegistry()
    for name, builder in CATALOG.items():
        for block in builder(env, profiles).blocks:
            registry.register(name, block)
    return registry


def get_descriptor(name: str, env: Environment,
                   config: Optional[RootlessConfig] = None) -> ToolDescriptor:
    """
    Build the descriptor for one tool

    Raises:
        KeyError: for unknown tool names
    """
    if name not in CATALOG:
        raise KeyError(name)
    config = config or RootlessConfig()
    return CATALOG[name](env, config.resolve_profiles(env))
