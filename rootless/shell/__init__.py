"""
Rootless Setup Shell Integration
Config blocks and the profile file mutator
"""

from rootless.shell.blocks import BlockRegistry, ConfigBlock, find_block
from rootless.shell.profile import MutationResult, ProfileMutator

__all__ = [
    'BlockRegistry',
    'ConfigBlock',
    'MutationResult',
    'ProfileMutator',
    'find_block',
]
