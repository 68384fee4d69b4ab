"""
Tests for profile file mutation on disk
"""
import stat

import pytest

from rootless.errors import ProfileMutationFailure
from rootless.shell.blocks import ConfigBlock
from rootless.shell.profile import ProfileMutator

BODY = ('export X=1',)


@pytest.fixture
def mutator():
    return ProfileMutator()


@pytest.fixture
def bashrc(home):
    path = home / '.bashrc'
    path.write_text('# existing\n')
    return path


class TestUpsert:
    """Idempotent insertion"""

    def test_inserts_once(self, mutator, bashrc):
        block = ConfigBlock('# X-BLOCK', BODY, bashrc)
        first = mutator.upsert(block)
        after_first = bashrc.read_bytes()
        second = mutator.upsert(block)

        assert first.changed
        assert not second.changed
        assert bashrc.read_bytes() == after_first
        assert after_first == b'# existing\n\n# X-BLOCK\nexport X=1\n'

    def test_missing_profile_is_skipped(self, mutator, home):
        target = home / '.zshrc'
        result = mutator.upsert(ConfigBlock('# X-BLOCK', BODY, target))
        assert result.skipped
        assert not result.changed
        assert not target.exists()

    def test_create_missing(self, mutator, home):
        target = home / '.config' / 'direnv' / 'direnvrc'
        result = mutator.upsert(ConfigBlock('# X-BLOCK', BODY, target, create_missing=True))
        assert result.changed
        assert target.read_text() == '\n# X-BLOCK\nexport X=1\n'

    def test_preserves_mode(self, mutator, bashrc):
        bashrc.chmod(0o640)
        mutator.upsert(ConfigBlock('# X-BLOCK', BODY, bashrc))
        assert stat.S_IMODE(bashrc.stat().st_mode) == 0o640

    def test_symlinked_profile(self, mutator, home):
        real = home / 'dotfiles' / 'bashrc'
        real.parent.mkdir()
        real.write_text('# managed\n')
        link = home / '.bashrc'
        link.symlink_to(real)

        mutator.upsert(ConfigBlock('# X-BLOCK', BODY, link))

        assert link.is_symlink()
        assert '# X-BLOCK' in real.read_text()

    def test_no_temp_files_left(self, mutator, bashrc):
        mutator.upsert(ConfigBlock('# X-BLOCK', BODY, bashrc))
        assert sorted(p.name for p in bashrc.parent.iterdir()) == ['.bashrc']

    def test_unreadable_target_raises(self, mutator, home):
        target = home / '.bashrc'
        target.mkdir()
        with pytest.raises(ProfileMutationFailure) as exc_info:
            mutator.upsert(ConfigBlock('# X-BLOCK', BODY, target))
        assert not exc_info.value.fatal
        assert exc_info.value.path == target


class TestRemove:
    """Exact removal"""

    def test_restores_original(self, mutator, bashrc):
        original = bashrc.read_bytes()
        block = ConfigBlock('# X-BLOCK', BODY, bashrc)
        mutator.upsert(block)
        result = mutator.remove(block)
        assert result.changed
        assert bashrc.read_bytes() == original

    def test_twice_is_noop(self, mutator, bashrc):
        block = ConfigBlock('# X-BLOCK', BODY, bashrc)
        mutator.upsert(block)
        mutator.remove(block)
        after = bashrc.read_bytes()
        assert not mutator.remove(block).changed
        assert bashrc.read_bytes() == after

    def test_missing_file(self, mutator, home):
        result = mutator.remove(ConfigBlock('# X-BLOCK', BODY, home / '.zshrc'))
        assert result.skipped
        assert not (home / '.zshrc').exists()

    def test_is_present(self, mutator, bashrc):
        block = ConfigBlock('# X-BLOCK', BODY, bashrc)
        assert not mutator.is_present(block)
        mutator.upsert(block)
        assert mutator.is_present(block)
