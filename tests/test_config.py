"""
Tests for configuration, the environment snapshot and version pins
"""
from pathlib import Path

import pytest

from rootless.config import ConfigManager, Environment, RootlessConfig
from rootless.platform.version_manager import DEFAULT_LOCK_FILE, VersionManager


class TestEnvironment:
    """Environment snapshot"""

    def test_defaults(self, home):
        env = Environment.from_os(environ={}, home=home)
        assert env.install_base == home / '.local'
        assert env.bin_dir == home / '.local' / 'bin'
        assert env.lib_dir == home / '.local' / 'lib'
        assert env.config_dir == home / '.config'
        assert env.path_entries == ()

    def test_overrides(self, home, tmp_path):
        env = Environment.from_os(environ={
            'ROOTLESS_PREFIX': str(tmp_path / 'prefix'),
            'XDG_BIN_HOME': str(tmp_path / 'bin'),
            'XDG_CONFIG_HOME': str(tmp_path / 'cfg'),
            'SHELL': '/usr/bin/zsh',
        }, home=home)
        assert env.install_base == tmp_path / 'prefix'
        assert env.lib_dir == tmp_path / 'prefix' / 'lib'
        assert env.bin_dir == tmp_path / 'bin'
        assert env.config_dir == tmp_path / 'cfg'
        assert env.shell == 'zsh'

    def test_blank_override_ignored(self, home):
        env = Environment.from_os(environ={'ROOTLESS_PREFIX': '  '}, home=home)
        assert env.install_base == home / '.local'

    def test_prefix_moves_bin_dir(self, home, tmp_path):
        env = Environment.from_os(environ={'ROOTLESS_PREFIX': str(tmp_path / 'p')}, home=home)
        assert env.bin_dir == tmp_path / 'p' / 'bin'

    def test_on_path(self, home):
        env = Environment.from_os(environ={'PATH': f'/usr/bin:{home}/.local/bin'}, home=home)
        assert env.on_path(home / '.local' / 'bin')
        assert not env.on_path(home / 'bin')

    def test_shell_path(self, env, home):
        assert env.shell_path(home / '.local' / 'bin') == '$HOME/.local/bin'
        assert env.shell_path(home) == '$HOME'
        assert env.shell_path(Path('/opt/tools/bin')) == '/opt/tools/bin'

    def test_snapshot_is_frozen(self, env):
        with pytest.raises(AttributeError):
            env.home = Path('/')


class TestRootlessConfig:
    """config.yml structure"""

    def test_defaults(self):
        config = RootlessConfig()
        assert config.profile_files == ['~/.bashrc', '~/.zshrc']
        assert config.http_timeout == 30.0
        assert config.versions == {}

    def test_from_dict(self):
        config = RootlessConfig.from_dict({
            'profile_files': ['~/.bash_profile'],
            'http_timeout': 5,
            'versions': {'go': 1.22},
        })
        assert config.profile_files == ['~/.bash_profile']
        assert config.http_timeout == 5.0
        assert config.versions == {'go': '1.22'}

    def test_invalid_timeout_keeps_default(self):
        assert RootlessConfig.from_dict({'http_timeout': 'soon'}).http_timeout == 30.0

    def test_timeout_floor(self):
        assert RootlessConfig.from_dict({'http_timeout': 0}).http_timeout == 1.0

    def test_profile_files_string_ignored(self, caplog):
        config = RootlessConfig.from_dict({'profile_files': '~/.bashrc'})
        assert config.profile_files == ['~/.bashrc', '~/.zshrc']
        assert 'profile_files' in caplog.text

    def test_versions_list_ignored(self, caplog):
        config = RootlessConfig.from_dict({'versions': ['go', 'direnv']})
        assert config.versions == {}
        assert 'versions' in caplog.text

    def test_load_config_with_wrong_types(self, tmp_path):
        path = tmp_path / 'config.yml'
        path.write_text('profile_files: ~/.zshrc\nversions:\n  - go\nhttp_timeout: 7\n')
        config = ConfigManager.load_config(path)
        assert config.profile_files == RootlessConfig().profile_files
        assert config.versions == {}
        assert config.http_timeout == 7.0

    def test_resolve_profiles(self, env, home):
        config = RootlessConfig(profile_files=['~/.bashrc', '/etc/custom', '~/.bashrc'])
        assert config.resolve_profiles(env) == [home / '.bashrc', Path('/etc/custom')]


class TestConfigManager:
    """Locating, loading and saving config.yml"""

    def test_find_default_location(self, env):
        path = env.config_dir / 'rootless' / 'config.yml'
        assert ConfigManager.find_config(env, environ={}) is None
        path.parent.mkdir(parents=True)
        path.write_text('http_timeout: 10\n')
        assert ConfigManager.find_config(env, environ={}) == path

    def test_explicit_location(self, env, tmp_path):
        explicit = tmp_path / 'custom.yml'
        assert ConfigManager.find_config(env, environ={'ROOTLESS_CONFIG': str(explicit)}) == explicit

    def test_load_yaml(self, tmp_path):
        path = tmp_path / 'config.yml'
        path.write_text('profile_files:\n  - ~/.zshrc\nversions:\n  direnv: v2.33.0\n')
        config = ConfigManager.load_config(path)
        assert config.profile_files == ['~/.zshrc']
        assert config.versions == {'direnv': 'v2.33.0'}

    @pytest.mark.parametrize('content', ['profile_files: [unclosed\n', '- just\n- a list\n', ''])
    def test_bad_yaml_falls_back_to_defaults(self, tmp_path, content):
        path = tmp_path / 'config.yml'
        path.write_text(content)
        assert ConfigManager.load_config(path) == RootlessConfig()

    def test_missing_file(self, tmp_path):
        assert ConfigManager.load_config(tmp_path / 'none.yml') == RootlessConfig()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / 'nested' / 'config.yml'
        config = RootlessConfig(http_timeout=12.0, versions={'go': 'go1.22.1'})
        assert ConfigManager.save_config(config, path)
        assert ConfigManager.load_config(path) == config


class TestVersionManager:
    """Pinned versions"""

    def test_lock_file(self, tmp_path):
        lock = tmp_path / 'tool-versions.lock'
        lock.write_text('[tools]\ndirenv = "v2.32.1"\ncode_server = "4.20.0"\n')
        manager = VersionManager(lock_file=lock)
        assert manager.get_version('direnv') == 'v2.32.1'
        assert manager.get_version('code-server') == '4.20.0'
        assert manager.get_version('go') is None
        assert not manager.is_pinned('go')

    def test_overrides_win(self, tmp_path):
        lock = tmp_path / 'tool-versions.lock'
        lock.write_text('[tools]\ndirenv = "v2.32.1"\n')
        manager = VersionManager(lock_file=lock, overrides={'direnv': 'v2.34.0'})
        assert manager.get_version('direnv') == 'v2.34.0'

    def test_user_lock_file(self, tmp_path):
        lock = tmp_path / 'tool-versions.lock'
        lock.write_text('[tools]\ndirenv = "v2.32.1"\ngo = "1.21.0"\n')
        user_lock = tmp_path / 'user.lock'
        user_lock.write_text('[tools]\ndirenv = "v2.34.0"\n')
        manager = VersionManager(lock_file=lock, user_lock_file=user_lock)
        assert manager.get_version('direnv') == 'v2.34.0'
        assert manager.get_version('go') == '1.21.0'

    def test_overrides_beat_user_lock(self, tmp_path):
        user_lock = tmp_path / 'user.lock'
        user_lock.write_text('[tools]\ndirenv = "v2.34.0"\n')
        manager = VersionManager(lock_file=tmp_path / 'none.lock',
                                 overrides={'direnv': 'v2.35.0'}, user_lock_file=user_lock)
        assert manager.get_version('direnv') == 'v2.35.0'

    def test_missing_user_lock_file(self, tmp_path):
        manager = VersionManager(lock_file=tmp_path / 'none.lock', user_lock_file=tmp_path / 'user.lock')
        assert manager.user_versions == {}

    def test_providers_read_user_lock(self, env):
        from rootless.tools import get_descriptor

        user_lock = env.config_dir / 'rootless' / 'tool-versions.lock'
        user_lock.parent.mkdir(parents=True)
        user_lock.write_text('[tools]\ngo = "go1.20.14"\n')
        provider = get_descriptor('go', env).create_provider(env, RootlessConfig())
        assert provider.resolve_version() == 'go1.20.14'

    def test_invalid_lock_file(self, tmp_path):
        lock = tmp_path / 'tool-versions.lock'
        lock.write_text('[tools\n')
        assert VersionManager(lock_file=lock).versions == {}

    def test_packaged_lock_pins_direnv(self):
        assert DEFAULT_LOCK_FILE.exists()
        assert VersionManager().is_pinned('direnv')
