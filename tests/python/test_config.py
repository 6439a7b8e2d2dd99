"""
Tests for the global configuration system.
"""

import logging
import threading

import pytest

import gf2sparse
from gf2sparse import (
    InvalidArgument, SparseConfig, BackendConfig, SerializeConfig, RenderConfig,
    CompactMatrix, MapMatrix, WindowedMatrix, Backend,
)
from gf2sparse._config import BACKEND_ENV_VAR


class TestDefaults:

    def test_default_values(self):
        cfg = SparseConfig()
        assert cfg.default_backend == 'compact'
        assert cfg.serialize.indent is None
        assert cfg.render.separator == ' '

    def test_to_dict(self):
        assert SparseConfig().to_dict() == {
            'backend': {'default': 'compact'},
            'serialize': {'indent': None, 'sort_keys': False},
            'render': {'zero': '0', 'one': '1', 'separator': ' '},
        }

    def test_get_config_is_global(self):
        assert gf2sparse.get_config() is gf2sparse.config


class TestBackendSetting:

    def test_set_by_name(self):
        gf2sparse.config.default_backend = 'MAP'
        assert gf2sparse.config.default_backend == 'map'
        assert type(gf2sparse.matrix(2, 2)) is MapMatrix

    def test_set_by_enum(self):
        gf2sparse.config.default_backend = Backend.WINDOWED
        assert type(gf2sparse.identity(2)) is WindowedMatrix

    def test_invalid_backend(self):
        with pytest.raises(InvalidArgument):
            gf2sparse.config.default_backend = 'dense'
        with pytest.raises(InvalidArgument):
            BackendConfig('gpu')

    def test_reset(self):
        gf2sparse.config.default_backend = 'map'
        gf2sparse.config.serialize = SerializeConfig(indent=2)
        gf2sparse.config.reset()
        assert gf2sparse.config.default_backend == 'compact'
        assert gf2sparse.config.serialize.indent is None


class TestLocalContext:

    def test_override_and_restore(self):
        with gf2sparse.config.local(backend=BackendConfig('map')) as cfg:
            assert cfg is gf2sparse.config
            assert type(gf2sparse.matrix(1, 1)) is MapMatrix
        assert type(gf2sparse.matrix(1, 1)) is CompactMatrix

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with gf2sparse.config.local(render=RenderConfig(one='#')):
                raise RuntimeError("boom")
        assert gf2sparse.config.render.one == '1'

    def test_unknown_section(self):
        with pytest.raises(InvalidArgument):
            gf2sparse.config.local(threads=4)

    def test_thread_local(self):
        """An override in one thread is invisible to another."""
        seen = {}
        entered = threading.Event()
        release = threading.Event()

        def worker():
            with gf2sparse.config.local(backend=BackendConfig('windowed')):
                seen['worker'] = gf2sparse.config.default_backend
                entered.set()
                release.wait(5)

        t = threading.Thread(target=worker)
        t.start()
        entered.wait(5)
        seen['main'] = gf2sparse.config.default_backend
        release.set()
        t.join()

        assert seen == {'worker': 'windowed', 'main': 'compact'}

    def test_nested_restores_outer(self):
        with gf2sparse.config.local(backend=BackendConfig('map')):
            with gf2sparse.config.local(backend=BackendConfig('windowed')):
                assert gf2sparse.config.default_backend == 'windowed'
            assert gf2sparse.config.default_backend == 'map'
            assert type(gf2sparse.matrix(1, 1)) is MapMatrix
        assert gf2sparse.config.default_backend == 'compact'


class TestCallbacks:

    def test_on_change(self):
        cfg = SparseConfig()
        calls = []
        cfg.on_change('render', calls.append)
        new = RenderConfig(zero='.')
        cfg.render = new
        assert calls == [new]

    def test_default_backend_notifies(self):
        cfg = SparseConfig()
        calls = []
        cfg.on_change('backend', calls.append)
        cfg.default_backend = 'map'
        assert calls == [BackendConfig('map')]

    def test_failing_callback_is_logged(self, caplog):
        cfg = SparseConfig()
        after = []

        def broken(value):
            raise RuntimeError("broken callback")

        cfg.on_change('serialize', broken)
        cfg.on_change('serialize', after.append)
        with caplog.at_level(logging.WARNING, logger="gf2sparse.config"):
            cfg.serialize = SerializeConfig(indent=1)

        assert len(after) == 1
        assert any("failed" in r.getMessage() for r in caplog.records)
        assert cfg.serialize.indent == 1


class TestEnvironment:

    def test_load_env(self):
        cfg = SparseConfig()
        cfg.load_env({BACKEND_ENV_VAR: 'windowed'})
        assert cfg.default_backend == 'windowed'

    def test_load_env_blank(self):
        cfg = SparseConfig()
        cfg.load_env({BACKEND_ENV_VAR: '  '})
        assert cfg.default_backend == 'compact'

    def test_load_env_invalid(self):
        with pytest.raises(InvalidArgument):
            SparseConfig().load_env({BACKEND_ENV_VAR: 'sparse'})

    def test_load_env_from_os(self, monkeypatch):
        monkeypatch.setenv(BACKEND_ENV_VAR, 'map')
        cfg = SparseConfig()
        cfg.load_env()
        assert cfg.default_backend == 'map'
