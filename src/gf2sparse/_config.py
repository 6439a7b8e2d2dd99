"""
gf2sparse Config - Global Configuration System

Controls which storage engine the factory functions build, how matrices are
serialized to JSON and how they are rendered as text. Values can be set
globally or overridden for the current thread inside a context manager.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Callable, Dict, Any, List
import logging
import os
import threading

from ._errors import InvalidArgument

logger = logging.getLogger("gf2sparse.config")

BACKEND_ENV_VAR = 'GF2SPARSE_BACKEND'

# Values of gf2sparse.sparse.Backend
_BACKEND_NAMES = ('compact', 'map', 'windowed')


def _normalize_backend(value: Any) -> str:
    """Accept a Backend member or its string value."""
    name = getattr(value, 'value', value)
    if not isinstance(name, str) or name.lower() not in _BACKEND_NAMES:
        raise InvalidArgument(
            f"Unknown backend {value!r}. Supported: {list(_BACKEND_NAMES)}"
        )
    return name.lower()


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class BackendConfig:
    """Storage engine used when a caller does not name one."""
    default: str = 'compact'

    def __post_init__(self):
        self.default = _normalize_backend(self.default)


@dataclass
class SerializeConfig:
    """Options passed through to json.dumps."""
    indent: Optional[int] = None
    sort_keys: bool = False


@dataclass
class RenderConfig:
    """Characters used by the tabular text rendering."""
    zero: str = '0'
    one: str = '1'
    separator: str = ' '


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SparseConfig:
    """
    Global configuration manager for gf2sparse.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        gf2sparse.config.default_backend = 'map'

        # Local configuration (context manager)
        with gf2sparse.config.local(backend=BackendConfig('windowed')):
            m = gf2sparse.matrix(3, 3)   # WindowedMatrix
        # Back to global config
    """

    _SECTIONS = ('backend', 'serialize', 'render')

    def __init__(self):
        self._global_backend = BackendConfig()
        self._global_serialize = SerializeConfig()
        self._global_render = RenderConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

        self._callbacks: Dict[str, List[Callable]] = {
            name: [] for name in self._SECTIONS
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    def _get(self, name: str):
        value = getattr(self._local, name, None)
        if value is not None:
            return value
        return getattr(self, f"_global_{name}")

    @property
    def backend(self) -> BackendConfig:
        """Get backend configuration."""
        return self._get("backend")

    @backend.setter
    def backend(self, value: BackendConfig):
        """Set global backend configuration."""
        self._global_backend = value
        self._notify("backend", value)

    @property
    def serialize(self) -> SerializeConfig:
        """Get serialization configuration."""
        return self._get("serialize")

    @serialize.setter
    def serialize(self, value: SerializeConfig):
        self._global_serialize = value
        self._notify("serialize", value)

    @property
    def render(self) -> RenderConfig:
        """Get rendering configuration."""
        return self._get("render")

    @render.setter
    def render(self, value: RenderConfig):
        self._global_render = value
        self._notify("render", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def default_backend(self) -> str:
        """Name of the engine built by the factory functions."""
        return self.backend.default

    @default_backend.setter
    def default_backend(self, value: Any):
        self.backend = BackendConfig(default=_normalize_backend(value))

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (backend, serialize, render)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise InvalidArgument(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _snapshot_local(self, keys: List[str]) -> Dict[str, Any]:
        """Current thread-local overrides for ``keys`` (None where unset)."""
        return {key: getattr(self._local, key, None) for key in keys}

    def _restore_local(self, saved: Dict[str, Any]):
        """Put back thread-local overrides taken by _snapshot_local."""
        for key, value in saved.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config ("backend", "serialize", "render")
            callback: Function to call when config changes
        """
        if config_name in self._callbacks:
            self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        logger.debug("config %s changed: %r", config_name, value)
        for callback in self._callbacks.get(config_name, []):
            try:
                callback(value)
            except Exception:
                logger.warning("config callback %r failed", callback, exc_info=True)

    # -------------------------------------------------------------------------
    # Environment / Reset
    # -------------------------------------------------------------------------

    def load_env(self, environ: Optional[Dict[str, str]] = None):
        """Seed the global defaults from environment variables."""
        environ = os.environ if environ is None else environ
        name = environ.get(BACKEND_ENV_VAR, '').strip()
        if name:
            self._global_backend = BackendConfig(default=_normalize_backend(name))
            logger.debug("default backend %r taken from %s", name, BACKEND_ENV_VAR)

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_backend = BackendConfig()
        self._global_serialize = SerializeConfig()
        self._global_render = RenderConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {name: asdict(self._get(name)) for name in self._SECTIONS}

    def __repr__(self) -> str:
        return f"SparseConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SparseConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())
        self._saved: Dict[str, Any] = {}

    def __enter__(self):
        self._saved = self._config._snapshot_local(self._keys)
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._saved)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = SparseConfig()
config.load_env()


def get_config() -> SparseConfig:
    """Get the global configuration instance."""
    return config


__all__ = [
    'BackendConfig',
    'SerializeConfig',
    'RenderConfig',
    'SparseConfig',
    'config',
    'get_config',
    'BACKEND_ENV_VAR',
]
