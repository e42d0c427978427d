"""Platform adapter registry for video downloads."""
from typing import Dict, Type

from multitool_api.services.url_router import Platform
from .base import PlatformAdapter, PlatformUnavailableError, safe_filename

_ADAPTER_REGISTRY: Dict[str, Type[PlatformAdapter]] = {}


def _key(platform) -> str:
    return platform.value if isinstance(platform, Platform) else str(platform)


def register_adapter(adapter_class: Type[PlatformAdapter]) -> None:
    """Register a platform adapter class.

    Raises:
        ValueError: If an adapter is already registered for this platform.
    """
    name = _key(adapter_class.platform_name())
    if name in _ADAPTER_REGISTRY:
        raise ValueError(f"Adapter already registered for platform '{name}'")
    _ADAPTER_REGISTRY[name] = adapter_class


def get_adapter(platform) -> PlatformAdapter:
    """Get an instantiated adapter for the given platform.

    Raises:
        KeyError: If no adapter is registered for the platform.
    """
    cls = _ADAPTER_REGISTRY[_key(platform)]
    return cls()


__all__ = [
    "register_adapter",
    "get_adapter",
    "PlatformAdapter",
    "PlatformUnavailableError",
    "safe_filename",
]

# Auto-load adapters (triggers self-registration)
from . import youtube_adapter  # noqa: F401,E402
from . import social_adapters  # noqa: F401,E402
