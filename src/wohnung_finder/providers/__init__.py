from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Type

from .base import BaseProvider

# Populated by @register_provider as the provider modules are imported
PROVIDER_REGISTRY: Dict[str, Type[BaseProvider]] = {}


def register_provider(provider_id: str):
    """Decorator to register a provider class under its registry key."""

    def decorator(cls: Type[BaseProvider]):
        cls.provider_id = provider_id
        PROVIDER_REGISTRY[provider_id] = cls
        return cls

    return decorator


def build_registry(config: Optional[Dict[str, Any]] = None, city: str = "Berlin") -> Mapping[str, BaseProvider]:
    """
    Instantiate every registered provider once.

    Args:
        config: The "providers" section of the configuration, keyed by provider id
        city: City used by extractors and search links

    Returns:
        Read-only mapping provider id -> provider, in registration order
    """
    config = config or {}
    providers = {
        provider_id: provider_class(config.get(provider_id) or {}, city)
        for provider_id, provider_class in PROVIDER_REGISTRY.items()
    }
    return MappingProxyType(providers)


def list_available_providers() -> list:
    """Return list of registered provider ids."""
    return list(PROVIDER_REGISTRY.keys())


# Import providers to register them; order here is the registry order
from . import vonovia  # noqa: E402,F401
from . import gewobag  # noqa: E402,F401
from . import degewo  # noqa: E402,F401
from . import deutsche_wohnen  # noqa: E402,F401
from . import stadtundland  # noqa: E402,F401
from . import berlinovo  # noqa: E402,F401
from . import google  # noqa: E402,F401

__all__ = [
    "BaseProvider",
    "PROVIDER_REGISTRY",
    "build_registry",
    "list_available_providers",
    "register_provider",
]
