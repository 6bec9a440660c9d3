from .registry import ProviderRegistry, get_provider_registry, open_query_handler

__all__ = ["ProviderRegistry", "get_provider_registry", "open_query_handler"]
