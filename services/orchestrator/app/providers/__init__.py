from .clients import BaseProviderClient, GenerationResult, KimiClient, make_provider_client

__all__ = [
    "BaseProviderClient",
    "GenerationResult",
    "KimiClient",
    "make_provider_client",
]
