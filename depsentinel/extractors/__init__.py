"""Source symbol extractors — auto-registered on import."""

from depsentinel.extractors import (
    java,  # noqa: F401
    kotlin,  # noqa: F401
)
from depsentinel.extractors.registry import (
    EXTRACTOR_REGISTRY,
    SymbolExtractor,
    extractor_for_path,
    register_extractor,
)

__all__ = ["EXTRACTOR_REGISTRY", "SymbolExtractor", "extractor_for_path", "register_extractor"]
