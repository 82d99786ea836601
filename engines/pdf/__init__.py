"""
PDF Engine Registry for Vellum

Factory pattern with decorator-based registration.

Usage:
    # In engine implementation:
    @register_pdf_engine("pikepdf")
    class PikePDFEngineFactory:
        @staticmethod
        def create(config: dict) -> PDFEngine:
            return PikePDFEngine(config)

    # To get an engine:
    engine = get_pdf_engine("pikepdf", config)
"""

from typing import Dict, Callable
from .base import PDFEngine

# Global registry of PDF engine factories
PDF_REGISTRY: Dict[str, Callable[[dict], PDFEngine]] = {}


def register_pdf_engine(name: str):
    """
    Decorator to register PDF engine factories.

    Args:
        name: Unique identifier for this engine

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        PDF_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_pdf_engine(name: str, config: dict) -> PDFEngine:
    """
    Get a PDF engine instance by name.

    Args:
        name: Engine identifier (must be registered)
        config: Engine-specific configuration dictionary

    Returns:
        Initialized PDF engine instance

    Raises:
        ValueError: If engine name is not registered
    """
    if name not in PDF_REGISTRY:
        available = ', '.join(PDF_REGISTRY.keys()) if PDF_REGISTRY else 'none'
        raise ValueError(
            f"Unknown PDF engine: '{name}'. "
            f"Available engines: {available}"
        )
    return PDF_REGISTRY[name](config)


# Import built-in engines to trigger registration
from . import pikepdf_engine  # noqa: E402,F401
