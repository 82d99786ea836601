"""
Activity Registry for Vellum

Factory pattern with decorator-based registration.

Usage:
    # In activity implementation:
    @register_activity("create_pdf")
    class CreatePdfFactory:
        @staticmethod
        def create(engine: PDFEngine, config: dict) -> Activity:
            return CreatePdf(engine, config)

    # To get an activity:
    activity = get_activity("create_pdf", engine, config)
"""

from typing import Callable, Dict

from .base import Activity, ActivityResult, inputs_from_mapping

# Global registry of activity factories
ACTIVITY_REGISTRY: Dict[str, Callable[..., Activity]] = {}


def register_activity(name: str):
    """
    Decorator to register activity factories.

    Args:
        name: Unique identifier for this activity

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        ACTIVITY_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_activity(name: str, engine, config: dict) -> Activity:
    """
    Get an activity instance by name.

    Args:
        name: Activity identifier (must be registered)
        engine: PDFEngine the activity delegates document work to
        config: Global configuration dictionary

    Raises:
        ValueError: If activity name is not registered
    """
    if name not in ACTIVITY_REGISTRY:
        available = ', '.join(ACTIVITY_REGISTRY.keys()) if ACTIVITY_REGISTRY else 'none'
        raise ValueError(
            f"Unknown activity: '{name}'. "
            f"Available activities: {available}"
        )
    return ACTIVITY_REGISTRY[name](engine, config)


# Import built-in activities to trigger registration
from . import create_pdf  # noqa: E402,F401
from . import merge_pdfs  # noqa: E402,F401
from . import add_text_to_pdf  # noqa: E402,F401
from . import add_image_to_pdf  # noqa: E402,F401
from . import add_georeference_to_pdf  # noqa: E402,F401

from .create_pdf import CreatePdf, CreatePdfInputs  # noqa: E402
from .merge_pdfs import MergePdfs, MergePdfsInputs  # noqa: E402
from .add_text_to_pdf import AddTextToPdf, AddTextToPdfInputs  # noqa: E402
from .add_image_to_pdf import AddImageToPdf, AddImageToPdfInputs  # noqa: E402
from .add_georeference_to_pdf import AddGeoreferenceToPdf, AddGeoreferenceToPdfInputs  # noqa: E402

__all__ = [
    'ACTIVITY_REGISTRY',
    'Activity',
    'ActivityResult',
    'get_activity',
    'inputs_from_mapping',
    'register_activity',
    'CreatePdf', 'CreatePdfInputs',
    'MergePdfs', 'MergePdfsInputs',
    'AddTextToPdf', 'AddTextToPdfInputs',
    'AddImageToPdf', 'AddImageToPdfInputs',
    'AddGeoreferenceToPdf', 'AddGeoreferenceToPdfInputs',
]
