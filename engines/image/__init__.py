"""
Image Embedder Registry for Vellum

Factory pattern with decorator-based registration. Unlike the PDF engine
registry, embedders are usually looked up by content: detect_image_format()
asks each registered embedder whether the payload carries its signature.

Usage:
    # In embedder implementation:
    @register_image_embedder("png")
    class PNGEmbedderFactory:
        @staticmethod
        def create(config: dict) -> ImageEmbedder:
            return PNGEmbedder(config)

    # To get an embedder for some bytes:
    embedder = get_embedder_for(image_bytes, config)
"""

from typing import Dict, Callable, Optional
from .base import ImageEmbedder, EmbeddedImage

from errors import UnsupportedImageFormat

# Global registry of image embedder factories
IMAGE_EMBEDDER_REGISTRY: Dict[str, Callable[[dict], ImageEmbedder]] = {}


def register_image_embedder(name: str):
    """
    Decorator to register image embedder factories.

    Args:
        name: Unique identifier for this embedder

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        IMAGE_EMBEDDER_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_image_embedder(name: str, config: dict) -> ImageEmbedder:
    """
    Get an image embedder instance by name.

    Raises:
        ValueError: If embedder name is not registered
    """
    if name not in IMAGE_EMBEDDER_REGISTRY:
        available = ', '.join(IMAGE_EMBEDDER_REGISTRY.keys()) if IMAGE_EMBEDDER_REGISTRY else 'none'
        raise ValueError(
            f"Unknown image embedder: '{name}'. "
            f"Available embedders: {available}"
        )
    return IMAGE_EMBEDDER_REGISTRY[name](config)


def detect_image_format(data: bytes, config: Optional[dict] = None) -> Optional[str]:
    """
    Name of the registered embedder whose signature starts the payload.

    Args:
        data: Raw image bytes
        config: Per-embedder configuration, keyed by embedder name

    Returns:
        Embedder name (e.g. 'jpeg', 'png') or None if nothing matches
    """
    config = config or {}
    for name in IMAGE_EMBEDDER_REGISTRY:
        embedder = get_image_embedder(name, config.get(name, {}))
        if embedder.matches(data):
            return name
    return None


def get_embedder_for(data: bytes, config: Optional[dict] = None) -> ImageEmbedder:
    """
    Get the embedder that handles this payload.

    Raises:
        UnsupportedImageFormat: If no registered signature matches
    """
    config = config or {}
    name = detect_image_format(data, config)
    if name is None:
        supported = ', '.join(n.upper() for n in IMAGE_EMBEDDER_REGISTRY)
        raise UnsupportedImageFormat(f"image format not supported. Must be one of: {supported}.")
    return get_image_embedder(name, config.get(name, {}))


# Import built-in embedders to trigger registration
from . import jpeg  # noqa: E402,F401
from . import png  # noqa: E402,F401
