"""
Error types raised by Vellum activities.

Every error also derives from the built-in exception a plain Python caller
would expect (ValueError for bad input, IndexError for a bad page index),
so callers can catch either the domain class or the built-in one.

Errors coming from pikepdf or Pillow (malformed PDF bytes, corrupt images)
are not wrapped; they propagate unchanged.
"""


class ActivityError(Exception):
    """Base class for all activity input errors."""


class MissingRequiredInput(ActivityError, ValueError):
    """A required input (source, text, image, ...) was not provided."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class MissingCoordinateSystem(MissingRequiredInput):
    def __init__(self, field: str = "coordinate_system"):
        super().__init__(field)


class MissingSources(MissingRequiredInput):
    def __init__(self, field: str = "sources"):
        super().__init__(field)


class InvalidBounds(ActivityError, ValueError):
    """page_bounds / map_bounds do not have the required number of coordinate pairs."""


class InvalidColor(ActivityError, ValueError):
    """A color string is not 6 or 8 hex digits."""

    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Invalid hex color: '{value}'. Expected 6 (RRGGBB) or 8 (RRGGBBAA) hex digits."
        )


class UnsupportedImageFormat(ActivityError, ValueError):
    """Image bytes match none of the registered image signatures."""


class PageIndexOutOfRange(ActivityError, IndexError):
    def __init__(self, page_index: int, page_count: int):
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(
            f"page_index {page_index} is out of range for a document with {page_count} page"
            f"{'s' if page_count != 1 else ''}"
        )


class InvalidPageSize(ActivityError, ValueError):
    """A negative page width or height."""


class UnencodableText(ActivityError, ValueError):
    """Text holds characters the standard fonts' WinAnsi encoding cannot represent."""

    def __init__(self, characters: str):
        self.characters = characters
        super().__init__(
            f"WinAnsi cannot encode {', '.join(repr(c) for c in characters)}; "
            f"standard fonts only cover Windows-1252 characters"
        )
