"""
Activity Protocol for Vellum

Every activity is a thin adapter: fill defaults, validate inputs, hand the
document work to a PDFEngine, and return the saved bytes. Validation always
finishes before the first document is loaded or created, so a failed
activity never produces partial output.
"""

import re
from dataclasses import dataclass, fields
from typing import Any, Mapping, Protocol, Type, TypeVar

from errors import MissingRequiredInput
from utilities import Print

PDF_CONTENT_TYPE = "application/pdf"

InputsT = TypeVar("InputsT")

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


@dataclass
class ActivityResult:
    """Output of every activity: the resulting document bytes."""
    result: bytes
    content_type: str = PDF_CONTENT_TYPE

    def to_outputs(self) -> dict:
        """Named outputs as the workflow host expects them."""
        return {'result': self.result}


class Activity(Protocol):
    """
    Protocol for workflow activities.

    Activities are responsible for:
    - Explicit default filling and validation of their inputs
    - Delegating every document mutation to the injected PDF engine
    """

    inputs_type: Type

    def execute(self, inputs) -> ActivityResult:
        """
        Run the activity.

        Args:
            inputs: The activity's inputs dataclass

        Returns:
            ActivityResult with the resulting PDF bytes

        Raises:
            ActivityError: If inputs fail validation (before any mutation)
        """
        ...

    @property
    def name(self) -> str:
        """Activity identifier (e.g., 'create_pdf')."""
        ...


def to_snake_case(key: str) -> str:
    """'pageBounds' -> 'page_bounds'; snake_case keys pass through unchanged."""
    return _CAMEL_BOUNDARY.sub('_', key).lower()


def inputs_from_mapping(inputs_type: Type[InputsT], mapping: Mapping[str, Any]) -> InputsT:
    """
    Build an inputs dataclass from a workflow input mapping.

    Keys may be camelCase (as the workflow host names them) or snake_case.
    None values are dropped so the dataclass defaults apply. Unknown keys
    are logged and ignored.
    """
    known = {f.name for f in fields(inputs_type)}
    kwargs = {}
    for key, value in mapping.items():
        field_name = to_snake_case(key)
        if field_name not in known:
            Print("WARNING", f"Ignoring unknown input '{key}' for {inputs_type.__name__}")
            continue
        if value is not None:
            kwargs[field_name] = value
    return inputs_type(**kwargs)


def require(value, field: str) -> None:
    """
    Raises:
        MissingRequiredInput: If value is None or empty
    """
    if value is None:
        raise MissingRequiredInput(field)
    if isinstance(value, (bytes, bytearray, memoryview, str, list, tuple)) and len(value) == 0:
        raise MissingRequiredInput(field)
