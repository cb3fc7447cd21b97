"""IFC attribute helpers.

IfcOpenShell returns attribute values as primitives, entity references,
tuples, or single-field wrappers for IFC defined types
(e.g. ``IfcAreaMeasure(12.5)``). ``unwrap`` reduces all of them uniformly.
"""
from __future__ import annotations

import math
import numbers
from typing import Any, Mapping

import ifcopenshell


def is_wrapper(value: Any) -> bool:
    """True for single-field containers around a primitive value."""
    if isinstance(value, ifcopenshell.entity_instance):
        # Defined-type instances (IfcLabel, IfcAreaMeasure, ...) carry no id
        return value.id() == 0
    if isinstance(value, Mapping):
        return set(value.keys()) == {"value"}
    return False


def unwrap(value: Any) -> Any:
    """Recursively unwrap an attribute value to its primitive form.

    Wrappers are reduced to the wrapped value, lists and tuples are
    unwrapped element-wise (returned as tuples), references and
    primitives are returned unchanged.

    Args:
        value: Raw attribute value

    Returns:
        Primitive, entity reference, or tuple of those
    """
    if isinstance(value, ifcopenshell.entity_instance):
        if value.id() == 0:
            return unwrap(value.wrappedValue)
        return value
    if isinstance(value, Mapping) and is_wrapper(value):
        return unwrap(value["value"])
    if isinstance(value, (tuple, list)):
        return tuple(unwrap(item) for item in value)
    return value


def is_reference(value: Any) -> bool:
    """True for a reference to another record."""
    return isinstance(value, ifcopenshell.entity_instance) and value.id() != 0


def is_scalar(value: Any) -> bool:
    """True for primitive scalar values (str, number, bool, None)."""
    return value is None or isinstance(value, (str, bool, numbers.Number))


def to_number(value: Any) -> float | None:
    """Convert a primitive to a finite float.

    Booleans are not numbers here; numeric strings are accepted.

    Args:
        value: Unwrapped primitive

    Returns:
        Finite float or None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def attribute(record: Any, name: str) -> Any:
    """Read and unwrap a named attribute, None when the schema lacks it."""
    try:
        return unwrap(getattr(record, name))
    except (AttributeError, RuntimeError):
        return None
