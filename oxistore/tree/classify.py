"""Classification of values accepted by the tree codec."""
from __future__ import annotations
from enum import Enum
from typing import Any

PRIMITIVE_TYPES = (type(None), bool, int, float, str)


class ValueKind(Enum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    OBJECT = "object"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> ValueKind:
    """Return the storage category of `value`.

    Only exact `dict` instances count as plain objects; subclasses, class
    instances, dates, sets, bytes and callables are unsupported.
    """
    if isinstance(value, PRIMITIVE_TYPES):
        return ValueKind.PRIMITIVE
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if type(value) is dict:
        return ValueKind.OBJECT
    return ValueKind.UNSUPPORTED


def is_primitive(value: Any) -> bool:
    return classify(value) is ValueKind.PRIMITIVE
