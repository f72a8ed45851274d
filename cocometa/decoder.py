"""Decode COCO annotation JSON into :class:`~cocometa.models.Metadata`.

Every entity has its own hand-written decode function, so each wire-key
rule is one explicit line. Wire keys match attribute names except ``bbox``,
which becomes ``Annotation.bounding_box`` via :func:`_decode_rectangle`.

The decoder performs no I/O and does not log; callers own both.
"""

from __future__ import annotations

import json
import math
from typing import Any

from cocometa.exceptions import (
    MalformedBoundingBoxError,
    MalformedDocumentError,
    TypeMismatchError,
)
from cocometa.models import Annotation, Category, Image, Metadata, Rectangle

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_BBOX_LENGTH = 4

# Top-level collections, in the order they are decoded.
_COLLECTIONS = ("images", "annotations", "categories")


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------


def decode(json_text: str | bytes, *, strict: bool = False) -> Metadata:
    """Decode a COCO annotation document.

    Parameters
    ----------
    json_text:
        JSON document as ``str`` or UTF-8 ``bytes``.
    strict:
        When True, a missing (or ``null``) ``images``, ``annotations`` or
        ``categories`` key raises ``MalformedDocumentError``. When False the
        collection decodes to an empty tuple.

    Raises
    ------
    MalformedDocumentError
        Invalid JSON, a non-object root, a collection that is not an array,
        an entry that is not an object, or a missing entity field.
    MalformedBoundingBoxError
        A ``bbox`` that is not an array of exactly 4 finite numbers.
    TypeMismatchError
        A numeric or string field holding a value of another JSON type, or
        an ``area`` outside the float range.

    """
    try:
        document = json.loads(json_text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, UnicodeDecodeError and _reject_constant raise ValueError.
        raise MalformedDocumentError(f"invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise MalformedDocumentError(
            f"expected a JSON object at the top level, got {_json_type(document)}"
        )

    entries = {key: _collection(document, key, strict=strict) for key in _COLLECTIONS}
    return Metadata(
        images=tuple(_decode_image(obj, path) for path, obj in entries["images"]),
        annotations=tuple(
            _decode_annotation(obj, path) for path, obj in entries["annotations"]
        ),
        categories=tuple(
            _decode_category(obj, path) for path, obj in entries["categories"]
        ),
    )


class AnnotationDecoder:
    """Reusable decoder bound to one missing-collection policy."""

    def __init__(self, *, strict: bool = False) -> None:
        """Initialize with the strictness used for every ``decode`` call."""
        self.strict = strict

    def decode(self, json_text: str | bytes) -> Metadata:
        """Decode *json_text* with this decoder's policy. See :func:`decode`."""
        return decode(json_text, strict=self.strict)

    def __repr__(self) -> str:
        return f"AnnotationDecoder(strict={self.strict})"


# ------------------------------------------------------------------
# Entity decoders
# ------------------------------------------------------------------


def _decode_image(obj: dict[str, Any], path: str) -> Image:
    return Image(
        id=_int_field(obj, "id", path),
        coco_url=_str_field(obj, "coco_url", path),
        height=_int_field(obj, "height", path),
        width=_int_field(obj, "width", path),
    )


def _decode_category(obj: dict[str, Any], path: str) -> Category:
    return Category(id=_int_field(obj, "id", path))


def _decode_annotation(obj: dict[str, Any], path: str) -> Annotation:
    return Annotation(
        id=_int_field(obj, "id", path),
        image_id=_int_field(obj, "image_id", path),
        category_id=_int_field(obj, "category_id", path),
        bounding_box=_decode_rectangle(
            _required(obj, "bbox", path), _join(path, "bbox")
        ),
        area=_float_field(obj, "area", path),
    )


def _decode_rectangle(value: object, path: str) -> Rectangle:
    """Convert a positional ``[x, y, width, height]`` array into a Rectangle.

    Elements are read by position only. The array must hold exactly four
    JSON numbers; it is never truncated or padded.
    """
    if not isinstance(value, list):
        raise MalformedBoundingBoxError(
            f"expected an array of {_BBOX_LENGTH} numbers, got {_json_type(value)}",
            path,
        )
    if len(value) != _BBOX_LENGTH:
        raise MalformedBoundingBoxError(
            f"expected {_BBOX_LENGTH} elements, got {len(value)}", path
        )
    components: list[float] = []
    for i, element in enumerate(value):
        if not _is_number(element):
            raise MalformedBoundingBoxError(
                f"element {i} must be a number, got {_json_type(element)}", path
            )
        number = _finite_float(element)
        if number is None:
            raise MalformedBoundingBoxError(
                f"element {i} is out of floating-point range", path
            )
        components.append(number)
    x, y, width, height = components
    return Rectangle(x=x, y=y, width=width, height=height)


# ------------------------------------------------------------------
# Field helpers
# ------------------------------------------------------------------


def _collection(
    document: dict[str, Any],
    key: str,
    *,
    strict: bool,
) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(path, object)`` pairs for one top-level collection."""
    raw = document.get(key)
    if raw is None:
        if strict:
            raise MalformedDocumentError(f"missing required collection {key!r}")
        return []
    if not isinstance(raw, list):
        raise MalformedDocumentError(
            f"expected an array, got {_json_type(raw)}", key
        )
    result: list[tuple[str, dict[str, Any]]] = []
    for i, item in enumerate(raw):
        item_path = f"{key}[{i}]"
        if not isinstance(item, dict):
            raise MalformedDocumentError(
                f"expected an object, got {_json_type(item)}", item_path
            )
        result.append((item_path, item))
    return result


def _required(obj: dict[str, Any], key: str, path: str) -> object:
    if key not in obj:
        raise MalformedDocumentError("missing required field", _join(path, key))
    return obj[key]


def _int_field(obj: dict[str, Any], key: str, path: str) -> int:
    """Read a 64-bit integer; integral floats such as ``7.0`` are accepted."""
    value = _required(obj, key, path)
    field_path = _join(path, key)
    if not _is_number(value):
        raise TypeMismatchError(
            f"expected an integer, got {_json_type(value)}", field_path
        )
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeMismatchError(
                f"expected an integer, got {value!r}", field_path
            )
        value = int(value)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise TypeMismatchError(
            f"integer {value} does not fit in 64 bits", field_path
        )
    return value


def _float_field(obj: dict[str, Any], key: str, path: str) -> float:
    value = _required(obj, key, path)
    if not _is_number(value):
        raise TypeMismatchError(
            f"expected a number, got {_json_type(value)}", _join(path, key)
        )
    number = _finite_float(value)
    if number is None:
        raise TypeMismatchError(
            "number is out of floating-point range", _join(path, key)
        )
    return number


def _str_field(obj: dict[str, Any], key: str, path: str) -> str:
    value = _required(obj, key, path)
    if not isinstance(value, str):
        raise TypeMismatchError(
            f"expected a string, got {_json_type(value)}", _join(path, key)
        )
    return value


def _finite_float(value: float) -> float | None:
    """Convert a JSON number to a finite float, or None when it does not fit."""
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _reject_constant(name: str) -> float:
    # Python's json module accepts NaN and Infinity, which JSON does not.
    raise ValueError(f"{name} is not a valid JSON value")


def _is_number(value: object) -> bool:
    # bool is an int subclass, but JSON true/false are not numbers.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _json_type(value: object) -> str:
    """Name of the JSON type *value* was parsed from."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
