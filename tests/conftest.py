"""Shared pytest fixtures for cocometa tests."""

from __future__ import annotations

import json
from typing import Any

import pytest


def make_document(**overrides: Any) -> dict[str, Any]:
    """Build a small well-formed COCO document; top-level keys can be replaced.

    Pass ``key=None`` to drop a top-level key entirely.
    """
    document: dict[str, Any] = {
        "info": {"description": "unit-test subset"},
        "images": [
            {
                "id": 397133,
                "coco_url": "http://images.cocodataset.org/val2017/000000397133.jpg",
                "file_name": "000000397133.jpg",
                "height": 427,
                "width": 640,
            },
            {
                "id": 37777,
                "coco_url": "http://images.cocodataset.org/val2017/000000037777.jpg",
                "file_name": "000000037777.jpg",
                "height": 230,
                "width": 352,
            },
        ],
        "annotations": [
            {
                "id": 1768,
                "image_id": 397133,
                "category_id": 1,
                "bbox": [388.66, 69.92, 109.41, 277.62],
                "area": 17376.91885,
                "iscrowd": 0,
                "segmentation": [[510.66, 423.01, 511.72, 420.03]],
            },
            {
                "id": 1769,
                "image_id": 37777,
                "category_id": 64,
                "bbox": [10.0, 20.0, 30.5, 40.25],
                "area": 1227.625,
                "iscrowd": 0,
            },
            {
                "id": 1770,
                "image_id": 397133,
                "category_id": 64,
                "bbox": [0, 0, 12, 8],
                "area": 96,
                "iscrowd": 0,
            },
        ],
        "categories": [
            {"id": 1, "name": "person", "supercategory": "person"},
            {"id": 64, "name": "potted plant", "supercategory": "furniture"},
        ],
    }
    for key, value in overrides.items():
        if value is None:
            document.pop(key, None)
        else:
            document[key] = value
    return document


def make_annotation(**fields: Any) -> dict[str, Any]:
    """Build one wire-format annotation object with sensible defaults."""
    annotation: dict[str, Any] = {
        "id": 1,
        "image_id": 1,
        "category_id": 1,
        "bbox": [1.0, 2.0, 3.0, 4.0],
        "area": 12.0,
    }
    annotation.update(fields)
    return annotation


@pytest.fixture
def coco_document() -> dict[str, Any]:
    """Small well-formed COCO document as a Python dict."""
    return make_document()


@pytest.fixture
def coco_json(coco_document: dict[str, Any]) -> str:
    """The ``coco_document`` fixture serialized to JSON text."""
    return json.dumps(coco_document)
