"""Unit tests for MetadataIndex lookups and dangling reference detection."""

from __future__ import annotations

import json

import pytest

from cocometa.decoder import decode
from cocometa.exceptions import CocometaError, ReferenceLookupError
from cocometa.index import DanglingReference, MetadataIndex
from tests.conftest import make_annotation, make_document


@pytest.fixture
def index(coco_json: str) -> MetadataIndex:
    """Index over the shared sample document."""
    return MetadataIndex(decode(coco_json))


def test_image_lookup(index: MetadataIndex) -> None:
    """Images are found by id."""
    assert index.image(37777).width == 352


def test_category_and_annotation_lookup(index: MetadataIndex) -> None:
    """Categories and annotations are found by id."""
    assert index.category(64).id == 64
    assert index.annotation(1769).bounding_box.width == 30.5


@pytest.mark.parametrize(
    ("method", "kind"),
    [("image", "image"), ("category", "category"), ("annotation", "annotation")],
)
def test_unknown_id_raises_lookup_error(
    index: MetadataIndex, method: str, kind: str
) -> None:
    """Missing ids raise ReferenceLookupError, which is also a LookupError."""
    with pytest.raises(ReferenceLookupError) as exc_info:
        getattr(index, method)(424242)

    assert exc_info.value.kind == kind
    assert exc_info.value.entity_id == 424242
    assert isinstance(exc_info.value, LookupError)
    assert isinstance(exc_info.value, CocometaError)


def test_image_ids_in_document_order(index: MetadataIndex) -> None:
    """image_ids follows the images array."""
    assert index.image_ids == (397133, 37777)


def test_annotations_for_image(index: MetadataIndex) -> None:
    """Annotations are grouped per image in document order."""
    assert [a.id for a in index.annotations_for_image(397133)] == [1768, 1770]
    assert [a.id for a in index.annotations_for_image(37777)] == [1769]
    assert index.annotations_for_image(1) == ()


def test_category_index_is_dense(index: MetadataIndex) -> None:
    """Sparse COCO category ids map to contiguous positions."""
    assert index.category_index(1) == 0
    assert index.category_index(64) == 1
    with pytest.raises(ReferenceLookupError):
        index.category_index(2)


def test_duplicate_ids_first_occurrence_wins() -> None:
    """When an id repeats, lookups return the first entity."""
    document = make_document(
        images=[
            {"id": 1, "coco_url": "first", "height": 1, "width": 1},
            {"id": 1, "coco_url": "second", "height": 1, "width": 1},
        ],
        categories=[{"id": 5}, {"id": 5}],
    )
    index = MetadataIndex(decode(json.dumps(document)))

    assert index.image(1).coco_url == "first"
    assert index.category_index(5) == 0


def test_no_dangling_references_in_consistent_document(
    index: MetadataIndex,
) -> None:
    """The sample document is referentially consistent."""
    assert index.dangling_references() == []


def test_dangling_references_reported() -> None:
    """Unknown image and category ids are both reported."""
    document = make_document(
        annotations=[
            make_annotation(id=10, image_id=397133, category_id=1),
            make_annotation(id=11, image_id=5, category_id=1),
            make_annotation(id=12, image_id=6, category_id=99),
        ],
    )
    index = MetadataIndex(decode(json.dumps(document)))

    assert index.dangling_references() == [
        DanglingReference(annotation_id=11, field="image_id", missing_id=5),
        DanglingReference(annotation_id=12, field="image_id", missing_id=6),
        DanglingReference(annotation_id=12, field="category_id", missing_id=99),
    ]
