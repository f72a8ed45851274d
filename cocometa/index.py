"""Read-only id lookups over decoded metadata for dataset-iteration code."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from cocometa.exceptions import ReferenceLookupError

if TYPE_CHECKING:
    from cocometa.models import Annotation, Category, Image, Metadata


@dataclass(frozen=True, slots=True)
class DanglingReference:
    """Annotation field pointing at an image or category that does not exist."""

    annotation_id: int
    field: Literal["image_id", "category_id"]
    missing_id: int


class MetadataIndex:
    """Id-based lookups built once from a :class:`Metadata`.

    When ids repeat, the first occurrence in document order wins.
    """

    def __init__(self, metadata: Metadata) -> None:
        """Build lookup tables for *metadata*."""
        self.metadata = metadata
        self._images: dict[int, Image] = {}
        self._categories: dict[int, Category] = {}
        self._category_index: dict[int, int] = {}
        self._annotations: dict[int, Annotation] = {}
        by_image: dict[int, list[Annotation]] = {}

        for image in metadata.images:
            self._images.setdefault(image.id, image)
        for position, category in enumerate(metadata.categories):
            self._categories.setdefault(category.id, category)
            self._category_index.setdefault(category.id, position)
        for annotation in metadata.annotations:
            self._annotations.setdefault(annotation.id, annotation)
            by_image.setdefault(annotation.image_id, []).append(annotation)
        self._by_image = {k: tuple(v) for k, v in by_image.items()}

    @property
    def image_ids(self) -> tuple[int, ...]:
        """Image ids in document order."""
        return tuple(image.id for image in self.metadata.images)

    def image(self, image_id: int) -> Image:
        """Return the image with *image_id*."""
        try:
            return self._images[image_id]
        except KeyError:
            raise ReferenceLookupError("image", image_id) from None

    def category(self, category_id: int) -> Category:
        """Return the category with *category_id*."""
        try:
            return self._categories[category_id]
        except KeyError:
            raise ReferenceLookupError("category", category_id) from None

    def annotation(self, annotation_id: int) -> Annotation:
        """Return the annotation with *annotation_id*."""
        try:
            return self._annotations[annotation_id]
        except KeyError:
            raise ReferenceLookupError("annotation", annotation_id) from None

    def category_index(self, category_id: int) -> int:
        """Contiguous class index of *category_id* (its position in ``categories``).

        COCO category ids have gaps (1..90 for 80 classes); training code
        needs dense indices instead.
        """
        try:
            return self._category_index[category_id]
        except KeyError:
            raise ReferenceLookupError("category", category_id) from None

    def annotations_for_image(self, image_id: int) -> tuple[Annotation, ...]:
        """Annotations attached to *image_id*, in document order.

        Returns an empty tuple for unknown ids as well as for images without
        annotations; use :meth:`image` to tell the two apart.
        """
        return self._by_image.get(image_id, ())

    def dangling_references(self) -> list[DanglingReference]:
        """List annotation references with no matching image or category."""
        result: list[DanglingReference] = []
        for annotation in self.metadata.annotations:
            if annotation.image_id not in self._images:
                result.append(
                    DanglingReference(
                        annotation_id=annotation.id,
                        field="image_id",
                        missing_id=annotation.image_id,
                    )
                )
            if annotation.category_id not in self._categories:
                result.append(
                    DanglingReference(
                        annotation_id=annotation.id,
                        field="category_id",
                        missing_id=annotation.category_id,
                    )
                )
        return result
