"""Pydantic models for decoded COCO annotation metadata."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# ------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------


class Rectangle(BaseModel):
    """Axis-aligned box anchored at its top-left corner ``(x, y)``.

    COCO stores boxes as ``[x, y, width, height]``; ``x2``/``y2`` give the
    bottom-right corner for code that works with two corners instead.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        """X coordinate of the bottom-right corner."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Y coordinate of the bottom-right corner."""
        return self.y + self.height

    def to_xywh(self) -> tuple[float, float, float, float]:
        """Return ``(x, y, width, height)``, the COCO wire order."""
        return (self.x, self.y, self.width, self.height)

    def to_xyxy(self) -> tuple[float, float, float, float]:
        """Return ``(x_tl, y_tl, x_br, y_br)``."""
        return (self.x, self.y, self.x2, self.y2)

    def normalized(self, image_width: float, image_height: float) -> Rectangle:
        """Scale the box into ``[0, 1]`` image coordinates.

        Parameters
        ----------
        image_width, image_height:
            Size of the image the box belongs to, in pixels. Both must be
            positive.

        """
        if image_width <= 0 or image_height <= 0:
            msg = (
                "image size must be positive, "
                f"got width={image_width}, height={image_height}"
            )
            raise ValueError(msg)
        return Rectangle(
            x=self.x / image_width,
            y=self.y / image_height,
            width=self.width / image_width,
            height=self.height / image_height,
        )


# ------------------------------------------------------------------
# COCO entities
# ------------------------------------------------------------------


class Image(BaseModel):
    """Image entry from the ``images`` collection."""

    model_config = ConfigDict(frozen=True)

    id: int
    coco_url: str
    height: int
    width: int


class Category(BaseModel):
    """Object category from the ``categories`` collection."""

    model_config = ConfigDict(frozen=True)

    id: int


class Annotation(BaseModel):
    """One labeled object instance.

    ``image_id`` and ``category_id`` refer to ``Image.id`` and ``Category.id``;
    the references are not checked at decode time.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    image_id: int
    category_id: int
    bounding_box: Rectangle
    area: float


class Metadata(BaseModel):
    """Decoded COCO annotation document."""

    model_config = ConfigDict(frozen=True)

    images: tuple[Image, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    categories: tuple[Category, ...] = ()

    def get_images(self) -> tuple[Image, ...]:
        """Images in document order."""
        return self.images

    def get_annotations(self) -> tuple[Annotation, ...]:
        """Annotations in document order."""
        return self.annotations

    def get_categories(self) -> tuple[Category, ...]:
        """Categories in document order."""
        return self.categories
