"""cocometa -- strict decoding of COCO annotation metadata."""

from cocometa.decoder import AnnotationDecoder, decode
from cocometa.exceptions import (
    CocometaError,
    DecodeError,
    MalformedBoundingBoxError,
    MalformedDocumentError,
    ReferenceLookupError,
    TypeMismatchError,
)
from cocometa.index import DanglingReference, MetadataIndex
from cocometa.models import Annotation, Category, Image, Metadata, Rectangle

__all__ = [
    "Annotation",
    "AnnotationDecoder",
    "Category",
    "CocometaError",
    "DanglingReference",
    "DecodeError",
    "Image",
    "MalformedBoundingBoxError",
    "MalformedDocumentError",
    "Metadata",
    "MetadataIndex",
    "Rectangle",
    "ReferenceLookupError",
    "TypeMismatchError",
    "decode",
]
