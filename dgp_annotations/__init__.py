from dgp_annotations.common.annotation_types import (
    ANNOTATION_TYPE_DIRECTORY_NAMES,
    AnnotationType,
    DirectoryName,
    code_for,
    name_for,
)
from dgp_annotations.common.exceptions import (
    AnnotationSchemaException,
    DuplicateKeyError,
    MalformedInputError,
    RangeError,
    UnknownCodeError,
    UnknownNameError,
)
from dgp_annotations.dtos.annotations import (
    BoundingBox2DAnnotationDTO,
    BoundingBox2DAnnotationsDTO,
    BoundingBox2DDTO,
    BoundingBox3DAnnotationDTO,
    BoundingBox3DAnnotationsDTO,
    BoundingBox3DDTO,
    KeyLine2DAnnotationDTO,
    KeyLine2DAnnotationsDTO,
    KeyPoint2DAnnotationDTO,
    KeyPoint2DAnnotationsDTO,
    KeyPoint2DDTO,
    Polygon2DAnnotationDTO,
    Polygon2DAnnotationsDTO,
    PolygonPoint2DDTO,
)
from dgp_annotations.dtos.geometry import PoseDTO, QuaternionDTO, Vector3DTO
from dgp_annotations.proto.codec import decode, decode_json, encode, encode_json, message_type_for
from dgp_annotations.utilities.logging import setup_loggers
from dgp_annotations.validation import Rule, ValidationSettings, Validator, Violation, validate

__version__ = "0.1.0"

__all__ = [
    "ANNOTATION_TYPE_DIRECTORY_NAMES",
    "AnnotationType",
    "DirectoryName",
    "code_for",
    "name_for",
    "AnnotationSchemaException",
    "DuplicateKeyError",
    "MalformedInputError",
    "RangeError",
    "UnknownCodeError",
    "UnknownNameError",
    "BoundingBox2DAnnotationDTO",
    "BoundingBox2DAnnotationsDTO",
    "BoundingBox2DDTO",
    "BoundingBox3DAnnotationDTO",
    "BoundingBox3DAnnotationsDTO",
    "BoundingBox3DDTO",
    "KeyLine2DAnnotationDTO",
    "KeyLine2DAnnotationsDTO",
    "KeyPoint2DAnnotationDTO",
    "KeyPoint2DAnnotationsDTO",
    "KeyPoint2DDTO",
    "Polygon2DAnnotationDTO",
    "Polygon2DAnnotationsDTO",
    "PolygonPoint2DDTO",
    "PoseDTO",
    "QuaternionDTO",
    "Vector3DTO",
    "decode",
    "decode_json",
    "encode",
    "encode_json",
    "message_type_for",
    "Rule",
    "ValidationSettings",
    "Validator",
    "Violation",
    "validate",
    "setup_loggers",
]
