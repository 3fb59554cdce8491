"""Semantic checks the wire format cannot express.

Violations are returned as data so a whole collection can be checked in one pass::

    violations = Validator(ValidationSettings(num_classes=10)).validate(boxes)
    for violation in violations:
        logger.warning(violation)
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from more_itertools import duplicates_everseen

from dgp_annotations.dtos.annotations import (
    BoundingBox2DAnnotationDTO,
    BoundingBox2DAnnotationsDTO,
    BoundingBox3DAnnotationDTO,
    BoundingBox3DAnnotationsDTO,
    BoundingBox3DDTO,
    KeyLine2DAnnotationDTO,
    KeyLine2DAnnotationsDTO,
    KeyPoint2DAnnotationDTO,
    KeyPoint2DAnnotationsDTO,
    Polygon2DAnnotationDTO,
    Polygon2DAnnotationsDTO,
)

logger = logging.getLogger(__name__)

OCCLUSION_STATES = (0, 1, 2, 3)


class Rule:
    CLASS_ID_IN_RANGE: str = "class_id_in_range"
    OCCLUSION_STATE: str = "occlusion_state"
    TRUNCATION_IN_RANGE: str = "truncation_in_range"
    POLYGON_MIN_VERTICES: str = "polygon_min_vertices"
    KEY_LINE_MIN_VERTICES: str = "key_line_min_vertices"
    UNIQUE_INSTANCE_ID: str = "unique_instance_id"
    NON_EMPTY_ATTRIBUTE_KEY: str = "non_empty_attribute_key"


@dataclass
class ValidationSettings:
    """
    Args:
        num_classes: Size of the class vocabulary. ``class_id`` is only checked if set.
        min_polygon_vertices: Minimum number of vertices of a polygon.
        min_key_line_vertices: Minimum number of vertices of a key line.
        unique_instance_ids_2d: Also require unique instance IDs within 2D box collections. 3D box
            collections are always checked.
    """

    num_classes: Optional[int] = None
    min_polygon_vertices: int = 3
    min_key_line_vertices: int = 2
    unique_instance_ids_2d: bool = False


@dataclass(frozen=True)
class Violation:
    field_path: str
    value: Any
    rule: str

    def __str__(self) -> str:
        return f"{self.field_path}={self.value!r} violates {self.rule}"


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


class Validator:
    def __init__(self, settings: Optional[ValidationSettings] = None):
        self.settings = settings if settings is not None else ValidationSettings()
        self._validators: Dict[type, Callable[[Any, str], List[Violation]]] = {
            BoundingBox2DAnnotationDTO: self._validate_common,
            BoundingBox3DDTO: self._validate_box_3d,
            BoundingBox3DAnnotationDTO: self._validate_box_3d_annotation,
            KeyPoint2DAnnotationDTO: self._validate_common,
            KeyLine2DAnnotationDTO: self._validate_key_line,
            Polygon2DAnnotationDTO: self._validate_polygon,
            BoundingBox2DAnnotationsDTO: self._validate_box_2d_collection,
            BoundingBox3DAnnotationsDTO: self._validate_box_3d_collection,
            KeyPoint2DAnnotationsDTO: self._validate_collection,
            KeyLine2DAnnotationsDTO: self._validate_collection,
            Polygon2DAnnotationsDTO: self._validate_collection,
        }

    def validate(self, message: Any) -> List[Violation]:
        """
        Checks a message against all semantic rules that apply to its type.

        Messages without semantic rules, e.g. :obj:`BoundingBox2DDTO`, never have violations. Subclasses
        of schema messages are checked by the rules of their schema base class.

        Args:
            message: Annotation, collection or :obj:`BoundingBox3DDTO`.

        Returns:
            All violations found, in field order. Empty if the message is valid.
        """
        violations = self._validate(message=message, path="")
        if violations:
            logger.debug(f"Found {len(violations)} violations in {type(message).__name__}")
        return violations

    def _validate(self, message: Any, path: str) -> List[Violation]:
        # most specific registered base wins, so subclasses of schema messages are checked too
        validator = next((self._validators[t] for t in type(message).__mro__ if t in self._validators), None)
        if validator is None:
            logger.debug(f"No semantic rules for {type(message).__name__} at '{path}', skipping")
            return []
        return validator(message, path)

    def _validate_common(self, annotation: Any, path: str) -> List[Violation]:
        violations = []
        num_classes = self.settings.num_classes
        if num_classes is not None and not 0 <= annotation.class_id < num_classes:
            violations.append(
                Violation(field_path=_join(path, "class_id"), value=annotation.class_id, rule=Rule.CLASS_ID_IN_RANGE)
            )
        for key in annotation.attributes:
            if key == "":
                violations.append(
                    Violation(field_path=_join(path, "attributes"), value=key, rule=Rule.NON_EMPTY_ATTRIBUTE_KEY)
                )
        return violations

    def _validate_box_3d(self, box: BoundingBox3DDTO, path: str) -> List[Violation]:
        violations = []
        if box.occlusion not in OCCLUSION_STATES:
            violations.append(
                Violation(field_path=_join(path, "occlusion"), value=box.occlusion, rule=Rule.OCCLUSION_STATE)
            )
        if not 0.0 <= box.truncation <= 1.0:
            violations.append(
                Violation(field_path=_join(path, "truncation"), value=box.truncation, rule=Rule.TRUNCATION_IN_RANGE)
            )
        return violations

    def _validate_box_3d_annotation(self, annotation: BoundingBox3DAnnotationDTO, path: str) -> List[Violation]:
        violations = self._validate_common(annotation=annotation, path=path)
        if annotation.box is not None:
            violations.extend(self._validate_box_3d(box=annotation.box, path=_join(path, "box")))
        return violations

    def _validate_key_line(self, annotation: KeyLine2DAnnotationDTO, path: str) -> List[Violation]:
        violations = self._validate_common(annotation=annotation, path=path)
        if len(annotation.vertices) < self.settings.min_key_line_vertices:
            violations.append(
                Violation(
                    field_path=_join(path, "vertices"),
                    value=len(annotation.vertices),
                    rule=Rule.KEY_LINE_MIN_VERTICES,
                )
            )
        return violations

    def _validate_polygon(self, annotation: Polygon2DAnnotationDTO, path: str) -> List[Violation]:
        violations = self._validate_common(annotation=annotation, path=path)
        if len(annotation.vertices) < self.settings.min_polygon_vertices:
            violations.append(
                Violation(
                    field_path=_join(path, "vertices"),
                    value=len(annotation.vertices),
                    rule=Rule.POLYGON_MIN_VERTICES,
                )
            )
        return violations

    def _validate_collection(self, collection: Any, path: str) -> List[Violation]:
        violations = []
        for i, annotation in enumerate(collection.annotations):
            violations.extend(self._validate(message=annotation, path=_join(path, f"annotations[{i}]")))
        return violations

    def _validate_unique_instance_ids(self, collection: Any, path: str) -> List[Violation]:
        # reports every repetition after the first occurrence
        return [
            Violation(
                field_path=_join(path, f"annotations[{i}].instance_id"),
                value=annotation.instance_id,
                rule=Rule.UNIQUE_INSTANCE_ID,
            )
            for i, annotation in duplicates_everseen(enumerate(collection.annotations), key=lambda p: p[1].instance_id)
        ]

    def _validate_box_2d_collection(self, collection: BoundingBox2DAnnotationsDTO, path: str) -> List[Violation]:
        violations = self._validate_collection(collection=collection, path=path)
        if self.settings.unique_instance_ids_2d:
            violations.extend(self._validate_unique_instance_ids(collection=collection, path=path))
        return violations

    def _validate_box_3d_collection(self, collection: BoundingBox3DAnnotationsDTO, path: str) -> List[Violation]:
        violations = self._validate_collection(collection=collection, path=path)
        violations.extend(self._validate_unique_instance_ids(collection=collection, path=path))
        return violations


def validate(message: Any, num_classes: Optional[int] = None) -> List[Violation]:
    return Validator(settings=ValidationSettings(num_classes=num_classes)).validate(message=message)
