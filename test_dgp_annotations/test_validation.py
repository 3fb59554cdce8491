import logging
import math

import pytest

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
    KeyPoint2DDTO,
    Polygon2DAnnotationDTO,
    Polygon2DAnnotationsDTO,
    PolygonPoint2DDTO,
)
from dgp_annotations.proto.codec import decode, encode
from dgp_annotations.validation import Rule, ValidationSettings, Validator, Violation, validate


def _polygon(num_vertices: int) -> Polygon2DAnnotationDTO:
    return Polygon2DAnnotationDTO(class_id=1, vertices=[PolygonPoint2DDTO(x=i, y=i * i) for i in range(num_vertices)])


class TestValidator:
    def test_valid_messages(
        self,
        box_2d_annotations: BoundingBox2DAnnotationsDTO,
        box_3d_annotations: BoundingBox3DAnnotationsDTO,
        key_line_annotation: KeyLine2DAnnotationDTO,
        polygon_annotation: Polygon2DAnnotationDTO,
    ):
        validator = Validator(ValidationSettings(num_classes=10))
        assert validator.validate(box_2d_annotations) == []
        assert validator.validate(box_3d_annotations) == []
        assert validator.validate(key_line_annotation) == []
        assert validator.validate(polygon_annotation) == []

    def test_truncation_out_of_range_after_decode(self, box_3d_annotation: BoundingBox3DAnnotationDTO):
        box_3d_annotation.box.truncation = 1.5
        decoded = decode(encode(box_3d_annotation), BoundingBox3DAnnotationDTO)

        violations = validate(decoded)
        assert violations == [Violation(field_path="box.truncation", value=1.5, rule=Rule.TRUNCATION_IN_RANGE)]

    @pytest.mark.parametrize("truncation", [-0.1, 1.0000001, math.nan])
    def test_truncation(self, truncation: float):
        violations = validate(BoundingBox3DDTO(truncation=truncation))
        assert [v.rule for v in violations] == [Rule.TRUNCATION_IN_RANGE]

    def test_truncation_bounds_inclusive(self):
        assert validate(BoundingBox3DDTO(truncation=0.0)) == []
        assert validate(BoundingBox3DDTO(truncation=1.0)) == []

    def test_occlusion(self):
        for occlusion in range(4):
            assert validate(BoundingBox3DDTO(occlusion=occlusion)) == []
        assert validate(BoundingBox3DDTO(occlusion=4)) == [
            Violation(field_path="occlusion", value=4, rule=Rule.OCCLUSION_STATE)
        ]

    def test_duplicate_instance_id_3d(self):
        boxes = BoundingBox3DAnnotationsDTO(
            annotations=[
                BoundingBox3DAnnotationDTO(class_id=1, instance_id=7),
                BoundingBox3DAnnotationDTO(class_id=2, instance_id=7),
            ]
        )
        assert validate(boxes) == [
            Violation(field_path="annotations[1].instance_id", value=7, rule=Rule.UNIQUE_INSTANCE_ID)
        ]

        boxes.annotations[1].instance_id = 8
        assert validate(boxes) == []

    def test_every_repetition_reported(self):
        boxes = BoundingBox3DAnnotationsDTO(
            annotations=[BoundingBox3DAnnotationDTO(instance_id=i) for i in [1, 2, 1, 3, 1, 2]]
        )
        violations = validate(boxes)
        assert [v.field_path for v in violations] == [
            "annotations[2].instance_id",
            "annotations[4].instance_id",
            "annotations[5].instance_id",
        ]

    def test_duplicate_instance_id_2d_opt_in(self):
        boxes = BoundingBox2DAnnotationsDTO(
            annotations=[BoundingBox2DAnnotationDTO(instance_id=4), BoundingBox2DAnnotationDTO(instance_id=4)]
        )
        assert validate(boxes) == []

        violations = Validator(ValidationSettings(unique_instance_ids_2d=True)).validate(boxes)
        assert [v.rule for v in violations] == [Rule.UNIQUE_INSTANCE_ID]

    def test_polygon_min_vertices(self):
        assert validate(_polygon(2)) == [Violation(field_path="vertices", value=2, rule=Rule.POLYGON_MIN_VERTICES)]
        assert validate(_polygon(3)) == []

    def test_key_line_min_vertices(self):
        line = KeyLine2DAnnotationDTO(vertices=[KeyPoint2DDTO(x=1, y=1)])
        assert [v.rule for v in validate(line)] == [Rule.KEY_LINE_MIN_VERTICES]

        line.vertices.append(KeyPoint2DDTO(x=2, y=2))
        assert validate(line) == []

    def test_custom_vertex_minimum(self):
        validator = Validator(ValidationSettings(min_polygon_vertices=4))
        assert [v.rule for v in validator.validate(_polygon(3))] == [Rule.POLYGON_MIN_VERTICES]

    def test_class_id(self):
        annotation = KeyPoint2DAnnotationDTO(class_id=10)
        assert validate(annotation) == []
        assert validate(annotation, num_classes=11) == []
        assert validate(annotation, num_classes=10) == [
            Violation(field_path="class_id", value=10, rule=Rule.CLASS_ID_IN_RANGE)
        ]

    def test_empty_attribute_key(self):
        annotation = BoundingBox2DAnnotationDTO(attributes={"": "x", "ok": "y"})
        assert validate(annotation) == [Violation(field_path="attributes", value="", rule=Rule.NON_EMPTY_ATTRIBUTE_KEY)]

    def test_collection_reports_all_violations(self):
        polygons = Polygon2DAnnotationsDTO(
            annotations=[_polygon(3), _polygon(1), Polygon2DAnnotationDTO(class_id=12, vertices=[])]
        )
        violations = Validator(ValidationSettings(num_classes=5)).validate(polygons)
        assert [(v.field_path, v.rule) for v in violations] == [
            ("annotations[1].vertices", Rule.POLYGON_MIN_VERTICES),
            ("annotations[2].class_id", Rule.CLASS_ID_IN_RANGE),
            ("annotations[2].vertices", Rule.POLYGON_MIN_VERTICES),
        ]

    def test_nested_paths(self):
        lines = KeyLine2DAnnotationsDTO(annotations=[KeyLine2DAnnotationDTO(), KeyLine2DAnnotationDTO()])
        assert [v.field_path for v in validate(lines)] == ["annotations[0].vertices", "annotations[1].vertices"]

        boxes = BoundingBox3DAnnotationsDTO(
            annotations=[BoundingBox3DAnnotationDTO(instance_id=1, box=BoundingBox3DDTO(occlusion=5))]
        )
        assert [v.field_path for v in validate(boxes)] == ["annotations[0].box.occlusion"]

    def test_messages_without_rules(self):
        assert validate(BoundingBox2DDTO(w=0, h=0)) == []
        assert validate(PolygonPoint2DDTO(x=-5, y=10)) == []

    def test_violation_str(self):
        violation = Violation(field_path="box.truncation", value=1.5, rule=Rule.TRUNCATION_IN_RANGE)
        assert str(violation) == "box.truncation=1.5 violates truncation_in_range"

    def test_subclass_uses_base_rules(self):
        class ManualPolygon(Polygon2DAnnotationDTO):
            pass

        assert [v.rule for v in validate(ManualPolygon(class_id=1))] == [Rule.POLYGON_MIN_VERTICES]
        polygons = Polygon2DAnnotationsDTO(annotations=[_polygon(num_vertices=3), ManualPolygon(class_id=1)])
        assert [v.field_path for v in validate(polygons)] == ["annotations[1].vertices"]

    def test_unregistered_message_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="dgp_annotations.validation"):
            assert validate(object()) == []
        assert "No semantic rules for object" in caplog.text
