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
    KeyPoint2DAnnotationsDTO,
    KeyPoint2DDTO,
    Polygon2DAnnotationDTO,
    Polygon2DAnnotationsDTO,
    PolygonPoint2DDTO,
)
from dgp_annotations.dtos.geometry import PoseDTO, QuaternionDTO, Vector3DTO


@pytest.fixture()
def box_2d_annotation() -> BoundingBox2DAnnotationDTO:
    return BoundingBox2DAnnotationDTO(
        class_id=3,
        box=BoundingBox2DDTO(x=-4, y=12, w=40, h=25),
        area=1000,
        iscrowd=True,
        instance_id=17,
        attributes={"parked": "true", "occluded_by": "truck"},
    )


@pytest.fixture()
def box_3d_annotation() -> BoundingBox3DAnnotationDTO:
    return BoundingBox3DAnnotationDTO(
        class_id=1,
        box=BoundingBox3DDTO(
            pose=PoseDTO(
                translation=Vector3DTO(x=12.5, y=-3.25, z=0.75),
                rotation=QuaternionDTO(qx=0.0, qy=0.0, qz=0.70710678, qw=0.70710678),
            ),
            width=1.9,
            length=4.6,
            height=1.5,
            occlusion=2,
            truncation=0.25,
        ),
        instance_id=7,
        attributes={"behavior": "driving"},
        num_points=412,
    )


@pytest.fixture()
def key_point_annotation() -> KeyPoint2DAnnotationDTO:
    return KeyPoint2DAnnotationDTO(
        class_id=5, point=KeyPoint2DDTO(x=320, y=-2), attributes={"visible": "0"}, key="left_eye"
    )


@pytest.fixture()
def key_line_annotation() -> KeyLine2DAnnotationDTO:
    return KeyLine2DAnnotationDTO(
        class_id=2,
        vertices=[KeyPoint2DDTO(x=0, y=700), KeyPoint2DDTO(x=400, y=500), KeyPoint2DDTO(x=640, y=480)],
        attributes={"lane_type": "dashed"},
        key="lane_marking_0",
    )


@pytest.fixture()
def polygon_annotation() -> Polygon2DAnnotationDTO:
    return Polygon2DAnnotationDTO(
        class_id=4,
        vertices=[PolygonPoint2DDTO(x=-5, y=10), PolygonPoint2DDTO(x=30, y=10), PolygonPoint2DDTO(x=30, y=-8)],
        attributes={},
    )


@pytest.fixture()
def box_2d_annotations(box_2d_annotation: BoundingBox2DAnnotationDTO) -> BoundingBox2DAnnotationsDTO:
    return BoundingBox2DAnnotationsDTO(
        annotations=[
            box_2d_annotation,
            BoundingBox2DAnnotationDTO(class_id=0, box=BoundingBox2DDTO(x=1, y=1, w=2, h=2), area=4, instance_id=3),
        ]
    )


@pytest.fixture()
def box_3d_annotations(box_3d_annotation: BoundingBox3DAnnotationDTO) -> BoundingBox3DAnnotationsDTO:
    return BoundingBox3DAnnotationsDTO(
        annotations=[
            box_3d_annotation,
            BoundingBox3DAnnotationDTO(
                class_id=1, box=BoundingBox3DDTO(width=1.0, length=1.0, height=1.0), instance_id=8
            ),
        ]
    )


@pytest.fixture()
def key_point_annotations(key_point_annotation: KeyPoint2DAnnotationDTO) -> KeyPoint2DAnnotationsDTO:
    return KeyPoint2DAnnotationsDTO(
        annotations=[
            key_point_annotation,
            KeyPoint2DAnnotationDTO(class_id=5, point=KeyPoint2DDTO(x=1, y=1), key="nose"),
        ]
    )


@pytest.fixture()
def key_line_annotations(key_line_annotation: KeyLine2DAnnotationDTO) -> KeyLine2DAnnotationsDTO:
    return KeyLine2DAnnotationsDTO(annotations=[key_line_annotation])


@pytest.fixture()
def polygon_annotations(polygon_annotation: Polygon2DAnnotationDTO) -> Polygon2DAnnotationsDTO:
    return Polygon2DAnnotationsDTO(annotations=[polygon_annotation, Polygon2DAnnotationDTO(class_id=1)])
