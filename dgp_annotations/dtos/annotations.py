from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
from mashumaro import DataClassDictMixin

from dgp_annotations.common.annotation_types import AnnotationType
from dgp_annotations.dtos.common import DTO_REGISTRY
from dgp_annotations.dtos.geometry import PoseDTO


@DTO_REGISTRY.register_module(proto_name="dgp.proto.BoundingBox2D")
@dataclass
class BoundingBox2DDTO(DataClassDictMixin):
    """Axis-aligned 2D box.

    Attributes:
        x: Top-left corner along x-axis in absolute pixel coordinates.
        y: Top-left corner along y-axis in absolute pixel coordinates.
        w: Width in pixels. Unsigned on the wire.
        h: Height in pixels. Unsigned on the wire.
    """

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.BoundingBox2DAnnotation")
@dataclass
class BoundingBox2DAnnotationDTO(DataClassDictMixin):
    """2D bounding box annotation for a single instance.

    Attributes:
        class_id: Class ID, expected in ``[0, num_classes - 1]``.
        box: Box geometry. ``None`` if absent.
        area: Pixel area, used for downstream metric computation.
        iscrowd: Marks a crowd region, as in COCO.
        instance_id: Instance ID of the annotated object.
        attributes: Free-form string attributes, e.g. agent behavior states.
    """

    class_id: int = 0
    box: Optional[BoundingBox2DDTO] = None
    area: int = 0
    iscrowd: bool = False
    instance_id: int = 0
    attributes: Dict[str, str] = field(default_factory=dict)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.BoundingBox3D")
@dataclass
class BoundingBox3DDTO(DataClassDictMixin):
    """3D box of dimensions `width`, `length`, `height` centered at the origin, rotated and then
    translated by `pose`.

    Attributes:
        pose: 6DoF pose. Translation is the box center.
        width: Box width.
        length: Box length.
        height: Box height.
        occlusion: 0 = fully visible, 1 = partly occluded, 2 = largely occluded, 3 = unknown.
        truncation: From 0 (non-truncated) to 1 (truncated), where truncated refers to the object
            leaving image boundaries.
    """

    pose: Optional[PoseDTO] = None
    width: float = 0.0
    length: float = 0.0
    height: float = 0.0
    occlusion: int = 0
    truncation: float = 0.0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.BoundingBox3DAnnotation")
@dataclass
class BoundingBox3DAnnotationDTO(DataClassDictMixin):
    """3D bounding box annotation.

    Attributes:
        class_id: Class ID, expected in ``[0, num_classes - 1]``.
        box: Box geometry. ``None`` if absent.
        instance_id: Instance ID, has to be unique within a scene.
        attributes: Free-form string attributes.
        num_points: Number of LiDAR points inside the box.
    """

    class_id: int = 0
    box: Optional[BoundingBox3DDTO] = None
    instance_id: int = 0
    attributes: Dict[str, str] = field(default_factory=dict)
    num_points: int = 0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.KeyPoint2D")
@dataclass
class KeyPoint2DDTO(DataClassDictMixin):
    x: int = 0
    y: int = 0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.KeyPoint2DAnnotation")
@dataclass
class KeyPoint2DAnnotationDTO(DataClassDictMixin):
    class_id: int = 0
    point: Optional[KeyPoint2DDTO] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    # links the point with other annotations of the same scene
    key: str = ""


def _vertices_to_numpy(vertices: List[Any]) -> np.ndarray:
    return np.array([[v.x, v.y] for v in vertices], dtype=np.int64).reshape(-1, 2)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.KeyLine2DAnnotation")
@dataclass
class KeyLine2DAnnotationDTO(DataClassDictMixin):
    """2D line annotation.

    Attributes:
        class_id: Class ID, expected in ``[0, num_classes - 1]``.
        vertices: Line vertices in line order.
        attributes: Free-form string attributes.
        key: Identifier used to link the line with other annotations.
    """

    class_id: int = 0
    vertices: List[KeyPoint2DDTO] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    key: str = ""

    def vertices_to_numpy(self) -> np.ndarray:
        """Returns vertices as integer array of shape (N, 2)."""
        return _vertices_to_numpy(self.vertices)

    @classmethod
    def from_numpy(cls, vertices: np.ndarray, **kwargs) -> "KeyLine2DAnnotationDTO":
        return cls(vertices=[KeyPoint2DDTO(x=int(x), y=int(y)) for x, y in np.asarray(vertices)], **kwargs)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.PolygonPoint2D")
@dataclass
class PolygonPoint2DDTO(DataClassDictMixin):
    """Polygon vertex. Negative coordinates are meaningful for shapes truncated at the image edge."""

    x: int = 0
    y: int = 0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.Polygon2DAnnotation")
@dataclass
class Polygon2DAnnotationDTO(DataClassDictMixin):
    """2D polygon annotation.

    Attributes:
        class_id: Class ID, expected in ``[0, num_classes - 1]``.
        vertices: Vertices in counter-clockwise order. The last vertex connects back to the first.
        attributes: Free-form string attributes.
    """

    class_id: int = 0
    vertices: List[PolygonPoint2DDTO] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)

    def vertices_to_numpy(self) -> np.ndarray:
        """Returns vertices as integer array of shape (N, 2)."""
        return _vertices_to_numpy(self.vertices)

    @classmethod
    def from_numpy(cls, vertices: np.ndarray, **kwargs) -> "Polygon2DAnnotationDTO":
        return cls(vertices=[PolygonPoint2DDTO(x=int(x), y=int(y)) for x, y in np.asarray(vertices)], **kwargs)


class AnnotationCollectionMixin:
    """Read-only queries over the `annotations` field of a collection DTO."""

    def get_annotations_by_class_id(self, class_id: int) -> List[Any]:
        """
        Returns all annotations of a class.

        Args:
            class_id: Class ID of annotations that should be returned.

        Returns:
            List of matching annotations in collection order.
        """
        return [a for a in self.annotations if a.class_id == class_id]

    def get_annotations_by_attribute_key(self, attr_key: str) -> List[Any]:
        return [a for a in self.annotations if attr_key in a.attributes]

    def get_annotations_by_attribute_value(self, attr_key: str, attr_value: str) -> List[Any]:
        return [a for a in self.annotations if attr_key in a.attributes and a.attributes[attr_key] == attr_value]


class InstanceCollectionMixin(AnnotationCollectionMixin):
    def get_annotation_by_instance_id(self, instance_id: int) -> Optional[Any]:
        """
        Returns the first annotation with matching instance ID.

        Args:
              instance_id: Instance ID of annotation that should be returned.

        Returns:
              Matching annotation. If none found, returns `None`.
        """
        return next((a for a in self.annotations if a.instance_id == instance_id), None)


class KeyedCollectionMixin(AnnotationCollectionMixin):
    def get_annotation_by_key(self, key: str) -> Optional[Any]:
        return next((a for a in self.annotations if a.key == key), None)


@DTO_REGISTRY.register_module(
    proto_name="dgp.proto.BoundingBox2DAnnotations", annotation_type=AnnotationType.BOUNDING_BOX_2D
)
@dataclass
class BoundingBox2DAnnotationsDTO(DataClassDictMixin, InstanceCollectionMixin):
    annotations: List[BoundingBox2DAnnotationDTO] = field(default_factory=list)


@DTO_REGISTRY.register_module(
    proto_name="dgp.proto.BoundingBox3DAnnotations", annotation_type=AnnotationType.BOUNDING_BOX_3D
)
@dataclass
class BoundingBox3DAnnotationsDTO(DataClassDictMixin, InstanceCollectionMixin):
    annotations: List[BoundingBox3DAnnotationDTO] = field(default_factory=list)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.KeyPoint2DAnnotations", annotation_type=AnnotationType.KEY_POINT_2D)
@dataclass
class KeyPoint2DAnnotationsDTO(DataClassDictMixin, KeyedCollectionMixin):
    annotations: List[KeyPoint2DAnnotationDTO] = field(default_factory=list)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.KeyLine2DAnnotations", annotation_type=AnnotationType.KEY_LINE_2D)
@dataclass
class KeyLine2DAnnotationsDTO(DataClassDictMixin, KeyedCollectionMixin):
    annotations: List[KeyLine2DAnnotationDTO] = field(default_factory=list)


@DTO_REGISTRY.register_module(proto_name="dgp.proto.Polygon2DAnnotations", annotation_type=AnnotationType.POLYGON_2D)
@dataclass
class Polygon2DAnnotationsDTO(DataClassDictMixin, AnnotationCollectionMixin):
    annotations: List[Polygon2DAnnotationDTO] = field(default_factory=list)
