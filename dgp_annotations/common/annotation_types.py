"""Annotation type codes and the directory each type's files live in.

This module is the only place the code <-> directory name mapping is defined. File layout code
should resolve directories through :func:`name_for` / :func:`code_for` or :class:`DirectoryName`
instead of spelling the names out again.
"""
from enum import IntEnum
from typing import Dict, Union

import numpy as np

from dgp_annotations.common.exceptions import UnknownCodeError, UnknownNameError


class AnnotationType(IntEnum):
    """Wire-stable annotation type codes.

    Values are literal and never derived from declaration order. A retired code is never reused,
    new types get a new unused code.
    """

    BOUNDING_BOX_2D = 0
    BOUNDING_BOX_3D = 1
    SEMANTIC_SEGMENTATION_2D = 2
    SEMANTIC_SEGMENTATION_3D = 3
    INSTANCE_SEGMENTATION_2D = 4
    INSTANCE_SEGMENTATION_3D = 5
    DEPTH = 6
    SURFACE_NORMALS_2D = 13
    SURFACE_NORMALS_3D = 7
    MOTION_VECTORS_2D = 8
    MOTION_VECTORS_3D = 9
    KEY_POINT_2D = 10
    KEY_LINE_2D = 11
    POLYGON_2D = 12
    AGENT_BEHAVIOR = 14


ANNOTATION_TYPE_DIRECTORY_NAMES: Dict[AnnotationType, str] = {
    AnnotationType.BOUNDING_BOX_2D: "bounding_box_2d",
    AnnotationType.BOUNDING_BOX_3D: "bounding_box_3d",
    AnnotationType.SEMANTIC_SEGMENTATION_2D: "semantic_segmentation_2d",
    AnnotationType.SEMANTIC_SEGMENTATION_3D: "semantic_segmentation_3d",
    AnnotationType.INSTANCE_SEGMENTATION_2D: "instance_segmentation_2d",
    AnnotationType.INSTANCE_SEGMENTATION_3D: "instance_segmentation_3d",
    AnnotationType.DEPTH: "depth",
    AnnotationType.SURFACE_NORMALS_2D: "surface_normals_2d",
    AnnotationType.SURFACE_NORMALS_3D: "surface_normals_3d",
    AnnotationType.MOTION_VECTORS_2D: "motion_vectors_2d",
    # the upstream proto comment says "motion_vectors_2d" here, which is a copy-paste typo
    AnnotationType.MOTION_VECTORS_3D: "motion_vectors_3d",
    AnnotationType.KEY_POINT_2D: "key_point_2d",
    AnnotationType.KEY_LINE_2D: "key_line_2d",
    AnnotationType.POLYGON_2D: "polygon_2d",
    AnnotationType.AGENT_BEHAVIOR: "agent_behavior",
}

_DIRECTORY_NAME_TO_ANNOTATION_TYPE: Dict[str, AnnotationType] = {
    v: k for k, v in ANNOTATION_TYPE_DIRECTORY_NAMES.items()
}


def name_for(code: Union[int, AnnotationType]) -> str:
    """
    Returns the directory name of an annotation type.

    Args:
        code: Integer code as found on the wire, an :obj:`AnnotationType` member or a numpy integer.

    Returns:
        Directory name, e.g. ``"bounding_box_2d"`` for ``0``.

    Raises:
        UnknownCodeError: If `code` is not one of the defined annotation type codes.
    """
    if isinstance(code, bool) or not isinstance(code, (int, np.integer)):
        raise UnknownCodeError(code=code, known_codes=sorted(int(t) for t in ANNOTATION_TYPE_DIRECTORY_NAMES))
    try:
        return ANNOTATION_TYPE_DIRECTORY_NAMES[int(code)]
    except KeyError as e:
        raise UnknownCodeError(
            code=code, known_codes=sorted(int(t) for t in ANNOTATION_TYPE_DIRECTORY_NAMES)
        ) from e


def code_for(name: str) -> AnnotationType:
    """
    Returns the annotation type stored under a directory name.

    Args:
        name: Directory name, e.g. ``"polygon_2d"``.

    Returns:
        Matching :obj:`AnnotationType`.

    Raises:
        UnknownNameError: If no annotation type uses `name` as its directory.
    """
    try:
        return _DIRECTORY_NAME_TO_ANNOTATION_TYPE[name]
    except (KeyError, TypeError) as e:
        raise UnknownNameError(name=name, known_names=sorted(_DIRECTORY_NAME_TO_ANNOTATION_TYPE)) from e


class DirectoryName:
    BOUNDING_BOX_2D: str = name_for(AnnotationType.BOUNDING_BOX_2D)
    BOUNDING_BOX_3D: str = name_for(AnnotationType.BOUNDING_BOX_3D)
    SEMANTIC_SEGMENTATION_2D: str = name_for(AnnotationType.SEMANTIC_SEGMENTATION_2D)
    SEMANTIC_SEGMENTATION_3D: str = name_for(AnnotationType.SEMANTIC_SEGMENTATION_3D)
    INSTANCE_SEGMENTATION_2D: str = name_for(AnnotationType.INSTANCE_SEGMENTATION_2D)
    INSTANCE_SEGMENTATION_3D: str = name_for(AnnotationType.INSTANCE_SEGMENTATION_3D)
    DEPTH: str = name_for(AnnotationType.DEPTH)
    SURFACE_NORMALS_2D: str = name_for(AnnotationType.SURFACE_NORMALS_2D)
    SURFACE_NORMALS_3D: str = name_for(AnnotationType.SURFACE_NORMALS_3D)
    MOTION_VECTORS_2D: str = name_for(AnnotationType.MOTION_VECTORS_2D)
    MOTION_VECTORS_3D: str = name_for(AnnotationType.MOTION_VECTORS_3D)
    KEY_POINT_2D: str = name_for(AnnotationType.KEY_POINT_2D)
    KEY_LINE_2D: str = name_for(AnnotationType.KEY_LINE_2D)
    POLYGON_2D: str = name_for(AnnotationType.POLYGON_2D)
    AGENT_BEHAVIOR: str = name_for(AnnotationType.AGENT_BEHAVIOR)
