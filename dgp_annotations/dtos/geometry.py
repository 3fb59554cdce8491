from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from dataclasses_json import dataclass_json
from pyquaternion import Quaternion

from dgp_annotations.dtos.common import DTO_REGISTRY


@DTO_REGISTRY.register_module(proto_name="dgp.proto.Vector3")
@dataclass_json
@dataclass
class Vector3DTO:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.Quaternion")
@dataclass_json
@dataclass
class QuaternionDTO:
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 0.0


@DTO_REGISTRY.register_module(proto_name="dgp.proto.Pose")
@dataclass_json
@dataclass
class PoseDTO:
    """6DoF pose. Owned by the geometry schema, carried here because 3D boxes embed it.

    Attributes:
        translation: Translation vector. For a 3D box this is the box center.
        rotation: Rotation as quaternion.
    """

    translation: Optional[Vector3DTO] = None
    rotation: Optional[QuaternionDTO] = None

    @property
    def quaternion(self) -> Quaternion:
        if self.rotation is None:
            return Quaternion()
        return Quaternion(w=self.rotation.qw, x=self.rotation.qx, y=self.rotation.qy, z=self.rotation.qz)

    @property
    def translation_array(self) -> np.ndarray:
        if self.translation is None:
            return np.zeros(3)
        return np.array([self.translation.x, self.translation.y, self.translation.z])

    @classmethod
    def from_quaternion(cls, translation: Sequence[float], quaternion: Quaternion) -> "PoseDTO":
        return cls(
            translation=Vector3DTO(x=float(translation[0]), y=float(translation[1]), z=float(translation[2])),
            rotation=QuaternionDTO(
                qw=float(quaternion.w),
                qx=float(quaternion.x),
                qy=float(quaternion.y),
                qz=float(quaternion.z),
            ),
        )
