"""Protobuf messages of the DGP annotation schema.

Descriptors are assembled from :data:`MESSAGE_FIELDS` and registered in a private descriptor pool, so
the message classes do not depend on generated ``*_pb2`` modules and do not clash with another copy
of the DGP protos in the default pool.

Field numbers are permanent. Never renumber or reuse a field, add new ones instead.
"""
from typing import Dict, List, NamedTuple, Optional, Type

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

PROTO_PACKAGE = "dgp.proto"
ATTRIBUTES_ENTRY = "AttributesEntry"

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto


class FieldKind:
    INT32: str = "int32"
    UINT32: str = "uint32"
    DOUBLE: str = "double"
    BOOL: str = "bool"
    STRING: str = "string"
    MESSAGE: str = "message"
    # map<string, string>, declared as repeated entry messages which is identical on the wire
    ATTRIBUTES: str = "attributes"


_PROTO_TYPES = {
    FieldKind.INT32: FieldDescriptorProto.TYPE_INT32,
    FieldKind.UINT32: FieldDescriptorProto.TYPE_UINT32,
    FieldKind.DOUBLE: FieldDescriptorProto.TYPE_DOUBLE,
    FieldKind.BOOL: FieldDescriptorProto.TYPE_BOOL,
    FieldKind.STRING: FieldDescriptorProto.TYPE_STRING,
    FieldKind.MESSAGE: FieldDescriptorProto.TYPE_MESSAGE,
    FieldKind.ATTRIBUTES: FieldDescriptorProto.TYPE_MESSAGE,
}


class FieldSpec(NamedTuple):
    name: str
    number: int
    kind: str
    message_name: Optional[str] = None
    repeated: bool = False


def _full_name(message_name: str) -> str:
    return f"{PROTO_PACKAGE}.{message_name}"


GEOMETRY_FILE = "dgp/proto/geometry.proto"
ANNOTATIONS_FILE = "dgp/proto/annotations.proto"

GEOMETRY_MESSAGES: Dict[str, List[FieldSpec]] = {
    "Vector3": [
        FieldSpec("x", 1, FieldKind.DOUBLE),
        FieldSpec("y", 2, FieldKind.DOUBLE),
        FieldSpec("z", 3, FieldKind.DOUBLE),
    ],
    "Quaternion": [
        FieldSpec("qx", 1, FieldKind.DOUBLE),
        FieldSpec("qy", 2, FieldKind.DOUBLE),
        FieldSpec("qz", 3, FieldKind.DOUBLE),
        FieldSpec("qw", 4, FieldKind.DOUBLE),
    ],
    "Pose": [
        FieldSpec("translation", 1, FieldKind.MESSAGE, "Vector3"),
        FieldSpec("rotation", 2, FieldKind.MESSAGE, "Quaternion"),
    ],
}

ANNOTATION_MESSAGES: Dict[str, List[FieldSpec]] = {
    "BoundingBox2D": [
        FieldSpec("x", 1, FieldKind.INT32),
        FieldSpec("y", 2, FieldKind.INT32),
        FieldSpec("w", 3, FieldKind.UINT32),
        FieldSpec("h", 4, FieldKind.UINT32),
    ],
    "BoundingBox2DAnnotation": [
        FieldSpec("class_id", 1, FieldKind.UINT32),
        FieldSpec("box", 2, FieldKind.MESSAGE, "BoundingBox2D"),
        FieldSpec("area", 3, FieldKind.UINT32),
        FieldSpec("iscrowd", 4, FieldKind.BOOL),
        FieldSpec("instance_id", 5, FieldKind.UINT32),
        FieldSpec("attributes", 6, FieldKind.ATTRIBUTES),
    ],
    "BoundingBox3D": [
        FieldSpec("pose", 1, FieldKind.MESSAGE, "Pose"),
        FieldSpec("width", 2, FieldKind.DOUBLE),
        FieldSpec("length", 3, FieldKind.DOUBLE),
        FieldSpec("height", 4, FieldKind.DOUBLE),
        FieldSpec("occlusion", 5, FieldKind.UINT32),
        FieldSpec("truncation", 6, FieldKind.DOUBLE),
    ],
    "BoundingBox3DAnnotation": [
        FieldSpec("class_id", 1, FieldKind.UINT32),
        FieldSpec("box", 2, FieldKind.MESSAGE, "BoundingBox3D"),
        FieldSpec("instance_id", 3, FieldKind.UINT32),
        FieldSpec("attributes", 4, FieldKind.ATTRIBUTES),
        FieldSpec("num_points", 5, FieldKind.UINT32),
    ],
    "KeyPoint2D": [
        FieldSpec("x", 1, FieldKind.INT32),
        FieldSpec("y", 2, FieldKind.INT32),
    ],
    "KeyPoint2DAnnotation": [
        FieldSpec("class_id", 1, FieldKind.UINT32),
        FieldSpec("point", 2, FieldKind.MESSAGE, "KeyPoint2D"),
        FieldSpec("attributes", 3, FieldKind.ATTRIBUTES),
        FieldSpec("key", 4, FieldKind.STRING),
    ],
    "KeyLine2DAnnotation": [
        FieldSpec("class_id", 1, FieldKind.UINT32),
        FieldSpec("vertices", 2, FieldKind.MESSAGE, "KeyPoint2D", repeated=True),
        FieldSpec("attributes", 3, FieldKind.ATTRIBUTES),
        FieldSpec("key", 4, FieldKind.STRING),
    ],
    "PolygonPoint2D": [
        FieldSpec("x", 1, FieldKind.INT32),
        FieldSpec("y", 2, FieldKind.INT32),
    ],
    "Polygon2DAnnotation": [
        FieldSpec("class_id", 1, FieldKind.UINT32),
        FieldSpec("vertices", 2, FieldKind.MESSAGE, "PolygonPoint2D", repeated=True),
        FieldSpec("attributes", 3, FieldKind.ATTRIBUTES),
    ],
    "BoundingBox2DAnnotations": [
        FieldSpec("annotations", 1, FieldKind.MESSAGE, "BoundingBox2DAnnotation", repeated=True),
    ],
    "BoundingBox3DAnnotations": [
        FieldSpec("annotations", 1, FieldKind.MESSAGE, "BoundingBox3DAnnotation", repeated=True),
    ],
    "KeyPoint2DAnnotations": [
        FieldSpec("annotations", 1, FieldKind.MESSAGE, "KeyPoint2DAnnotation", repeated=True),
    ],
    "KeyLine2DAnnotations": [
        FieldSpec("annotations", 1, FieldKind.MESSAGE, "KeyLine2DAnnotation", repeated=True),
    ],
    "Polygon2DAnnotations": [
        FieldSpec("annotations", 1, FieldKind.MESSAGE, "Polygon2DAnnotation", repeated=True),
    ],
}

MESSAGE_FIELDS: Dict[str, List[FieldSpec]] = {
    _full_name(name): fields for name, fields in {**GEOMETRY_MESSAGES, **ANNOTATION_MESSAGES}.items()
}


def _field_descriptor(parent_name: str, field_spec: FieldSpec) -> FieldDescriptorProto:
    field_proto = FieldDescriptorProto(
        name=field_spec.name,
        number=field_spec.number,
        type=_PROTO_TYPES[field_spec.kind],
        label=FieldDescriptorProto.LABEL_REPEATED
        if field_spec.repeated or field_spec.kind == FieldKind.ATTRIBUTES
        else FieldDescriptorProto.LABEL_OPTIONAL,
    )
    if field_spec.kind == FieldKind.ATTRIBUTES:
        field_proto.type_name = f".{_full_name(parent_name)}.{ATTRIBUTES_ENTRY}"
    elif field_spec.kind == FieldKind.MESSAGE:
        field_proto.type_name = f".{_full_name(field_spec.message_name)}"
    return field_proto


def _message_descriptor(name: str, fields: List[FieldSpec]) -> descriptor_pb2.DescriptorProto:
    message_proto = descriptor_pb2.DescriptorProto(name=name)
    message_proto.field.extend([_field_descriptor(parent_name=name, field_spec=field_spec) for field_spec in fields])
    if any(field_spec.kind == FieldKind.ATTRIBUTES for field_spec in fields):
        entry = message_proto.nested_type.add(name=ATTRIBUTES_ENTRY)
        entry.field.add(
            name="key", number=1, type=FieldDescriptorProto.TYPE_STRING, label=FieldDescriptorProto.LABEL_OPTIONAL
        )
        entry.field.add(
            name="value", number=2, type=FieldDescriptorProto.TYPE_STRING, label=FieldDescriptorProto.LABEL_OPTIONAL
        )
    return message_proto


def _file_descriptor(
    file_name: str, messages: Dict[str, List[FieldSpec]], dependencies: List[str]
) -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=file_name, package=PROTO_PACKAGE, syntax="proto3", dependency=dependencies
    )
    file_proto.message_type.extend([_message_descriptor(name=n, fields=f) for n, f in messages.items()])
    return file_proto


DESCRIPTOR_POOL = descriptor_pool.DescriptorPool()
DESCRIPTOR_POOL.AddSerializedFile(
    _file_descriptor(file_name=GEOMETRY_FILE, messages=GEOMETRY_MESSAGES, dependencies=[]).SerializeToString()
)
DESCRIPTOR_POOL.AddSerializedFile(
    _file_descriptor(
        file_name=ANNOTATIONS_FILE, messages=ANNOTATION_MESSAGES, dependencies=[GEOMETRY_FILE]
    ).SerializeToString()
)

MESSAGE_CLASSES: Dict[str, Type[Message]] = {
    full_name: message_factory.GetMessageClass(DESCRIPTOR_POOL.FindMessageTypeByName(full_name))
    for full_name in MESSAGE_FIELDS
}


def message_class(full_name: str) -> Type[Message]:
    """Returns the protobuf message class of a fully qualified message name, e.g. ``dgp.proto.Pose``."""
    return MESSAGE_CLASSES[full_name]
