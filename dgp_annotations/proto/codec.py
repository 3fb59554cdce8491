import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

import numpy as np
import ujson
from google.protobuf.message import DecodeError, Message
from google.protobuf.unknown_fields import UnknownFieldSet

from dgp_annotations.common.annotation_types import AnnotationType, name_for
from dgp_annotations.common.exceptions import DuplicateKeyError, MalformedInputError, RangeError
from dgp_annotations.common.utils import _attribute_key_dump, _attribute_value_dump
from dgp_annotations.dtos.common import DTO_REGISTRY
from dgp_annotations.proto.schema import MESSAGE_FIELDS, PROTO_PACKAGE, FieldKind, FieldSpec, message_class

logger = logging.getLogger(__name__)

TMessage = TypeVar("TMessage")

UINT32_MAX = 2**32 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER_RANGES = {
    FieldKind.UINT32: (0, UINT32_MAX),
    FieldKind.INT32: (INT32_MIN, INT32_MAX),
}

_ATTRIBUTE_ENTRY_FIELDS = {1: "key", 2: "value"}

AttributesInput = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]
SubMessageConverter = Callable[[Any, str, str], Message]


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _proto_name(message_type: type) -> str:
    if message_type.__name__ not in DTO_REGISTRY:
        raise TypeError(f"{message_type.__name__} is not a registered annotation schema message.")
    return DTO_REGISTRY.get_tag(message_type, "proto_name")


def _dto_type(proto_name: str) -> type:
    return DTO_REGISTRY.find_module(proto_name=proto_name)


def _attribute_items(attributes: Optional[AttributesInput], field_path: str) -> List[Tuple[str, str]]:
    if attributes is None:
        return []
    pairs = attributes.items() if isinstance(attributes, Mapping) else attributes

    dumped = {}
    for key, value in pairs:
        key = _attribute_key_dump(key)
        if key in dumped:
            raise DuplicateKeyError(field_path=field_path, key=key)
        dumped[key] = _attribute_value_dump(value)

    # sorted for byte-stable output independent of insertion order
    return sorted(dumped.items())


def _check_integer(value: Any, kind: str, field_path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{field_path}: expected an integer, got {type(value).__name__}")
    value = int(value)
    low, high = _INTEGER_RANGES[kind]
    if value < low:
        if kind == FieldKind.UINT32:
            raise RangeError(field_path=field_path, value=value, message="negative value for unsigned field")
        raise RangeError(field_path=field_path, value=value, message=f"value below {low}")
    if value > high:
        raise RangeError(field_path=field_path, value=value, message=f"value exceeds {high}")
    return value


def _check_double(value: Any, field_path: str) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise TypeError(f"{field_path}: expected a number, got {type(value).__name__}")
    return float(value)


def _check_bool(value: Any, field_path: str) -> bool:
    if not isinstance(value, (bool, np.bool_)):
        raise TypeError(f"{field_path}: expected a bool, got {type(value).__name__}")
    return bool(value)


def _check_string(value: Any, field_path: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_path}: expected a string, got {type(value).__name__}")
    return value


def _set_field(
    proto: Message, field_spec: FieldSpec, value: Any, field_path: str, to_sub_message: SubMessageConverter
) -> None:
    if field_spec.kind == FieldKind.ATTRIBUTES:
        entries = getattr(proto, field_spec.name)
        for key, attr_value in _attribute_items(attributes=value, field_path=field_path):
            entries.add(key=key, value=attr_value)
    elif field_spec.kind == FieldKind.MESSAGE:
        sub_proto_name = f"{PROTO_PACKAGE}.{field_spec.message_name}"
        if field_spec.repeated:
            if not isinstance(value, (list, tuple)):
                raise TypeError(f"{field_path}: expected a list, got {type(value).__name__}")
            getattr(proto, field_spec.name).extend(
                [to_sub_message(v, sub_proto_name, f"{field_path}[{i}]") for i, v in enumerate(value)]
            )
        else:
            sub_message = getattr(proto, field_spec.name)
            sub_message.CopyFrom(to_sub_message(value, sub_proto_name, field_path))
            # keeps an all-default sub-message present on the wire
            sub_message.SetInParent()
    elif field_spec.kind in _INTEGER_RANGES:
        setattr(proto, field_spec.name, _check_integer(value=value, kind=field_spec.kind, field_path=field_path))
    elif field_spec.kind == FieldKind.DOUBLE:
        setattr(proto, field_spec.name, _check_double(value=value, field_path=field_path))
    elif field_spec.kind == FieldKind.BOOL:
        setattr(proto, field_spec.name, _check_bool(value=value, field_path=field_path))
    else:
        setattr(proto, field_spec.name, _check_string(value=value, field_path=field_path))


def _to_proto(message: Any, path: str = "", proto_name: Optional[str] = None) -> Message:
    message_proto_name = _proto_name(type(message))
    if proto_name is not None and message_proto_name != proto_name:
        raise TypeError(f"{path}: expected a {proto_name} message, got {type(message).__name__}")
    proto = message_class(message_proto_name)()

    for field_spec in MESSAGE_FIELDS[message_proto_name]:
        value = getattr(message, field_spec.name)
        if value is None and field_spec.kind in (FieldKind.MESSAGE, FieldKind.ATTRIBUTES):
            continue
        _set_field(
            proto=proto,
            field_spec=field_spec,
            value=value,
            field_path=_join(path, field_spec.name),
            to_sub_message=lambda m, n, p: _to_proto(message=m, path=p, proto_name=n),
        )

    return proto


def _dict_to_proto(data: Any, proto_name: str, path: str = "") -> Message:
    if not isinstance(data, dict):
        raise TypeError(f"{path or proto_name}: expected an object, got {type(data).__name__}")
    proto = message_class(proto_name)()

    for field_spec in MESSAGE_FIELDS[proto_name]:
        # missing and null fields keep their default
        value = data.get(field_spec.name)
        if value is None:
            continue
        _set_field(
            proto=proto,
            field_spec=field_spec,
            value=value,
            field_path=_join(path, field_spec.name),
            to_sub_message=lambda d, n, p: _dict_to_proto(data=d, proto_name=n, path=p),
        )

    return proto


def _check_wire_types(proto: Message, field_names: Dict[int, str], path: str) -> None:
    # protobuf keeps a declared field read with the wrong wire type as an unknown field
    for unknown_field in UnknownFieldSet(proto):
        if unknown_field.field_number in field_names:
            raise MalformedInputError(
                f"{_join(path, field_names[unknown_field.field_number])}: "
                f"unexpected wire type {unknown_field.wire_type}"
            )


def _field_from_proto(proto: Message, field_spec: FieldSpec, path: str) -> Any:
    value = getattr(proto, field_spec.name)
    field_path = _join(path, field_spec.name)
    if field_spec.kind == FieldKind.ATTRIBUTES:
        attributes = {}
        for i, entry in enumerate(value):
            _check_wire_types(proto=entry, field_names=_ATTRIBUTE_ENTRY_FIELDS, path=f"{field_path}[{i}]")
            if entry.key in attributes:
                raise MalformedInputError(f"{field_path}: duplicate attribute key {entry.key!r}")
            attributes[entry.key] = entry.value
        return attributes
    elif field_spec.kind == FieldKind.MESSAGE:
        dto_type = _dto_type(proto_name=f"{PROTO_PACKAGE}.{field_spec.message_name}")
        if field_spec.repeated:
            return [
                _from_proto(proto=v, message_type=dto_type, path=f"{field_path}[{i}]") for i, v in enumerate(value)
            ]
        if not proto.HasField(field_spec.name):
            return None
        return _from_proto(proto=value, message_type=dto_type, path=field_path)
    return value


def _from_proto(proto: Message, message_type: Type[TMessage], path: str = "") -> TMessage:
    fields = MESSAGE_FIELDS[_proto_name(message_type)]
    _check_wire_types(
        proto=proto, field_names={field_spec.number: field_spec.name for field_spec in fields}, path=path
    )
    return message_type(
        **{field_spec.name: _field_from_proto(proto=proto, field_spec=field_spec, path=path) for field_spec in fields}
    )


def encode(message: Any) -> bytes:
    """
    Encodes an annotation schema message into protobuf wire format.

    Scalar fields holding their default value and absent sub-messages are omitted. Attribute entries
    are written sorted by key, so equal messages always encode to equal bytes.

    Args:
        message: Any registered DTO, e.g. :obj:`BoundingBox2DAnnotationsDTO`.

    Returns:
        Serialized message.

    Raises:
        RangeError: If an integer does not fit its wire type, e.g. a negative box width.
        DuplicateKeyError: If two attribute keys end up with the same string representation.
        TypeError: If `message` is not a schema message or a field holds a value of the wrong type.
    """
    return _to_proto(message=message).SerializeToString(deterministic=True)


def decode(data: bytes, message_type: Type[TMessage]) -> TMessage:
    """
    Decodes protobuf wire format into an annotation schema message.

    Decoding is purely structural. Values outside their documented domain (e.g. ``truncation > 1``)
    decode fine and are reported by :class:`~dgp_annotations.validation.Validator` instead. Unknown
    field numbers written by a newer producer are skipped.

    Args:
        data: Serialized message.
        message_type: DTO class the data was encoded from.

    Returns:
        Decoded message.

    Raises:
        MalformedInputError: On truncated or otherwise invalid wire data, a known field sent with
            the wrong wire type, invalid UTF-8 in string fields or duplicate attribute keys.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedInputError(f"Expected bytes to decode {message_type.__name__}, got {type(data).__name__}.")

    proto = message_class(_proto_name(message_type))()
    try:
        proto.ParseFromString(bytes(data))
    except (DecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Failed decoding {len(data)} bytes as {message_type.__name__}: {e}")
        raise MalformedInputError(f"Cannot decode {message_type.__name__}: {e}") from e

    return _from_proto(proto=proto, message_type=message_type)


def encode_json(message: Any, indent: int = 0) -> str:
    """
    Encodes an annotation schema message as JSON with protobuf field names.

    Applies the same checks as :func:`encode` and normalizes attributes the same way, so a message
    decoded from JSON equals the one decoded from its binary form.
    """
    canonical = _from_proto(proto=_to_proto(message=message), message_type=type(message))
    return ujson.dumps(canonical.to_dict(), indent=indent, escape_forward_slashes=False)


def decode_json(text: Union[str, bytes], message_type: Type[TMessage]) -> TMessage:
    """
    Decodes JSON written by :func:`encode_json` or by other DGP tooling.

    Missing fields and ``null`` values take their defaults and unknown fields are ignored. Values
    are not coerced, e.g. ``"1.5"`` is rejected for a double field and ``1`` for a bool field.

    Raises:
        MalformedInputError: If `text` is not valid JSON, or a value cannot be represented by the
            field's wire type.
    """
    try:
        json_data = ujson.loads(text)
    except (ValueError, TypeError) as e:
        raise MalformedInputError(f"Cannot decode {message_type.__name__} from JSON: {e}") from e
    if not isinstance(json_data, dict):
        raise MalformedInputError(
            f"Expected a JSON object to decode {message_type.__name__}, got {type(json_data).__name__}."
        )

    proto_name = _proto_name(message_type)
    try:
        # built from the raw JSON values, so the wire type checks of encode apply before any coercion
        proto = _dict_to_proto(data=json_data, proto_name=proto_name)
    except (ValueError, TypeError) as e:
        logger.debug(f"Failed decoding JSON as {message_type.__name__}: {e}")
        raise MalformedInputError(f"Cannot decode {message_type.__name__} from JSON: {e}") from e

    return _from_proto(proto=proto, message_type=message_type)


def message_type_for(annotation_type: Union[int, AnnotationType]) -> type:
    """
    Returns the collection DTO class stored under an annotation type's directory.

    Raises:
        UnknownCodeError: If `annotation_type` is not a defined code.
        ValueError: If the annotation type has no protobuf collection message, e.g. ``DEPTH``.
    """
    directory_name = name_for(annotation_type)
    try:
        return DTO_REGISTRY.find_module(annotation_type=AnnotationType(int(annotation_type)))
    except KeyError as e:
        raise ValueError(f"Annotation type '{directory_name}' has no protobuf collection message.") from e
