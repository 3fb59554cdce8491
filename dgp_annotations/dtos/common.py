from dgp_annotations.utilities.module_registry import ModuleRegistry

# Every DTO registers the fully qualified name of the protobuf message it is encoded as.
DTO_REGISTRY = ModuleRegistry("proto_name")
