class AnnotationSchemaException(Exception):
    pass


class RangeError(AnnotationSchemaException, ValueError):
    """Raised when a value does not fit the wire type of the field it is encoded into."""

    def __init__(self, field_path: str, value: object, message: str):
        self.field_path = field_path
        self.value = value
        super().__init__(f"{field_path}: {message} (got {value!r})")


class DuplicateKeyError(AnnotationSchemaException, ValueError):
    def __init__(self, field_path: str, key: str):
        self.field_path = field_path
        self.key = key
        super().__init__(f"{field_path}: duplicate attribute key {key!r}")


class MalformedInputError(AnnotationSchemaException, ValueError):
    pass


class UnknownCodeError(AnnotationSchemaException, LookupError):
    def __init__(self, code: object, known_codes: list):
        self.code = code
        self.known_codes = known_codes
        super().__init__(
            f"Unknown annotation type code {code!r}. "
            f"Producer and consumer may use different schema versions; known codes are {known_codes}."
        )


class UnknownNameError(AnnotationSchemaException, LookupError):
    def __init__(self, name: object, known_names: list):
        self.name = name
        self.known_names = known_names
        super().__init__(
            f"Unknown annotation type name {name!r}. "
            f"Producer and consumer may use different schema versions; known names are {known_names}."
        )
