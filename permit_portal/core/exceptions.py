class ApplicationNotFoundError(Exception):
    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application '{application_id}' not found")


class InvalidStatusTransitionError(Exception):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from '{current}' to '{target}'")


class MalformedPayloadError(ValueError):
    """The encoded form data could not be decoded into a value tree."""


class RawBinaryValueError(TypeError):
    """Raw bytes reached the serializer instead of a file reference."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Raw binary value at '{path}' cannot be submitted")
