from typing import Tuple, Union

# Sequence of map keys / list indices from the document root to a node
FieldPath = Tuple[Union[str, int], ...]


def format_path(path: FieldPath) -> str:
    if not path:
        return "<root>"
    return " -> ".join(str(part) for part in path)


def node_type_name(node: object) -> str:
    if isinstance(node, bool):
        return "bool"
    if isinstance(node, dict):
        return "map"
    if isinstance(node, (list, tuple)):
        return "list"
    return type(node).__name__


class DecodeError(ValueError):
    """Base class for every failure raised while decoding a project."""

    def __init__(self, path: FieldPath, message: str):
        super().__init__(f"{message} (at {format_path(path)})")
        self.path = tuple(path)
        self.message = message

    def describe(self) -> str:
        return self.message


class MissingField(DecodeError):
    def __init__(self, path: FieldPath):
        self.field = path[-1] if path else None
        super().__init__(path, f"missing key '{self.field}'")


class TypeMismatch(DecodeError):
    def __init__(self, path: FieldPath, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(path, f"expected {expected}, found {found}")


class UnsupportedValue(DecodeError):
    def __init__(self, path: FieldPath, found: str):
        self.found = found
        super().__init__(path, f"cannot decode {found} value")


class MalformedDocument(DecodeError):
    def __init__(self, path: FieldPath, reason: str):
        self.reason = reason
        super().__init__(path, f"malformed document: {reason}")
