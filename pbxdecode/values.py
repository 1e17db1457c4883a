# Dynamic property-list values.
#
# Build settings, shell script bodies and every field of an unrecognized object have no
# statically known shape. They are decoded into DynamicValue, a tagged union over the
# six property-list shapes this package supports.

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Tuple, Union

from pbxdecode.errors import FieldPath, TypeMismatch, UnsupportedValue, node_type_name


class ValueKind(Enum):
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAP = "map"


@dataclass(frozen=True)
class DynamicValue:
    kind: ValueKind
    value: Union[bool, int, float, str, Tuple["DynamicValue", ...], Mapping[str, "DynamicValue"]]

    def unwrap(self) -> Any:
        """Convert back to plain Python values (tuples become lists)."""
        if self.kind is ValueKind.LIST:
            return [item.unwrap() for item in self.value]
        if self.kind is ValueKind.MAP:
            return {key: item.unwrap() for key, item in self.value.items()}
        return self.value

    def __hash__(self) -> int:
        if self.kind is ValueKind.MAP:
            return hash((self.kind, frozenset(self.value.items())))
        return hash((self.kind, self.value))

    def __str__(self) -> str:
        return str(self.unwrap())


def _is_bool(node: Any) -> bool:
    return isinstance(node, bool)


# bool is a subclass of int, it must never be read as 0/1
def _is_integer(node: Any) -> bool:
    return isinstance(node, int) and not isinstance(node, bool)


def _is_float(node: Any) -> bool:
    return isinstance(node, float)


def _is_string(node: Any) -> bool:
    return isinstance(node, str)


def _is_list(node: Any) -> bool:
    return isinstance(node, (list, tuple))


def _is_map(node: Any) -> bool:
    return isinstance(node, dict)


def _scalar(node: Any, path: FieldPath) -> Any:
    return node


def _list_items(node: Any, path: FieldPath) -> Tuple[DynamicValue, ...]:
    return tuple(decode_dynamic(item, path + (index,)) for index, item in enumerate(node))


def _map_items(node: Any, path: FieldPath) -> Mapping[str, DynamicValue]:
    return decode_dynamic_map(node, path)


# Interpretations in priority order; the first one whose shape matches wins.
_CANDIDATES: Tuple[Tuple[ValueKind, Callable[[Any], bool], Callable[[Any, FieldPath], Any]], ...] = (
    (ValueKind.BOOL, _is_bool, _scalar),
    (ValueKind.INTEGER, _is_integer, _scalar),
    (ValueKind.FLOAT, _is_float, _scalar),
    (ValueKind.STRING, _is_string, _scalar),
    (ValueKind.LIST, _is_list, _list_items),
    (ValueKind.MAP, _is_map, _map_items),
)


def decode_dynamic(node: Any, path: FieldPath = ()) -> DynamicValue:
    for kind, matches, convert in _CANDIDATES:
        if matches(node):
            return DynamicValue(kind, convert(node, path))
    raise UnsupportedValue(path, node_type_name(node))


def decode_dynamic_map(node: Any, path: FieldPath = ()) -> Mapping[str, DynamicValue]:
    if not isinstance(node, dict):
        raise TypeMismatch(path, "map", node_type_name(node))
    result: Dict[str, DynamicValue] = {}
    for key, value in node.items():
        if not isinstance(key, str):
            raise TypeMismatch(path + (str(key),), "string key", node_type_name(key))
        result[key] = decode_dynamic(value, path + (key,))
    return MappingProxyType(result)
