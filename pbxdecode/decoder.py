"""
Xcode project file decoder.

This module turns a parsed property list into the typed model of model.py. Record
classes are decoded with a recursive, type-driven approach: each dataclass field's
annotation says what shape the node must have, so adding a record class or a field
needs no decoding code of its own.

Objects are routed by their `isa` through OBJECT_TYPES. An `isa` missing from that
table is not an error; the record is kept as an UnknownObject holding dynamic values.
"""

import dataclasses
import plistlib
from types import MappingProxyType
from collections import abc
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union, get_args, get_origin, get_type_hints

from openstep_parser import OpenStepDecoder

from pbxdecode.errors import (
    FieldPath,
    MalformedDocument,
    MissingField,
    TypeMismatch,
    node_type_name,
)
from pbxdecode.model import (
    ObjectRecord,
    PBXAggregateTarget,
    PBXBuildFile,
    PBXBuildPhase,
    PBXBuildRule,
    PBXContainerItemProxy,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFileSystemSynchronizedRootGroup,
    PBXGroup,
    PBXLegacyTarget,
    PBXNativeTarget,
    PBXProject,
    PBXReferenceProxy,
    PBXShellScriptBuildPhase,
    PBXTargetDependency,
    PBXVariantGroup,
    PackageRequirement,
    Project,
    UnknownObject,
    XCBuildConfiguration,
    XCConfigurationList,
    XCLocalSwiftPackageReference,
    XCRemoteSwiftPackageReference,
    XCSwiftPackageProductDependency,
    XcodeObject,
)
from pbxdecode.values import DynamicValue, decode_dynamic, decode_dynamic_map

# Discriminator -> record class. Several build phase kinds share one shape.
OBJECT_TYPES: Mapping[str, Type[XcodeObject]] = MappingProxyType(
    {
        "PBXGroup": PBXGroup,
        "PBXFileReference": PBXFileReference,
        "PBXBuildFile": PBXBuildFile,
        "PBXNativeTarget": PBXNativeTarget,
        "PBXAggregateTarget": PBXAggregateTarget,
        "PBXLegacyTarget": PBXLegacyTarget,
        "PBXProject": PBXProject,
        "XCConfigurationList": XCConfigurationList,
        "XCBuildConfiguration": XCBuildConfiguration,
        "PBXSourcesBuildPhase": PBXBuildPhase,
        "PBXFrameworksBuildPhase": PBXBuildPhase,
        "PBXResourcesBuildPhase": PBXBuildPhase,
        "PBXHeadersBuildPhase": PBXBuildPhase,
        "PBXCopyFilesBuildPhase": PBXCopyFilesBuildPhase,
        "PBXShellScriptBuildPhase": PBXShellScriptBuildPhase,
        "XCRemoteSwiftPackageReference": XCRemoteSwiftPackageReference,
        "XCLocalSwiftPackageReference": XCLocalSwiftPackageReference,
        "XCSwiftPackageProductDependency": XCSwiftPackageProductDependency,
        "PBXContainerItemProxy": PBXContainerItemProxy,
        "PBXTargetDependency": PBXTargetDependency,
        "PBXVariantGroup": PBXVariantGroup,
        "PBXFileSystemSynchronizedRootGroup": PBXFileSystemSynchronizedRootGroup,
        "PBXBuildRule": PBXBuildRule,
        "PBXReferenceProxy": PBXReferenceProxy,
    }
)

DISCRIMINATOR = "isa"

# (field name, annotation, required) per record class, resolved once at import
RecordFields = Tuple[Tuple[str, Any, bool], ...]


def _record_fields(record_type: type) -> RecordFields:
    hints = get_type_hints(record_type)
    return tuple(
        (
            field.name,
            hints[field.name],
            field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING,
        )
        for field in dataclasses.fields(record_type)
    )


_RECORD_FIELDS: Mapping[type, RecordFields] = MappingProxyType(
    {
        record_type: _record_fields(record_type)
        for record_type in {*OBJECT_TYPES.values(), PackageRequirement}
    }
)


def decode_value(annotation: Any, node: Any, path: FieldPath) -> Any:
    """
    Decode a node against a field annotation.

    Args:
        annotation: The field's type annotation from a record class.
        node: The raw property-list node.
        path: The field path of the node, used for errors.

    Returns:
        The decoded value.

    Raises:
        TypeMismatch: If the node does not have the shape the annotation asks for.
    """
    if annotation is str:
        if not isinstance(node, str):
            raise TypeMismatch(path, "string", node_type_name(node))
        return node

    if annotation is DynamicValue:
        return decode_dynamic(node, path)

    if annotation in _RECORD_FIELDS:
        return decode_record(annotation, node, path)

    origin = get_origin(annotation)
    args = get_args(annotation)

    # Optional[X]: absence is handled by the caller, a present node must be an X
    if origin is Union:
        inner = [arg for arg in args if arg is not type(None)]
        if len(inner) == 1:
            return decode_value(inner[0], node, path)

    # Tuple[X, ...]: a plist array, frozen into a tuple
    elif origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        if not isinstance(node, list):
            raise TypeMismatch(path, "list", node_type_name(node))
        return tuple(decode_value(args[0], item, path + (index,)) for index, item in enumerate(node))

    elif origin is abc.Mapping and args == (str, DynamicValue):
        return decode_dynamic_map(node, path)

    raise TypeError(f"Unsupported field annotation: {annotation!r}")


def decode_record(record_type: type, node: Any, path: FieldPath) -> Any:
    if not isinstance(node, dict):
        raise TypeMismatch(path, "map", node_type_name(node))

    values: Dict[str, Any] = {}
    for name, annotation, required in _RECORD_FIELDS[record_type]:
        field_path = path + (name,)
        if name not in node:
            if required:
                raise MissingField(field_path)
            continue
        values[name] = decode_value(annotation, node[name], field_path)

    # keys the record does not declare are ignored
    return record_type(**values)


def decode_object(node: Any, object_id: str, path: Optional[FieldPath] = None) -> ObjectRecord:
    """
    Decode one entry of the objects table.

    Args:
        node: The raw record, a map from field name to property-list node.
        object_id: The entry's key in the objects table.
        path: Field path of the record; defaults to ("objects", object_id).

    Returns:
        The matching record class instance, or an UnknownObject if `isa` is not
        in OBJECT_TYPES.
    """
    if path is None:
        path = ("objects", object_id)

    if not isinstance(node, dict):
        raise TypeMismatch(path, "map", node_type_name(node))
    if DISCRIMINATOR not in node:
        raise MissingField(path + (DISCRIMINATOR,))

    isa = node[DISCRIMINATOR]
    if not isinstance(isa, str):
        raise TypeMismatch(path + (DISCRIMINATOR,), "string", node_type_name(isa))

    record_type = OBJECT_TYPES.get(isa)
    if record_type is None:
        return UnknownObject(decode_dynamic_map(node, path))
    return decode_record(record_type, node, path)


def _required(document: Dict[str, Any], key: str) -> Any:
    if key not in document:
        raise MissingField((key,))
    return document[key]


def decode_document(document: Any) -> Project:
    """
    Decode an already parsed property list into a Project.

    Any failure aborts the whole decode; no partially decoded project is returned.
    """
    if not isinstance(document, dict):
        raise MalformedDocument((), f"top level is a {node_type_name(document)}, expected a map")

    archive_version = decode_value(str, _required(document, "archiveVersion"), ("archiveVersion",))
    object_version = decode_value(str, _required(document, "objectVersion"), ("objectVersion",))
    root_object = decode_value(str, _required(document, "rootObject"), ("rootObject",))

    raw_objects = _required(document, "objects")
    if not isinstance(raw_objects, dict):
        raise TypeMismatch(("objects",), "map", node_type_name(raw_objects))

    objects: Dict[str, ObjectRecord] = {}
    for object_id, node in raw_objects.items():
        if not isinstance(object_id, str):
            raise TypeMismatch(("objects", str(object_id)), "string key", node_type_name(object_id))
        objects[object_id] = decode_object(node, object_id)

    return Project(
        archiveVersion=archive_version,
        objectVersion=object_version,
        rootObject=root_object,
        objects=MappingProxyType(objects),
    )


def parse_property_list(data: bytes) -> Any:
    """
    Parse XML, binary or OpenStep (ASCII) property list bytes into plain Python values.

    XML (byte-order-marked and UTF-16 included) and binary input is left to
    plistlib's own format detection; whatever plistlib does not recognise is read
    as the OpenStep encoding Xcode writes.

    Raises:
        MalformedDocument: If the bytes are not a property list in any of these encodings.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"expected bytes, got {type(data).__name__}")
    data = bytes(data)

    try:
        return plistlib.loads(data)
    except plistlib.InvalidFileException as e:
        if data.startswith(b"bplist"):
            raise MalformedDocument((), f"invalid binary property list: {e}") from e
    except Exception as e:
        # plistlib lets expat, date and base64 errors through unwrapped
        raise MalformedDocument((), f"invalid property list: {e!r}") from e

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedDocument((), f"not a property list: {e}") from e
    try:
        return OpenStepDecoder.ParseFromString(text)
    except Exception as e:
        raise MalformedDocument((), f"invalid OpenStep property list: {e!r}") from e


def decode(data: bytes) -> Project:
    """
    Decode the contents of a project.pbxproj file.

    Args:
        data: The raw file contents in XML, binary or OpenStep property list encoding.

    Returns:
        The decoded Project.

    Raises:
        DecodeError: On the first malformed, missing or mistyped node.
    """
    return decode_document(parse_property_list(data))

