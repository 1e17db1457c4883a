from pbxdecode.config import Config
from pbxdecode.decoder import OBJECT_TYPES, decode, decode_document, decode_object
from pbxdecode.errors import (
    DecodeError,
    MalformedDocument,
    MissingField,
    TypeMismatch,
    UnsupportedValue,
    format_path,
)
from pbxdecode.model import Project, UnknownObject, XcodeObject
from pbxdecode.values import DynamicValue, ValueKind, decode_dynamic
