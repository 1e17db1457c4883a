import dataclasses
import json
import sys

from pathlib import Path
from typing import Any, Mapping, TextIO

from pbxdecode import Config
from pbxdecode.details.loader import load_project
from pbxdecode.model import Project, UnknownObject
from pbxdecode.values import DynamicValue


# Convert decoded values to JSON-compatible ones, dropping absent optional fields
def to_plain(value: Any) -> Any:
    if isinstance(value, DynamicValue):
        return value.unwrap()
    elif isinstance(value, UnknownObject):
        return to_plain(value.properties)
    elif dataclasses.is_dataclass(value):
        return {
            field.name: to_plain(getattr(value, field.name))
            for field in dataclasses.fields(value)
            if getattr(value, field.name) is not None
        }
    elif isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    elif isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    return value


def write_dump(project: Project, config: Config, file: TextIO):
    json.dump(to_plain(project), file, indent=config.indent, sort_keys=True)
    print("", file=file)


def dump_main(config: Config, project_path: Path):
    write_dump(load_project(project_path), config, sys.stdout)
