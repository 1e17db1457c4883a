import sys

from collections import Counter
from pathlib import Path
from typing import TextIO

from pbxdecode import Config
from pbxdecode.details.loader import load_project
from pbxdecode.model import PBXProject, Project, UnknownObject, XCRemoteSwiftPackageReference


def object_type_name(record) -> str:
    if isinstance(record, UnknownObject):
        return "Unknown"
    return type(record).__name__


def write_summary(project: Project, config: Config, file: TextIO):
    print(f"Archive Version: {project.archiveVersion}", file=file)
    print(f"Object Version: {project.objectVersion}", file=file)
    print(f"Total Objects: {len(project.objects)}", file=file)

    type_counts = Counter(object_type_name(record) for record in project.objects.values())
    print("", file=file)
    print("Object Type Summary:", file=file)
    for type_name, count in sorted(type_counts.items()):
        print(f"  {type_name}: {count}", file=file)

    unknown = [f"{object_id}: {record.isa}" for object_id, record in project.unknown_objects()]
    print("", file=file)
    if unknown:
        print("Unknown Objects Found:", file=file)
        for line in unknown[: config.unknown_limit]:
            print(f"  {line}", file=file)
        if len(unknown) > config.unknown_limit:
            print(f"  ... and {len(unknown) - config.unknown_limit} more", file=file)
    else:
        print("All objects decoded to known types", file=file)

    # the root id is not validated during decoding, it may not resolve to a project
    root = project.root
    if isinstance(root, PBXProject):
        print("", file=file)
        print("Root Project:", file=file)
        print(f"  Targets: {len(root.targets)}", file=file)
        print(f"  Package References: {len(root.packageReferences or ())}", file=file)

    packages = sum(1 for _ in project.objects_of_type(XCRemoteSwiftPackageReference))
    print("", file=file)
    print(f"Swift Packages: {packages}", file=file)


def summary_main(config: Config, project_path: Path):
    write_summary(load_project(project_path), config, sys.stdout)
