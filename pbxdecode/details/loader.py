import logging
from pathlib import Path
from typing import Union

from pbxdecode.decoder import decode
from pbxdecode.model import Project

logger = logging.getLogger(__name__)

PROJECT_FILENAME = "project.pbxproj"


# Accepts either a .xcodeproj bundle directory or the project.pbxproj file itself
def find_project_file(path: Union[str, Path]) -> Path:
    path = Path(path)
    candidate = path / PROJECT_FILENAME if path.is_dir() else path
    if not candidate.is_file():
        raise FileNotFoundError(f"no project file at {candidate}")
    return candidate


def load_project(path: Union[str, Path]) -> Project:
    project_file = find_project_file(path)
    logger.debug("reading %s", project_file)
    project = decode(project_file.read_bytes())
    logger.debug("decoded %d objects from %s", len(project.objects), project_file)
    return project
