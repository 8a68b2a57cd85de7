"""
Project discovery for projref.

A <PROJECT> argument may name a project file or a directory holding
exactly one. When the argument is omitted the current working directory
is searched.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import AmbiguousProjectError, MissingArgumentError, ProjectNotFoundError
from .msbuild import ProjectDocument

LOG = logging.getLogger(__name__)

PROJECT_FILE_PATTERN = "*.*proj"


def resolve_project_argument(value: Optional[str], cwd: Optional[Path] = None) -> str:
    """
    Turn the raw <PROJECT> argument into a path to search.

    None means the argument was not given and resolves to the current
    working directory. An explicitly empty value is an error.
    """

    if value is None:
        return str(cwd if cwd is not None else Path.cwd())
    if not value.strip():
        raise MissingArgumentError("Required argument <Project> was not passed.")
    return value


def find_project(path: str) -> Tuple[ProjectDocument, str]:
    """
    Load the project named by path and return it with its directory.

    The returned directory always ends with a path separator.
    """

    candidate = Path(path)
    if candidate.is_file():
        project = ProjectDocument.load(candidate)
        project_dir = str(candidate.resolve().parent)
    else:
        project = ProjectDocument.load(_single_project_in(candidate, path))
        project_dir = str(candidate)

    return project, _ensure_trailing_separator(project_dir)


def _single_project_in(directory: Path, display: str) -> Path:
    if not directory.is_dir():
        raise ProjectNotFoundError(f"Could not find project or directory `{display}`.")

    matches: List[Path] = sorted(
        entry for entry in directory.glob(PROJECT_FILE_PATTERN) if entry.is_file()
    )
    LOG.debug("Project candidates in %s: %s", directory, [m.name for m in matches])

    if not matches:
        raise ProjectNotFoundError(f"Could not find any project in `{display}`.")
    if len(matches) > 1:
        raise AmbiguousProjectError(
            f"Found more than one project in `{display}`. Please specify which one to use."
        )
    return matches[0]


def _ensure_trailing_separator(path: str) -> str:
    if path.endswith(os.sep):
        return path
    return path + os.sep
