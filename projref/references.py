"""
Reference path checks for projref.

These run after the project has been located and before anything is
written, so a bad reference never leaves a half-edited project behind.
"""

from __future__ import annotations

import logging
import os
from typing import List, Sequence

from .errors import ReferenceNotFoundError

LOG = logging.getLogger(__name__)


def ensure_all_references_exist(references: Sequence[str]) -> None:
    """
    Raise ReferenceNotFoundError listing every reference that is not a
    file on disk. Directories do not count.
    """

    missing = [ref for ref in references if not os.path.isfile(ref)]
    if missing:
        raise ReferenceNotFoundError(missing)


def convert_paths_to_relative(project_dir: str, references: Sequence[str]) -> List[str]:
    """
    Rewrite each reference relative to project_dir.

    Relative inputs are interpreted against the current working
    directory. Results use backslash separators, the form MSBuild
    project files store Include paths in. A reference with no relative
    form (another drive on Windows) stays absolute.
    """

    base = os.path.abspath(project_dir)
    relative: List[str] = []
    for ref in references:
        absolute = os.path.abspath(ref)
        try:
            converted = os.path.relpath(absolute, base)
        except ValueError:
            converted = absolute
        converted = converted.replace(os.sep, "\\")
        LOG.debug("Reference %s -> %s", ref, converted)
        relative.append(converted)
    return relative
