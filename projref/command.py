"""
High-level orchestration for projref.

run_add_reference drives one invocation:
  - resolving and loading the project,
  - checking that references were given,
  - validating and relativizing them unless forced,
  - adding them to the project, and
  - saving the project only if something was added.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import Config
from .errors import NoReferencesError
from .locator import find_project, resolve_project_argument
from .msbuild import ProjectDocument
from .references import convert_paths_to_relative, ensure_all_references_exist

LOG = logging.getLogger(__name__)


def add_project_references(
    project: ProjectDocument,
    framework: Optional[str],
    references: Sequence[str],
) -> int:
    """
    Add each reference to project and return how many were new.
    """

    added = 0
    for ref in references:
        if project.add_reference(ref, framework):
            added += 1
            print(f"Reference `{ref}` added to the project.")
        else:
            print(f"Project already has a reference to `{ref}`.")
    return added


def run_add_reference(config: Config) -> int:
    """
    Execute the "add project-to-project reference" command.

    Returns the number of references added. Any ProjRefError raised along
    the way aborts before the project is written.
    """

    project, project_dir = find_project(resolve_project_argument(config.project))
    LOG.info("Using project %s", project.path)

    if not config.references:
        raise NoReferencesError("You must specify at least one reference to add.")

    references = list(config.references)
    if not config.force:
        ensure_all_references_exist(references)
        references = convert_paths_to_relative(project_dir, references)

    added = add_project_references(project, config.framework, references)

    if added:
        project.save()
        LOG.info("Saved %s with %d new reference(s)", project.path, added)
    else:
        LOG.info("No new references; %s left untouched", project.path)

    return added
