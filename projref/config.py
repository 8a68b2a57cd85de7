"""
Configuration model for projref.

The CLI constructs a Config instance and passes it down into the command
orchestration so behavior can be adjusted without relying on global
state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Config:
    """
    Options for a single "add project-to-project reference" run.

    project is None when no <PROJECT> argument was given; the locator
    then resolves it to the current working directory.
    """

    project: Optional[str] = None
    references: List[str] = field(default_factory=list)
    framework: Optional[str] = None
    force: bool = False
    verbosity: int = 0
