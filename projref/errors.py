"""
Custom exception types used across projref.

Every failure the user can fix by changing the command line derives from
ProjRefError, so the CLI can report it and exit with status 1 while
letting genuine bugs surface with a traceback.
"""

from __future__ import annotations


class ProjRefError(Exception):
    """Base class for all projref specific errors."""


class MissingArgumentError(ProjRefError):
    """Raised when a required command-line argument is empty."""


class ProjectNotFoundError(ProjRefError):
    """Raised when no project file can be found at the given location."""


class AmbiguousProjectError(ProjRefError):
    """Raised when a directory holds more than one project file."""


class InvalidProjectError(ProjRefError):
    """Raised when a project file cannot be parsed as an MSBuild document."""


class NoReferencesError(ProjRefError):
    """Raised when no reference paths were passed."""


class ReferenceNotFoundError(ProjRefError):
    """Raised when one or more referenced projects do not exist on disk."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "\n".join(f"Reference `{path}` does not exist." for path in self.missing)
        )


class UsageError(ProjRefError):
    """Raised when the command line cannot be parsed."""
