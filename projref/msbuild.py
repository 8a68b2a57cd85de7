"""
MSBuild project file access for projref.

This module is the only place that knows about the XML layout of a
project file. The rest of the tool talks to a ProjectDocument through a
narrow surface: load, add a reference if absent, count the additions,
and save.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import InvalidProjectError, ProjRefError

LOG = logging.getLogger(__name__)

MSBUILD_NAMESPACE = "http://schemas.microsoft.com/developer/msbuild/2003"
PROJECT_REFERENCE = "ProjectReference"
ITEM_GROUP = "ItemGroup"

_BOM = b"\xef\xbb\xbf"

# Legacy project files declare the MSBuild namespace as the default one;
# keep it unprefixed when writing them back.
ET.register_namespace("", MSBUILD_NAMESPACE)


def framework_condition(framework: Optional[str]) -> Optional[str]:
    """
    Return the MSBuild condition that restricts items to one target framework.
    """

    if not framework:
        return None
    return f"'$(TargetFramework)'=='{framework}'"


def _normalize_condition(condition: Optional[str]) -> str:
    return "".join((condition or "").split())


def _normalize_include(include: str) -> str:
    # Case only folds where the filesystem is case-insensitive.
    return os.path.normcase(include.replace("/", "\\"))


def _prolog_length(raw: bytes) -> int:
    """
    Return the offset of the root start tag.

    Everything before it (BOM, XML declaration, comments, processing
    instructions, DOCTYPE) is the prolog, which is written back verbatim.
    """

    pos = len(_BOM) if raw.startswith(_BOM) else 0
    while True:
        start = raw.find(b"<", pos)
        if start < 0:
            return 0
        if raw.startswith(b"<?", start):
            end = raw.find(b"?>", start + 2)
            pos = end + 2
        elif raw.startswith(b"<!--", start):
            end = raw.find(b"-->", start + 4)
            pos = end + 3
        elif raw.startswith(b"<!", start):
            end = raw.find(b">", start)
            subset = raw.find(b"[", start)
            if 0 <= subset < end:
                end = raw.find(b">", raw.find(b"]", subset))
            pos = end + 1
        else:
            return start
        if end < 0:
            return 0


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    if tag.startswith("{"):
        namespace, local = tag[1:].split("}", 1)
        return namespace, local
    return None, tag


def _indent_of(whitespace: Optional[str]) -> str:
    if not whitespace or "\n" not in whitespace:
        return ""
    return whitespace.rsplit("\n", 1)[1]


class ProjectDocument:
    """
    In-memory MSBuild project file.

    added_count tracks how many references were added since load, which
    tells the caller whether the document needs saving.
    """

    def __init__(
        self,
        path: Path,
        root: ET.Element,
        namespace: Optional[str] = None,
        prolog: bytes = b"",
        trailing_newline: bool = True,
    ):
        self.path = Path(path)
        self.added_count = 0
        self._root = root
        self._namespace = namespace
        self._prolog = prolog
        self._trailing_newline = trailing_newline

    @classmethod
    def load(cls, path: Path) -> "ProjectDocument":
        """
        Parse the project file at path.

        Comments and processing instructions inside the project element
        are kept in the tree; the prolog before it is kept as raw bytes.
        """

        path = Path(path)
        LOG.debug("Loading project file %s", path)
        try:
            raw = path.read_bytes()
            parser = ET.XMLParser(
                target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
            )
            parser.feed(raw)
            root = parser.close()
        except (ET.ParseError, OSError) as exc:
            LOG.debug("Failed to parse %s: %s", path, exc)
            raise InvalidProjectError(f"Project `{path}` is invalid.") from exc

        namespace, local = _split_tag(root.tag)
        if local != "Project":
            raise InvalidProjectError(f"Project `{path}` is invalid.")

        return cls(
            path,
            root,
            namespace=namespace,
            prolog=raw[: _prolog_length(raw)],
            trailing_newline=raw.endswith(b"\n"),
        )

    def _tag(self, local: str) -> str:
        if self._namespace:
            return f"{{{self._namespace}}}{local}"
        return local

    def _item_groups(self, framework: Optional[str]) -> List[ET.Element]:
        wanted = _normalize_condition(framework_condition(framework))
        return [
            group
            for group in self._root.findall(self._tag(ITEM_GROUP))
            if _normalize_condition(group.get("Condition")) == wanted
        ]

    def references(self, framework: Optional[str] = None) -> List[str]:
        """
        Return the Include values of ProjectReference items under the
        given framework condition, in document order.
        """

        found: List[str] = []
        for group in self._item_groups(framework):
            for item in group.findall(self._tag(PROJECT_REFERENCE)):
                include = item.get("Include")
                if include:
                    found.append(include)
        return found

    def has_reference(self, include: str, framework: Optional[str] = None) -> bool:
        wanted = _normalize_include(include)
        return any(
            _normalize_include(existing) == wanted
            for existing in self.references(framework)
        )

    def add_reference(self, include: str, framework: Optional[str] = None) -> bool:
        """
        Add a ProjectReference item unless an identical one already exists.

        Identical means the same Include path (either separator, case
        folded per os.path.normcase) inside an ItemGroup with the same framework
        condition. Returns True when the item was added.
        """

        if self.has_reference(include, framework):
            LOG.debug("Reference %s already present (framework=%s)", include, framework)
            return False

        group = self._find_reference_group(framework)
        if group is None:
            group = self._create_item_group(framework_condition(framework))

        item = ET.Element(self._tag(PROJECT_REFERENCE), {"Include": include})
        self._append_child(group, item)
        self.added_count += 1
        LOG.debug("Added reference %s (framework=%s)", include, framework)
        return True

    def _find_reference_group(self, framework: Optional[str]) -> Optional[ET.Element]:
        reference_tag = self._tag(PROJECT_REFERENCE)
        for group in self._item_groups(framework):
            items = [child for child in group if isinstance(child.tag, str)]
            if all(child.tag == reference_tag for child in items):
                return group
        return None

    def _create_item_group(self, condition: Optional[str]) -> ET.Element:
        attrib = {"Condition": condition} if condition else {}
        group = ET.Element(self._tag(ITEM_GROUP), attrib)

        children = list(self._root)
        group_tag = self._tag(ITEM_GROUP)
        last_group = None
        for index, child in enumerate(children):
            if child.tag == group_tag:
                last_group = index

        if last_group is None:
            self._append_child(self._root, group)
            return group

        previous = children[last_group]
        group.tail = previous.tail
        previous.tail = self._root.text
        self._root.insert(last_group + 1, group)
        return group

    def _append_child(self, parent: ET.Element, child: ET.Element) -> None:
        # Reuse the sibling whitespace so the saved file keeps its layout.
        if len(parent):
            last = parent[-1]
            child.tail = last.tail
            last.tail = parent.text
        else:
            unit = _indent_of(self._root.text) or "  "
            parent_indent = "" if parent is self._root else unit
            parent.text = "\n" + parent_indent + unit
            child.tail = "\n" + parent_indent
        parent.append(child)

    def save(self) -> None:
        """
        Write the document back to the file it was loaded from.
        """

        data = self._prolog + ET.tostring(self._root, encoding="unicode").encode("utf-8")
        if self._trailing_newline:
            data += b"\n"

        LOG.debug("Saving project file %s", self.path)
        try:
            self.path.write_bytes(data)
        except OSError as exc:
            raise ProjRefError(f"failed to save project `{self.path}`: {exc}") from exc
