"""Maven POM parsing and XML helpers.

Reads ``pom.xml`` files into :class:`PomModel` instances, keeping the parsed
XML tree (comments included) so the writer can later append to it without
disturbing anything else in the file.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .pom_models import DEFAULT_RELATIVE_PATH, Dependency, Parent, PomModel

# XML namespace used by Maven POM files (POM model version 4.0.0).
POM_NS = "http://maven.apache.org/POM/4.0.0"
NS = {"m": POM_NS}

# Everything that may precede the root element: XML declaration, comments,
# processing instructions and a doctype.
_PROLOG_RE = re.compile(
    rb"\s*(?:<\?.*?\?>\s*|<!--.*?-->\s*|<!DOCTYPE[^>]*>\s*)*", re.DOTALL
)
_ENCODING_RE = re.compile(rb"""^<\?xml[^>]*?\sencoding\s*=\s*["']([A-Za-z][\w.-]*)["']""")
UTF8_BOM = b"\xef\xbb\xbf"


@dataclass
class PomSource:
    """The parsed document a :class:`PomModel` was read from.

    Attributes:
        tree: Comment-preserving element tree of the document.
        prolog: Raw text before the root element, written back verbatim.
        trailing_newline: Whether the original file ended with a newline.
        encoding: Encoding named in the XML declaration (UTF-8 when absent).
        bom: Whether the file started with a UTF-8 byte order mark.
    """
    tree: ET.ElementTree
    prolog: str = ""
    trailing_newline: bool = True
    encoding: str = "utf-8"
    bom: bool = False


def _find(el, tag, ns=NS):
    """Find a direct child XML element, trying with and without the Maven namespace.

    Args:
        el: Parent XML element to search within.
        tag: Tag name to look for (without namespace prefix).
        ns: Namespace mapping (defaults to Maven POM 4.0.0).

    Returns:
        The first matching child element, or ``None`` if not found.
    """
    result = el.find(f"m:{tag}", ns)
    if result is not None:
        return result
    return el.find(tag)


def _findall(el, tag, ns=NS):
    """Find all direct children named ``tag``, with or without the Maven namespace."""
    return list(el.findall(f"m:{tag}", ns)) + list(el.findall(tag))


def _text(el, tag, ns=NS):
    """Extract the text content of a child element.

    Args:
        el: Parent XML element.
        tag: Tag name of the child element.
        ns: Namespace mapping.

    Returns:
        Stripped text content, or ``None`` if the element doesn't exist or is empty.
    """
    child = _find(el, tag, ns)
    if child is not None and child.text:
        return child.text.strip()
    return None


def _parse_dependency(dep_el) -> Dependency:
    """Parse a ``<dependency>`` XML element into a Dependency dataclass.

    Extracts scope, optional flag, and any ``<exclusions>`` children.

    Args:
        dep_el: The ``<dependency>`` XML element.

    Returns:
        A populated Dependency instance.
    """
    optional_text = _text(dep_el, "optional")
    exclusions = []
    excl_el = _find(dep_el, "exclusions")
    if excl_el is not None:
        for ex in _findall(excl_el, "exclusion"):
            eg = _text(ex, "groupId")
            ea = _text(ex, "artifactId")
            if eg and ea:
                exclusions.append((eg, ea))
    return Dependency(
        group_id=_text(dep_el, "groupId"),
        artifact_id=_text(dep_el, "artifactId") or "",
        version=_text(dep_el, "version"),
        scope=_text(dep_el, "scope"),
        classifier=_text(dep_el, "classifier"),
        dep_type=_text(dep_el, "type"),
        optional=bool(optional_text) and optional_text.lower() == "true",
        exclusions=exclusions,
    )


def _parse_parent(parent_el) -> Parent:
    # An empty <relativePath/> is kept as "" (no local parent), unlike a
    # missing element which means Maven's default.
    rel_el = _find(parent_el, "relativePath")
    if rel_el is None:
        relative_path = DEFAULT_RELATIVE_PATH
    else:
        relative_path = (rel_el.text or "").strip()
    return Parent(
        group_id=_text(parent_el, "groupId"),
        artifact_id=_text(parent_el, "artifactId") or "",
        version=_text(parent_el, "version"),
        relative_path=relative_path,
    )


def _parse_dependency_list(container) -> list:
    if container is None:
        return []
    return [_parse_dependency(d) for d in _findall(container, "dependency")]


def model_from_tree(tree: ET.ElementTree) -> PomModel:
    """Build a PomModel from an already parsed POM document.

    Args:
        tree: Element tree whose root is the ``<project>`` element.

    Returns:
        A PomModel with ``source`` left unset.
    """
    root = tree.getroot()

    parent_el = _find(root, "parent")
    parent = _parse_parent(parent_el) if parent_el is not None else None

    dep_mgmt = None
    dm_el = _find(root, "dependencyManagement")
    if dm_el is not None:
        dep_mgmt = _parse_dependency_list(_find(dm_el, "dependencies"))

    return PomModel(
        group_id=_text(root, "groupId"),
        artifact_id=_text(root, "artifactId") or "",
        version=_text(root, "version"),
        packaging=_text(root, "packaging") or "jar",
        parent=parent,
        dependencies=_parse_dependency_list(_find(root, "dependencies")),
        dep_management=dep_mgmt,
        model_version=_text(root, "modelVersion") or "4.0.0",
    )


def parse_pom_bytes(data: bytes) -> PomModel:
    """Parse the raw bytes of a POM document into a PomModel.

    Comments inside the root element are kept in the tree so that a later
    save reproduces them. The declared encoding and a leading byte order
    mark are recorded so the document is written back the same way.

    Args:
        data: Content of a ``pom.xml`` file.

    Returns:
        A PomModel whose ``source`` holds the parsed document.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed.
    """
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    parser.feed(data)
    tree = ET.ElementTree(parser.close())

    bom = data.startswith(UTF8_BOM)
    if bom:
        data = data[len(UTF8_BOM):]
    match = _ENCODING_RE.match(data)
    encoding = match.group(1).decode("ascii") if match else "utf-8"
    prolog = _PROLOG_RE.match(data).group(0)

    model = model_from_tree(tree)
    model.source = PomSource(
        tree=tree,
        prolog=prolog.decode(encoding, errors="replace"),
        trailing_newline=data.endswith(b"\n"),
        encoding=encoding,
        bom=bom,
    )
    return model


def parse_pom(pom_path: Union[str, Path]) -> PomModel:
    """Parse a ``pom.xml`` file into a PomModel.

    Handles both namespaced and non-namespaced POM files.

    Args:
        pom_path: Filesystem path to the pom.xml file.

    Returns:
        A PomModel holding the declared coordinates, packaging, parent
        reference, dependencies and dependency management.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_pom_bytes(Path(pom_path).read_bytes())


def effective_group_id(model: PomModel) -> Optional[str]:
    """Return the declared groupId, falling back to the parent's."""
    if model.group_id:
        return model.group_id
    return model.parent.group_id if model.parent else None


def effective_version(model: PomModel) -> Optional[str]:
    """Return the declared version, falling back to the parent's."""
    if model.version:
        return model.version
    return model.parent.version if model.parent else None
