"""POM serialization.

Two paths lead to disk: a POM read from a file is written back from its
original element tree with only the new ``<dependency>`` elements spliced
in, indented like their neighbours; a POM synthesized in memory is rendered
from scratch as a conventional, four-space indented document.

The prolog (XML declaration, leading comments), the declared encoding and a
UTF-8 byte order mark are kept. ElementTree still normalizes some lexical
details of the elements it serializes: start tags whose attributes span
several lines (typically the ``<project>`` tag with ``xmlns``,
``xmlns:xsi`` and ``xsi:schemaLocation``) are written on one line, empty
elements become ``<x />``, and attribute values are double-quoted.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from .pom_models import DEFAULT_RELATIVE_PATH, Dependency, PomModel
from .pom_parser import POM_NS, UTF8_BOM, PomSource, _find, _findall

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = f"{POM_NS} https://maven.apache.org/xsd/maven-4.0.0.xsd"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
DEFAULT_INDENT = "    "

# Top-level elements that follow <dependencyManagement> and <dependencies>
# in Maven's canonical element order.
_AFTER_DEPENDENCIES = ("repositories", "pluginRepositories", "build", "reporting", "profiles")

# Write the POM namespace as the default namespace instead of ``ns0:``.
ET.register_namespace("", POM_NS)
ET.register_namespace("xsi", XSI_NS)


def _qname(root, tag: str) -> str:
    """Qualify ``tag`` with the namespace of ``root``, if it has one."""
    if root.tag.startswith("{"):
        return root.tag[: root.tag.index("}") + 1] + tag
    return tag


def _indent_unit(root) -> str:
    """Guess one level of indentation from the whitespace before the first child."""
    if root.text and "\n" in root.text and not root.text.strip():
        unit = root.text.rsplit("\n", 1)[1]
        if unit:
            return unit
    return DEFAULT_INDENT


def _insert_child(parent, index: int, child, level: int, unit: str):
    """Insert ``child`` into ``parent`` reusing the whitespace around its siblings.

    Args:
        parent: Element receiving the child.
        index: Position among the parent's children (``len(parent)`` appends).
        child: Element to insert.
        level: Nesting depth of ``parent`` (the root ``<project>`` is 0).
        unit: One level of indentation.
    """
    if index < len(parent):
        child.tail = parent.text if index == 0 else parent[index - 1].tail
    elif len(parent):
        last = parent[-1]
        child.tail = last.tail
        last.tail = parent[-2].tail if len(parent) > 1 else parent.text
    else:
        parent.text = "\n" + unit * (level + 1)
        child.tail = "\n" + unit * level
    parent.insert(index, child)


def _sub(parent, root, tag: str, text):
    el = ET.SubElement(parent, _qname(root, tag))
    el.text = text
    return el


def dependency_element(dep: Dependency, root, level: int, unit: str = DEFAULT_INDENT):
    """Build a ``<dependency>`` element for ``dep``.

    Children follow Maven's element order and are indented as if the
    element sat at nesting depth ``level``.

    Args:
        dep: The dependency to render.
        root: Root ``<project>`` element, used for namespace qualification.
        level: Nesting depth the element will be inserted at.
        unit: One level of indentation.

    Returns:
        A detached ``<dependency>`` element.
    """
    el = ET.Element(_qname(root, "dependency"))
    if dep.group_id:
        _sub(el, root, "groupId", dep.group_id)
    _sub(el, root, "artifactId", dep.artifact_id)
    if dep.version:
        _sub(el, root, "version", dep.version)
    if dep.dep_type:
        _sub(el, root, "type", dep.dep_type)
    if dep.classifier:
        _sub(el, root, "classifier", dep.classifier)
    if dep.scope:
        _sub(el, root, "scope", dep.scope)
    if dep.exclusions:
        excl_el = _sub(el, root, "exclusions", None)
        for group_id, artifact_id in dep.exclusions:
            ex = _sub(excl_el, root, "exclusion", None)
            _sub(ex, root, "groupId", group_id)
            _sub(ex, root, "artifactId", artifact_id)
    if dep.optional:
        _sub(el, root, "optional", "true")
    ET.indent(el, space=unit, level=level)
    return el


def _section_index(root) -> int:
    """Position where a new dependency section belongs among the root's children."""
    for i, child in enumerate(root):
        if not isinstance(child.tag, str):
            continue
        if child.tag.rsplit("}", 1)[-1] in _AFTER_DEPENDENCIES:
            return i
    return len(root)


def _ensure_child(parent, root, tag: str, index: int, level: int, unit: str):
    el = _find(parent, tag)
    if el is None:
        el = ET.Element(_qname(root, tag))
        _insert_child(parent, index, el, level, unit)
    return el


def _append_dependencies(container, deps: list, root, level: int, unit: str):
    existing = len(_findall(container, "dependency"))
    for dep in deps[existing:]:
        el = dependency_element(dep, root, level + 1, unit)
        _insert_child(container, len(container), el, level, unit)


def update_pom_tree(model: PomModel):
    """Splice dependencies added to ``model`` into its source tree.

    Entries beyond those already present in the XML are appended to
    ``<dependencies>`` and ``<dependencyManagement>``; sections are created
    when missing. Nothing else in the tree is touched.

    Args:
        model: A PomModel loaded from disk (``model.source`` is set).
    """
    root = model.source.tree.getroot()
    unit = _indent_unit(root)

    if model.dep_management is not None:
        dm_el = _find(root, "dependencyManagement")
        existing = 0
        if dm_el is not None and _find(dm_el, "dependencies") is not None:
            existing = len(_findall(_find(dm_el, "dependencies"), "dependency"))
        if len(model.dep_management) > existing:
            if dm_el is None:
                index = _section_index(root)
                deps_el = _find(root, "dependencies")
                if deps_el is not None:
                    index = min(index, list(root).index(deps_el))
                dm_el = _ensure_child(root, root, "dependencyManagement", index, 0, unit)
            dm_deps = _ensure_child(dm_el, root, "dependencies", len(dm_el), 1, unit)
            _append_dependencies(dm_deps, model.dep_management, root, 2, unit)

    deps_el = _find(root, "dependencies")
    existing = len(_findall(deps_el, "dependency")) if deps_el is not None else 0
    if len(model.dependencies) > existing:
        deps_el = _ensure_child(root, root, "dependencies", _section_index(root), 0, unit)
        _append_dependencies(deps_el, model.dependencies, root, 1, unit)


def new_pom_source(model: PomModel) -> PomSource:
    """Render a synthesized PomModel as a fresh POM document.

    Args:
        model: A PomModel that was not read from disk.

    Returns:
        A PomSource holding the new document.
    """
    root = ET.Element(f"{{{POM_NS}}}project")
    root.set(f"{{{XSI_NS}}}schemaLocation", SCHEMA_LOCATION)
    _sub(root, root, "modelVersion", model.model_version)
    if model.parent is not None:
        parent_el = _sub(root, root, "parent", None)
        if model.parent.group_id:
            _sub(parent_el, root, "groupId", model.parent.group_id)
        _sub(parent_el, root, "artifactId", model.parent.artifact_id)
        if model.parent.version:
            _sub(parent_el, root, "version", model.parent.version)
        if model.parent.relative_path != DEFAULT_RELATIVE_PATH:
            _sub(parent_el, root, "relativePath", model.parent.relative_path or None)
    if model.group_id:
        _sub(root, root, "groupId", model.group_id)
    _sub(root, root, "artifactId", model.artifact_id)
    if model.version:
        _sub(root, root, "version", model.version)
    if model.packaging != "jar":
        _sub(root, root, "packaging", model.packaging)

    tree = ET.ElementTree(root)
    source = PomSource(tree=tree, prolog=XML_DECLARATION)
    model.source = source
    update_pom_tree(model)
    ET.indent(tree, space=DEFAULT_INDENT)
    return source


def render_pom(model: PomModel) -> str:
    """Serialize ``model`` to POM text, updating or creating its source tree."""
    if model.source is None:
        new_pom_source(model)
    else:
        update_pom_tree(model)
    source = model.source
    body = ET.tostring(source.tree.getroot(), encoding="unicode")
    return source.prolog + body + ("\n" if source.trailing_newline else "")


def serialize_pom(model: PomModel) -> bytes:
    """Render ``model`` as bytes in the encoding its document declares.

    A leading UTF-8 byte order mark read from disk is written back.
    Characters the encoding cannot represent become character references.
    """
    text = render_pom(model)
    source = model.source
    data = text.encode(source.encoding, errors="xmlcharrefreplace")
    return (UTF8_BOM + data) if source.bom else data


def write_pom(model: PomModel, pom_path: Union[str, Path]):
    """Write ``model`` to ``pom_path``, overwriting the file.

    Args:
        model: The POM to write.
        pom_path: Destination file.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(pom_path)
    path.write_bytes(serialize_pom(model))
