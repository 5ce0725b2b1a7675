"""Coordinate parsing.

Turns the tokens given on the command line into :class:`Dependency`
coordinates. A token is either ``groupId:artifactId[:version][:classifier]``
or a path to a project directory, a ``pom.xml`` or a jar whose embedded
Maven metadata names the artifact.
"""

import logging
import re
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from .exceptions import InvalidFormatError, UnresolvableCoordinateError
from .pom_models import Dependency, PomModel
from .pom_parser import effective_group_id, effective_version, parse_pom, parse_pom_bytes

logger = logging.getLogger(__name__)

_PART = r"[^:\s/\\]+"
_COORD_RE = re.compile(rf"^({_PART}):({_PART})(?::({_PART}))?(?::({_PART}))?$")
_QUERY_RE = re.compile(rf"^(?:({_PART}):)?({_PART})(?::({_PART}))?$")
_MAVEN_META_RE = re.compile(r"^META-INF/maven/[^/]+/[^/]+/pom\.(properties|xml)$")

POM_FILENAME = "pom.xml"


@dataclass(frozen=True)
class QuerySpec:
    """A search query for the artifact index.

    Attributes:
        group_id: groupId to match exactly, if any.
        artifact_id: artifactId to match exactly.
        version: version to match exactly, if any.
    """
    group_id: Optional[str]
    artifact_id: str
    version: Optional[str] = None

    def __str__(self) -> str:
        terms = []
        if self.group_id:
            terms.append(f'g:"{self.group_id}"')
        terms.append(f'a:"{self.artifact_id}"')
        if self.version:
            terms.append(f'v:"{self.version}"')
        return " AND ".join(terms)


def parse_query(token: str) -> QuerySpec:
    """Parse ``[groupId:]artifactId[:version]`` into a QuerySpec.

    Raises:
        InvalidFormatError: If the token has the wrong shape.
    """
    match = _QUERY_RE.match(token.strip())
    if not match:
        raise InvalidFormatError(f"Invalid format: '{token}'")
    group_id, artifact_id, version = match.groups()
    return QuerySpec(group_id, artifact_id, version)


def parse_dependency(token: str) -> Dependency:
    """Parse a DEPENDENCY argument of the ``add`` command.

    Args:
        token: ``groupId:artifactId[:version][:classifier]`` or a path to a
            project directory, a POM file or an archive.

    Returns:
        A Dependency carrying the coordinates. The version is left unset
        when the token doesn't name one.

    Raises:
        InvalidFormatError: If the token is neither a coordinate nor an
            existing path, including coordinates without a groupId.
        UnresolvableCoordinateError: If the path yields no coordinates.
    """
    match = _COORD_RE.match(token)
    if match:
        group_id, artifact_id, version, classifier = match.groups()
        return Dependency(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            classifier=classifier,
        )

    path = Path(token)
    if path.exists():
        return dependency_from_path(path)

    if _QUERY_RE.match(token):
        raise InvalidFormatError(f"Invalid format: missing groupId for '{token}'")
    raise InvalidFormatError(f"Invalid format: '{token}'")


def dependency_from_path(path: Path) -> Dependency:
    """Derive coordinates from a project directory, POM file or archive.

    Raises:
        UnresolvableCoordinateError: If no coordinates can be discovered.
    """
    if path.is_dir():
        pom = path / POM_FILENAME
        if not pom.is_file():
            raise UnresolvableCoordinateError(f"No {POM_FILENAME} found in '{path}'")
        return _dependency_from_pom(pom)
    if path.suffix == ".xml":
        return _dependency_from_pom(path)
    if zipfile.is_zipfile(path):
        return _dependency_from_archive(path)
    raise UnresolvableCoordinateError(f"Cannot determine coordinates of '{path}'")


def _from_model(model: PomModel, origin) -> Dependency:
    group_id = effective_group_id(model)
    if not group_id or not model.artifact_id:
        raise UnresolvableCoordinateError(f"'{origin}' does not declare groupId and artifactId")
    return Dependency(
        group_id=group_id,
        artifact_id=model.artifact_id,
        version=effective_version(model),
    )


def _dependency_from_pom(pom: Path) -> Dependency:
    try:
        model = parse_pom(pom)
    except ET.ParseError as e:
        raise UnresolvableCoordinateError(f"Cannot parse '{pom}': {e}") from e
    return _from_model(model, pom)


def _parse_properties(text: str) -> dict:
    """Parse the ``key=value`` lines of a Java properties file."""
    props = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        parts = re.split(r"\s*[=:]\s*", line, maxsplit=1)
        if len(parts) == 2:
            props[parts[0]] = parts[1]
    return props


def _pick_metadata(names: list, archive: Path) -> Optional[str]:
    """Choose the Maven metadata entry describing ``archive`` itself.

    Shaded jars embed metadata for every bundled artifact; the entry whose
    artifactId prefixes the archive's file name wins, else the first one.
    """
    if not names:
        return None
    for name in names:
        artifact_id = PurePosixPath(name).parent.name
        if archive.stem.startswith(artifact_id):
            return name
    return names[0]


def _dependency_from_archive(archive: Path) -> Dependency:
    with zipfile.ZipFile(archive) as zf:
        entries = [n for n in zf.namelist() if _MAVEN_META_RE.match(n)]
        props_name = _pick_metadata([n for n in entries if n.endswith(".properties")], archive)
        if props_name is not None:
            props = _parse_properties(zf.read(props_name).decode("utf-8", errors="replace"))
            if props.get("groupId") and props.get("artifactId"):
                logger.debug("Read coordinates of %s from %s", archive, props_name)
                return Dependency(
                    group_id=props["groupId"],
                    artifact_id=props["artifactId"],
                    version=props.get("version") or None,
                )
        pom_name = _pick_metadata([n for n in entries if n.endswith(".xml")], archive)
        data = zf.read(pom_name) if pom_name is not None else None

    if data is None:
        raise UnresolvableCoordinateError(f"No Maven metadata found in '{archive}'")
    try:
        model = parse_pom_bytes(data)
    except ET.ParseError as e:
        raise UnresolvableCoordinateError(f"Cannot parse {pom_name} in '{archive}': {e}") from e
    return _from_model(model, archive)
