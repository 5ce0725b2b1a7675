"""Maven data model classes.

Pure data structures representing the parts of a POM that pomcli reads and
edits. No behavior or imports from other pomcli modules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Defaults given to a freshly created POM that has no parent to inherit from.
DEFAULT_GROUP_ID = "unnamed"
DEFAULT_VERSION = "0.0.1-SNAPSHOT"
DEFAULT_RELATIVE_PATH = "../pom.xml"


class Scope(str, Enum):
    """Dependency scope accepted by the ``add`` command."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    PROVIDED = "provided"
    TEST = "test"
    IMPORT = "import"


@dataclass
class Dependency:
    """A Maven ``<dependency>`` element.

    Captures the GAV (group, artifact, version) coordinates along with
    scope, classifier, type, optional flag, and exclusion list.

    Attributes:
        group_id: Maven groupId, or ``None`` until it is inferred from the
            parent's dependency management.
        artifact_id: Maven artifactId (e.g. ``commons-lang3``).
        version: Explicit version string, or ``None`` if managed or not yet resolved.
        scope: Maven scope, or ``None`` when the element carries no ``<scope>``
            (Maven's implicit ``compile``).
        classifier: Optional classifier (e.g. ``sources``, ``tests``).
        dep_type: Optional packaging type (e.g. ``pom`` for BOM imports).
        optional: Whether the dependency is marked ``<optional>true</optional>``.
        exclusions: List of ``(groupId, artifactId)`` tuples to exclude.
    """
    artifact_id: str
    group_id: Optional[str] = None
    version: Optional[str] = None
    scope: Optional[str] = None
    classifier: Optional[str] = None
    dep_type: Optional[str] = None
    optional: bool = False
    exclusions: list = field(default_factory=list)


@dataclass
class Parent:
    """A Maven ``<parent>`` reference.

    Attributes:
        group_id: Parent groupId.
        artifact_id: Parent artifactId.
        version: Parent version.
        relative_path: Location of the parent POM relative to the child's
            directory. Maven defaults this to ``../pom.xml``.
    """
    group_id: Optional[str]
    artifact_id: str
    version: Optional[str] = None
    relative_path: str = DEFAULT_RELATIVE_PATH


@dataclass
class PomModel:
    """In-memory form of a single ``pom.xml``.

    Only the fields needed to add dependencies are modelled. ``source`` keeps
    the parsed XML tree of a POM read from disk so that saving it can leave
    every untouched element as it was.

    Attributes:
        artifact_id: Maven artifactId.
        group_id: Declared groupId (``None`` when inherited from the parent).
        version: Declared version (``None`` when inherited from the parent).
        packaging: Packaging type (jar, pom, war, ...).
        parent: Parent reference, if any.
        dependencies: Direct ``<dependencies>`` list.
        dep_management: ``<dependencyManagement>`` dependencies, or ``None``
            when the POM has no such section.
        model_version: The ``<modelVersion>`` element.
        source: Parsed XML tree this model was read from, if any.
    """
    artifact_id: str
    group_id: Optional[str] = None
    version: Optional[str] = None
    packaging: str = "jar"
    parent: Optional[Parent] = None
    dependencies: list = field(default_factory=list)
    dep_management: Optional[list] = None
    model_version: str = "4.0.0"
    source: Optional[Any] = field(default=None, repr=False, compare=False)
