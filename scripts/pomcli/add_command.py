"""The ``add`` command: append dependencies to a POM.

Loads (or creates) the POM, loads its parent for dependency management
lookups, rejects duplicates, resolves missing versions and writes the POM
back. Every check runs before the single write at the end, so a failed run
leaves the file untouched.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Union

from .coordinates import POM_FILENAME
from .duplicates import check_duplicates, coord_string
from .pom_models import (
    DEFAULT_GROUP_ID,
    DEFAULT_VERSION,
    Parent,
    PomModel,
    Scope,
)
from .pom_parser import effective_group_id, effective_version
from .pom_store import PomStore, XmlPomStore
from .resolver import VersionResolver
from .search import SolrSearch

logger = logging.getLogger(__name__)


def _aggregator_parent(pom_path: Path, store: PomStore) -> Optional[Parent]:
    """Return a parent reference to ``../pom.xml`` if that is a pom-packaged project."""
    candidate = pom_path.absolute().parent.parent / POM_FILENAME
    if not store.exists(candidate):
        return None
    aggregator = store.load(candidate)
    if aggregator.packaging != "pom":
        return None
    return Parent(
        group_id=effective_group_id(aggregator),
        artifact_id=aggregator.artifact_id,
        version=effective_version(aggregator),
    )


def new_pom(pom_path: Path, store: PomStore) -> PomModel:
    """Create the model of a POM that doesn't exist yet.

    The artifactId is the name of the current working directory. When the
    directory above the POM holds a pom-packaged project, it becomes the
    parent and groupId/version are inherited; otherwise they get defaults.
    """
    model = PomModel(artifact_id=Path.cwd().name)
    model.parent = _aggregator_parent(pom_path, store)
    if model.parent is None:
        model.group_id = DEFAULT_GROUP_ID
        model.version = DEFAULT_VERSION
    return model


def parent_pom_path(pom_path: Path, parent: Parent) -> Path:
    """Locate the parent POM from its ``relativePath``.

    The path is relative to the directory of ``pom_path``; ``pom.xml`` is
    appended when it names a directory.
    """
    path = pom_path.absolute().parent / parent.relative_path
    if path.is_dir() or path.suffix != ".xml":
        path = path / POM_FILENAME
    return path


def read_parent_pom(store: PomStore, pom_path: Path, model: PomModel) -> Optional[PomModel]:
    """Load the parent POM declared by ``model``, if any.

    Raises:
        OSError: If the declared parent POM cannot be read.
    """
    if model.parent is None:
        return None
    if not model.parent.relative_path:
        logger.debug("Parent %s has an empty relativePath, not reading it", model.parent.artifact_id)
        return None
    path = parent_pom_path(pom_path, model.parent)
    logger.debug("Reading parent POM %s", path)
    return store.load(path)


def existing_dependencies(model: PomModel) -> list:
    """Return the list new dependencies go into.

    A pom-packaged project only manages versions for its children, so its
    ``<dependencyManagement>`` is used (created if absent); any other
    packaging gets direct ``<dependencies>``.
    """
    if model.packaging != "pom":
        return model.dependencies
    if model.dep_management is None:
        model.dep_management = []
    return model.dep_management


def apply_scope(deps: list, scope: Optional[Scope]) -> list:
    """Set ``scope`` on every dependency; ``import`` also forces ``type=pom``.

    ``compile`` is Maven's default and is never written out.
    """
    if scope is None or scope == Scope.COMPILE:
        return deps
    dep_type = "pom" if scope == Scope.IMPORT else None
    return [
        dataclasses.replace(d, scope=scope.value, dep_type=dep_type or d.dep_type)
        for d in deps
    ]


def add_dependencies(
    pom_path: Union[str, Path],
    requests: list,
    scope: Optional[Union[Scope, str]] = None,
    *,
    store: Optional[PomStore] = None,
    search=None,
) -> list:
    """Add ``requests`` to the POM at ``pom_path``.

    Args:
        pom_path: POM to edit; created when it doesn't exist.
        requests: Dependencies to add, possibly without versions.
        scope: Scope applied to every added dependency.
        store: POM storage (defaults to the filesystem).
        search: Search index client (defaults to Maven Central).

    Returns:
        The dependencies as they were added.

    Raises:
        DuplicateDependencyError: If any request already exists in the target
            list or is repeated within ``requests``.
        VersionNotFoundError: If a version cannot be resolved.
        OSError: If the POM or its parent cannot be read or written.
    """
    pom_path = Path(pom_path)
    store = store or XmlPomStore()
    if scope is not None:
        scope = Scope(scope)

    if store.exists(pom_path):
        model = store.load(pom_path)
    else:
        logger.debug("%s does not exist. Creating a new one", pom_path)
        model = new_pom(pom_path, store)

    parent_pom = read_parent_pom(store, pom_path, model)

    existing = existing_dependencies(model)
    check_duplicates(requests, existing)

    owns_search = search is None
    if owns_search:
        search = SolrSearch()
    try:
        resolved = VersionResolver(search, parent_pom).resolve_all(list(requests))
    finally:
        if owns_search:
            search.close()

    deps = apply_scope(resolved, scope)
    existing.extend(deps)
    store.save(model, pom_path)

    for dep in deps:
        version = f":{dep.version}" if dep.version else ""
        logger.info("Added %s%s", coord_string(dep), version)
    return deps
