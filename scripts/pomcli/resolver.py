"""Version resolution for dependencies added without a version.

Precedence:
    1. An explicit version is kept as is.
    2. A match in the parent POM's ``<dependencyManagement>`` (artifactId and
       classifier, any groupId) leaves the version unset so the managed
       version applies; the managed groupId fills a missing one.
    3. Otherwise the search index is asked for the latest version.
"""

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

from .coordinates import QuerySpec
from .duplicates import same_artifact
from .exceptions import VersionNotFoundError
from .pom_models import Dependency, PomModel
from .search import get_latest_version

logger = logging.getLogger(__name__)

MAX_WORKERS = 8


class VersionResolver:
    """Fills in versions of requested dependencies.

    Args:
        search: Search index client used for latest-version lookups.
        parent_pom: The parent POM, if the edited POM declares one.
    """

    def __init__(self, search, parent_pom: Optional[PomModel] = None):
        self.search = search
        self.parent_pom = parent_pom

    def _managed(self, dep: Dependency) -> Optional[Dependency]:
        if self.parent_pom is None or not self.parent_pom.dep_management:
            return None
        for managed in self.parent_pom.dep_management:
            if same_artifact(managed, dep, ignore_group_id=True):
                return managed
        return None

    def resolve(self, dep: Dependency) -> Dependency:
        """Return ``dep`` with its version resolved.

        The input is never modified; a copy is returned when anything changes.

        Raises:
            VersionNotFoundError: If the index has no version for the artifact.
        """
        if dep.version is not None:
            return dep

        managed = self._managed(dep)
        if managed is not None:
            logger.debug("%s is managed by the parent POM", dep.artifact_id)
            if dep.group_id is None:
                return dataclasses.replace(dep, group_id=managed.group_id)
            return dep

        latest = get_latest_version(self.search, QuerySpec(dep.group_id, dep.artifact_id))
        if latest is None:
            raise VersionNotFoundError(dep.group_id, dep.artifact_id)
        logger.debug("Latest version of %s:%s is %s", dep.group_id, dep.artifact_id, latest)
        return dataclasses.replace(dep, version=latest)

    def resolve_all(self, deps: list) -> list:
        """Resolve every dependency concurrently.

        All lookups run to completion before anything is reported. Results
        keep the order of ``deps``; if any lookup failed, the first failure
        in that order is raised and the other results are discarded.
        """
        if not deps:
            return []
        with ThreadPoolExecutor(max_workers=min(len(deps), MAX_WORKERS)) as executor:
            futures = [executor.submit(self.resolve, dep) for dep in deps]
            wait(futures)
        for future in futures:
            error = future.exception()
            if error is not None:
                raise error
        return [future.result() for future in futures]
