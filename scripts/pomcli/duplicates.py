"""Artifact identity and duplicate detection.

Two dependencies name the same artifact when groupId, artifactId and
classifier agree; version and scope play no part. Dependency management
lookups compare the same way but skip the groupId.
"""

from .exceptions import DuplicateDependencyError
from .pom_models import Dependency


def same_artifact(d1: Dependency, d2: Dependency, ignore_group_id: bool = False) -> bool:
    """Check whether two dependencies refer to the same artifact.

    Args:
        d1: First dependency.
        d2: Second dependency.
        ignore_group_id: Compare only artifactId and classifier.

    Returns:
        ``True`` if the identities match.
    """
    if not ignore_group_id and d1.group_id != d2.group_id:
        return False
    return d1.artifact_id == d2.artifact_id and d1.classifier == d2.classifier


def coord_string(dep: Dependency) -> str:
    """Format ``dep`` as ``groupId:artifactId[:classifier]``."""
    coord = f"{dep.group_id}:{dep.artifact_id}"
    if dep.classifier:
        coord += f":{dep.classifier}"
    return coord


def find_duplicates(requested: list, existing: list) -> list:
    """Return the requested dependencies that would appear twice.

    A request is a duplicate when it matches an existing dependency or a
    request earlier in the same batch.

    Args:
        requested: Dependencies about to be added.
        existing: Dependencies already in the target list.

    Returns:
        The offending requested entries, in request order.
    """
    duplicates = []
    for i, c in enumerate(requested):
        if any(same_artifact(c, d) for d in list(existing) + requested[:i]):
            duplicates.append(c)
    return duplicates


def check_duplicates(requested: list, existing: list):
    """Raise if any requested dependency already exists or is repeated.

    Raises:
        DuplicateDependencyError: Listing every offending coordinate.
    """
    duplicates = find_duplicates(requested, existing)
    if duplicates:
        raise DuplicateDependencyError([coord_string(d) for d in duplicates])
