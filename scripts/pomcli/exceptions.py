"""Custom exceptions for pomcli."""


class PomCliError(Exception):
    """Base exception for all pomcli errors."""


class InvalidFormatError(PomCliError):
    """Raised when a token is neither ``group:artifact[:version]`` nor an existing path."""


class UnresolvableCoordinateError(PomCliError):
    """Raised when a path argument does not yield discoverable coordinates."""


class DuplicateDependencyError(PomCliError):
    """Raised when requested artifacts already exist in the target dependency list."""

    def __init__(self, duplicates: list[str]):
        self.duplicates = duplicates
        super().__init__(f"Duplicate artifact(s): {', '.join(duplicates)}")


class VersionNotFoundError(PomCliError):
    """Raised when the search index has no version for a groupId:artifactId."""

    def __init__(self, group_id: str, artifact_id: str):
        self.group_id = group_id
        self.artifact_id = artifact_id
        super().__init__(f"No version found: '{group_id}:{artifact_id}'")
