"""Failure kinds reported by kmpscaffold. Each maps to a distinct CLI exit code."""


class ScaffoldError(Exception):
    kind = "ScaffoldError"
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidInputError(ScaffoldError):
    """Blank or malformed module name, base package, layout or config."""

    kind = "InvalidInput"
    exit_code = 2


class AlreadyExistsError(ScaffoldError):
    """The module directory is already present; nothing was touched."""

    kind = "AlreadyExists"
    exit_code = 3


class PathResolutionError(ScaffoldError):
    """The project root is missing or not a directory."""

    kind = "PathResolutionFailure"
    exit_code = 4


class WriteFailureError(ScaffoldError):
    """A directory or file could not be created. The cause is chained."""

    kind = "WriteFailure"
    exit_code = 5


class SettingsUpdateError(ScaffoldError):
    """The settings file could not be read or rewritten."""

    kind = "SettingsUpdateFailure"
    exit_code = 6
