"""Rundeck notifier exception hierarchy.

All notifier-specific exceptions inherit from NotifierError.
"""


class NotifierError(Exception):
    """Base exception for all notifier errors."""


class OptionsParseError(NotifierError):
    """Raised when a job options blob cannot be parsed.

    Named OptionsParseError (not ParseError) to avoid confusion with
    xml.etree.ElementTree.ParseError used by the Rundeck client.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class DuplicateBadgeError(NotifierError):
    """Raised when a build already carries an execution badge."""

    def __init__(self, project: str, number: int) -> None:
        self.project = project
        self.number = number
        super().__init__(
            f"Build {project} #{number} already has a RunDeck execution badge"
        )
