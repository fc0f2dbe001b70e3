"""Errors raised while building the version timeline and resolving events."""


class WikiEventsError(Exception):
    """Base class for wiki event resolution failures."""


class WikiStructureError(WikiEventsError):
    """The page no longer has the table layout the parser expects."""


class DateParseError(WikiEventsError, ValueError):
    """Text could not be parsed as an absolute date-time."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Cannot parse date: {text!r}")


class UnknownVersionError(WikiEventsError):
    """A date phrase references a version missing from the timeline."""

    def __init__(self, version: str, phrase: str):
        self.version = version
        self.phrase = phrase
        super().__init__(f"Cannot find version: {version} (in phrase {phrase!r})")


class MalformedRowError(WikiEventsError):
    """An event row cannot be turned into an EventRecord."""

    def __init__(self, row_index: int, name: str, reason: str):
        self.row_index = row_index
        self.name = name
        self.reason = reason
        super().__init__(f"Malformed event row {row_index} ({name!r}): {reason}")
