"""Errors raised while loading content."""


class ContentError(Exception):
    """Base class for content loading errors."""


class ParseError(ContentError):
    """A single source could not be turned into a post."""

    def __init__(self, source_name: str, reason: str):
        self.source_name = source_name
        self.reason = reason
        super().__init__(f"{source_name}: {reason}")


class MalformedStructureError(ParseError):
    """Source lacks the ---/header/---/body layout."""


class RenderError(ParseError):
    """Markdown conversion of the body failed."""


class SourceReadError(ContentError):
    """A single source entry could not be read."""

    def __init__(self, source_name: str, reason: str):
        self.source_name = source_name
        self.reason = reason
        super().__init__(f"Cannot read {source_name}: {reason}")


class SourceEnumerationError(ContentError):
    """The content collection itself could not be listed."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Cannot list content in {location}: {reason}")
