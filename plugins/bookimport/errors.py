"""
Errors raised while resolving import directives.

Every failure is fatal for the whole run: the walker wraps the first one in a
`DirectiveResolutionError` carrying the location, and the MkDocs plugin turns
that into a `PluginError`.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class BookImportError(Exception):
    """Base class for all import resolution failures."""


class FileNotFound(BookImportError):
    def __init__(self, path: PathLike, reason: str = "file not found"):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class InvalidEncoding(BookImportError):
    def __init__(self, path: Optional[PathLike]):
        self.path = Path(path) if path is not None else None
        super().__init__(f"not valid UTF-8 text: {self.path or '<content>'}")


class TagError(BookImportError):
    """A tag region could not be located in a referenced file."""

    message = "tag error"

    def __init__(self, file: Optional[PathLike], tag: str, marker: str = "@import"):
        self.file = Path(file) if file is not None else None
        self.tag = tag
        self.marker = marker
        super().__init__(self.message.format(marker=marker, tag=tag) + f" in {self.file or '<content>'}")


class MissingStartTag(TagError):
    message = "could not find `{marker} start {tag}`"


class MissingEndTag(TagError):
    message = "could not find `{marker} end {tag}`"


class InvertedTagOrder(TagError):
    message = "`{marker} end {tag}` appears before `{marker} start {tag}`"


class DirectiveResolutionError(BookImportError):
    """
    A directive in a document node could not be resolved.

    Carries enough context (node, directive text, file and tag) to point the
    author at the exact location; the underlying error is kept in `cause`.
    """

    def __init__(self, node_name: str, directive, file: Path, cause: BookImportError):
        self.node_name = node_name
        self.directive = directive
        self.file = file
        self.tag = directive.tag
        self.cause = cause
        super().__init__(
            f'failed to resolve "{directive.text}" in "{node_name}" '
            f"(file: {file}, tag: {directive.tag}): {cause}"
        )
