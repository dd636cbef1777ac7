"""
Extraction of tagged regions from referenced files.

A region is delimited by two marker lines:

    # @import start book-section
    ... imported lines ...
    # @import end book-section

Only the lines strictly between the markers are returned. Anything around the
marker on its own line (comment leaders, `-->` and so on) is ignored.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from plugins.bookimport.errors import (
    FileNotFound,
    InvalidEncoding,
    InvertedTagOrder,
    MissingEndTag,
    MissingStartTag,
)

log = logging.getLogger("mkdocs.plugins.bookimport")

DEFAULT_MARKER = "@import"

# A tag token ends where the tag character class ends; `foo` must not match `foo-bar`,
# but a comment closer glued to the tag (`foo-->`) still ends it
TAG_BOUNDARY = r"(?![a-zA-Z0-9_.]|-(?!->))"


def detect_separator(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


class TagExtractor:
    """Locates `<marker> start <tag>` / `<marker> end <tag>` regions."""

    def __init__(self, marker: str = DEFAULT_MARKER):
        if not marker or not marker.strip():
            raise ValueError("tag marker must not be empty")
        self.marker = marker

    def _marker_regex(self, kind: str, tag: str) -> re.Pattern:
        return re.compile(rf"{re.escape(self.marker)}\s+{kind}\s+{re.escape(tag)}{TAG_BOUNDARY}")

    def extract(self, content: Union[bytes, str], tag: str, path: Optional[Path] = None) -> str:
        """
        Return the lines between the start and end markers of `tag`.

        Args:
            content: Raw file content; bytes are decoded as UTF-8.
            tag: Tag name to look for.
            path: Path of the file, only used for error reporting.

        Raises:
            InvalidEncoding: if `content` is not valid UTF-8.
            MissingStartTag / MissingEndTag: if a marker line is absent.
            InvertedTagOrder: if the end marker precedes the start marker.
        """
        if isinstance(content, bytes):
            try:
                text = content.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise InvalidEncoding(path) from exc
        else:
            text = content
        text = text.lstrip("\ufeff")

        sep = detect_separator(text)
        lines = text.split(sep)

        start_re = self._marker_regex("start", tag)
        end_re = self._marker_regex("end", tag)
        start = next((i for i, line in enumerate(lines) if start_re.search(line)), None)
        end = next((i for i, line in enumerate(lines) if end_re.search(line)), None)

        if start is None:
            raise MissingStartTag(path, tag, self.marker)
        if end is None:
            raise MissingEndTag(path, tag, self.marker)
        if end <= start:
            raise InvertedTagOrder(path, tag, self.marker)

        log.debug(f"[bookimport] tag '{tag}' spans lines {start + 1}-{end + 1} of {path or '<content>'}")
        return sep.join(lines[start + 1 : end])

    def read(self, path: Path, tag: str) -> str:
        """Read `path` from disk and extract `tag` from it."""
        path = Path(path)
        try:
            if not path.is_file():
                raise FileNotFound(path)
            content = path.read_bytes()
        except OSError as exc:
            raise FileNotFound(path, exc.strerror or "cannot read file") from exc
        return self.extract(content, tag, path)


DEFAULT_EXTRACTOR = TagExtractor()


def extract(
    content: Union[bytes, str],
    tag: str,
    path: Optional[Path] = None,
    marker: str = DEFAULT_MARKER,
) -> str:
    extractor = DEFAULT_EXTRACTOR if marker == DEFAULT_MARKER else TagExtractor(marker)
    return extractor.extract(content, tag, path)
