"""
Scanning of `{{#import <file>@<tag>}}` directives in markdown bodies.

Escaped directives (`\\{{#import ...}}` with the default escape character) are
matched too, so that they are consumed as a whole and can never be picked up
as live directives; they are flagged and left alone by the substitution step.
"""

import re
from dataclasses import dataclass
from typing import List

DEFAULT_KEYWORD = "import"
DEFAULT_ESCAPE_CHAR = "\\"

# Characters allowed in the file part and the tag part of a directive
FILE_CHARS = r"[a-zA-Z0-9\s_.\-/\\]+"
TAG_CHARS = r"[a-zA-Z0-9_.\-]+"


@dataclass(frozen=True)
class Directive:
    """
    One directive occurrence inside a body.

    `start`/`end` delimit the exact span `[start, end)` of `text` in the body,
    which keeps two textually identical directives distinct.
    """

    start: int
    end: int
    text: str
    file: str
    tag: str
    escaped: bool = False


class DirectiveScanner:
    """Finds directives in a body using a pattern compiled once per syntax."""

    def __init__(self, keyword: str = DEFAULT_KEYWORD, escape_char: str = DEFAULT_ESCAPE_CHAR):
        if not keyword:
            raise ValueError("directive keyword must not be empty")
        if len(escape_char) != 1:
            raise ValueError(f"escape character must be a single character, got {escape_char!r}")
        self.keyword = keyword
        self.escape_char = escape_char
        self.pattern = self._compile(keyword, escape_char)

    @staticmethod
    def _compile(keyword: str, escape_char: str) -> re.Pattern:
        body = r"\{{\{{\s*\#{kw}\s+(?P<{f}>{file})@(?P<{t}>{tag})\s*\}}\}}"
        kw = re.escape(keyword)
        escaped = re.escape(escape_char) + body.format(kw=kw, f="efile", t="etag", file=FILE_CHARS, tag=TAG_CHARS)
        live = body.format(kw=kw, f="file", t="tag", file=FILE_CHARS, tag=TAG_CHARS)
        # The escaped alternative comes first so it wins at the escape character
        return re.compile(f"(?P<escaped>{escaped})|{live}")

    def scan(self, body: str) -> List[Directive]:
        """Return every directive in `body`, escaped or not, in ascending order."""
        directives = []
        for match in self.pattern.finditer(body):
            escaped = match.group("escaped") is not None
            file = match.group("efile" if escaped else "file")
            tag = match.group("etag" if escaped else "tag")
            directives.append(
                Directive(
                    start=match.start(),
                    end=match.end(),
                    text=match.group(0),
                    file=file.strip(),
                    tag=tag,
                    escaped=escaped,
                )
            )
        return directives

    def unescaped(self, body: str) -> List[Directive]:
        return [d for d in self.scan(body) if not d.escaped]


DEFAULT_SCANNER = DirectiveScanner()


def scan(body: str, scanner: DirectiveScanner = DEFAULT_SCANNER) -> List[Directive]:
    return scanner.scan(body)
