from typing import Mapping, Sequence

from plugins.bookimport.directives import Directive


def apply(body: str, directives: Sequence[Directive], resolved: Mapping[Directive, str]) -> str:
    """
    Replace each live directive's span in `body` with its resolved text.

    Directives are replaced from the highest offset down, so a replacement
    never shifts the spans of directives that come before it in the body.
    Escaped directives are left exactly as written.
    """
    for directive in sorted(directives, key=lambda d: d.start, reverse=True):
        if directive.escaped:
            continue
        if body[directive.start : directive.end] != directive.text:
            raise ValueError(
                f"directive {directive.text!r} no longer found at [{directive.start}, {directive.end})"
            )
        body = body[: directive.start] + resolved[directive] + body[directive.end :]
    return body
