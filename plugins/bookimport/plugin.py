r"""
An MkDocs plugin that replaces `{{#import <file>@<tag>}}` directives with the
region of `<file>` delimited by `@import start <tag>` / `@import end <tag>`.

    plugins:
      - bookimport:
          escape_char: "\\"
          watch_imports: true

Paths are relative to the markdown page that contains the directive. Prefix a
directive with the escape character to keep it verbatim in the output.
"""

import logging
from pathlib import Path

from mkdocs.config import config_options as c
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin

from plugins.bookimport.directives import DEFAULT_ESCAPE_CHAR, DEFAULT_KEYWORD, DirectiveScanner
from plugins.bookimport.errors import BookImportError
from plugins.bookimport.tags import DEFAULT_MARKER, TagExtractor
from plugins.bookimport.walker import BookImporter, DocumentNode

log = logging.getLogger("mkdocs.plugins.bookimport")


class BookImportPlugin(BasePlugin):
    config_scheme = (
        ("keyword", c.Type(str, default=DEFAULT_KEYWORD)),
        ("escape_char", c.Type(str, default=DEFAULT_ESCAPE_CHAR)),
        ("marker", c.Type(str, default=DEFAULT_MARKER)),
        ("watch_imports", c.Type(bool, default=True)),
    )

    def __init__(self):
        super().__init__()
        self.importer = None

    def on_config(self, config, **kwargs):
        try:
            scanner = DirectiveScanner(self.config["keyword"], self.config["escape_char"])
            extractor = TagExtractor(self.config["marker"])
        except ValueError as e:
            log.error(f"[bookimport] invalid plugin configuration: {e}")
            raise PluginError(f"[bookimport] invalid plugin configuration: {e}") from e
        self.importer = BookImporter(scanner, extractor)
        return config

    def on_page_markdown(self, markdown, page, config, files):
        if self.importer is None:
            self.on_config(config)

        src_path = page.file.src_path
        node = DocumentNode(name=src_path, body=markdown, path=src_path)
        try:
            self.importer.walk(node, config["docs_dir"])
        except BookImportError as e:
            raise PluginError(f"[bookimport] {e}") from e

        if node.body != markdown:
            log.debug(f"[bookimport] resolved imports in {src_path}")
        return node.body

    def on_serve(self, server, config, builder):
        """
        Watch imported files that live outside docs_dir.

        MkDocs calls this once, after the first build; files first imported by a
        later rebuild are only watched after restarting `mkdocs serve`.
        """
        if not self.config["watch_imports"] or self.importer is None:
            return server

        docs_dir = Path(config["docs_dir"]).resolve()
        for path in sorted(self.importer.referenced_files):
            # Files under docs_dir are already watched by MkDocs
            try:
                path.relative_to(docs_dir)
                continue
            except ValueError:
                pass
            log.debug(f"[bookimport] watching {path}")
            server.watch(str(path))
        return server
