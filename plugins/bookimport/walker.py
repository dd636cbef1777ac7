"""
Resolution of import directives across a tree of document nodes.

Each node is scanned, its live directives are read from disk relative to the
directory of the node's own source path, and the rewritten body is assigned
back to the node. The first failure aborts the whole walk.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Set, Union

from plugins.bookimport.directives import DEFAULT_SCANNER, Directive, DirectiveScanner
from plugins.bookimport.errors import BookImportError, DirectiveResolutionError, FileNotFound
from plugins.bookimport.substitution import apply
from plugins.bookimport.tags import DEFAULT_EXTRACTOR, TagExtractor

log = logging.getLogger("mkdocs.plugins.bookimport")


@dataclass
class DocumentNode:
    """
    A unit of documentation (chapter, page, section) in a document tree.

    `path` is relative to the base directory given to the walker; nodes
    without a source file (`path=None`) resolve imports against the base
    directory itself.
    """

    name: str
    body: str = ""
    path: Optional[str] = None
    children: List["DocumentNode"] = field(default_factory=list)


class BookImporter:
    def __init__(
        self,
        scanner: DirectiveScanner = DEFAULT_SCANNER,
        extractor: TagExtractor = DEFAULT_EXTRACTOR,
    ):
        self.scanner = scanner
        self.extractor = extractor
        # Every file read so far, used by the plugin to watch imports while serving
        self.referenced_files: Set[Path] = set()

    @staticmethod
    def resolution_dir(node: DocumentNode, base_dir: Union[str, Path]) -> Path:
        base_dir = Path(base_dir)
        if node.path is None:
            return base_dir
        return base_dir / PurePath(node.path).parent

    def resolve(self, node: DocumentNode, directive: Directive, directory: Path) -> str:
        file = directory / directive.file
        try:
            if PurePath(directive.file).is_absolute():
                raise FileNotFound(directive.file, "absolute import paths are not supported")
            content = self.extractor.read(file, directive.tag)
        except BookImportError as exc:
            raise DirectiveResolutionError(node.name, directive, file, exc) from exc
        self.referenced_files.add(file.resolve())
        log.debug(f"[bookimport] {node.name}: resolved {directive.text} from {file}")
        return content

    def process(self, node: DocumentNode, base_dir: Union[str, Path]) -> DocumentNode:
        """Resolve the directives of `node` alone, without descending."""
        directives = self.scanner.unescaped(node.body)
        if not directives:
            return node

        directory = self.resolution_dir(node, base_dir)
        resolved: Dict[Directive, str] = {}
        for directive in directives:
            resolved[directive] = self.resolve(node, directive, directory)

        node.body = apply(node.body, directives, resolved)
        log.debug(f"[bookimport] {node.name}: resolved {len(resolved)} directives")
        return node

    def walk(self, root: DocumentNode, base_dir: Union[str, Path]) -> DocumentNode:
        """Process `root` and all of its descendants in document (pre-)order."""
        stack = [root]
        while stack:
            node = stack.pop()
            log.debug(f"[bookimport] processing {node.name}")
            self.process(node, base_dir)
            stack.extend(reversed(node.children))
        return root


def walk(
    node: DocumentNode,
    base_dir: Union[str, Path],
    scanner: DirectiveScanner = DEFAULT_SCANNER,
    extractor: TagExtractor = DEFAULT_EXTRACTOR,
) -> DocumentNode:
    return BookImporter(scanner, extractor).walk(node, base_dir)
