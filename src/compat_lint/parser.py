"""Tree-sitter parsers for JavaScript and TypeScript sources."""
import threading
from pathlib import PurePath

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from compat_lint.errors import MalformedSyntaxError

SUPPORTED_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

_local = threading.local()


def is_supported(file_path: str) -> bool:
    """Check whether a file has a JavaScript or TypeScript extension."""
    return PurePath(file_path.replace("\\", "/")).suffix.lower() in SUPPORTED_LANGUAGES


class LanguageParser:
    """Parser for one grammar (javascript, typescript, tsx)."""

    def __init__(self, language: str):
        """Initialize parser for given language.

        Args:
            language: One of 'javascript', 'typescript', 'tsx'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        if self.language == "javascript":
            lang = Language(tsjavascript.language())
        elif self.language == "typescript":
            lang = Language(tstypescript.language_typescript())
        elif self.language == "tsx":
            lang = Language(tstypescript.language_tsx())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse(self, source: bytes) -> Tree:
        return self.parser.parse(source)

    @classmethod
    def for_path(cls, file_path: str) -> "LanguageParser | None":
        """Return this thread's parser for the file's extension.

        tree-sitter parsers are not shared between threads, so each worker
        thread keeps its own instance per language.

        Args:
            file_path: Path to determine language from

        Returns:
            LanguageParser instance, or None if extension not supported
        """
        extension = PurePath(file_path.replace("\\", "/")).suffix.lower()
        language = SUPPORTED_LANGUAGES.get(extension)
        if language is None:
            return None

        parsers = getattr(_local, "parsers", None)
        if parsers is None:
            parsers = _local.parsers = {}
        if language not in parsers:
            parsers[language] = cls(language)
        return parsers[language]


def ensure_well_formed(tree: Tree, source: bytes, file_path: str) -> None:
    """Reject trees that tree-sitter could only build with error recovery.

    Raises:
        MalformedSyntaxError: Located at the first ERROR or missing node
    """
    root = tree.root_node
    if not root.has_error:
        return

    error_node = _first_error(root) or root
    line, column = node_position(error_node, source)
    raise MalformedSyntaxError(file_path, line, column)


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        # Only descend into subtrees that contain an error
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return None


def node_position(node: Node, source: bytes) -> tuple[int, int]:
    """1-based line and character column of a node's start.

    tree-sitter columns count bytes; columns here count characters so that
    non-ASCII text before the node does not shift the reported position.
    """
    row, byte_column = node.start_point
    line_start = node.start_byte - byte_column
    prefix = source[line_start : node.start_byte].decode("utf-8", errors="replace")
    return row + 1, len(prefix) + 1


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
