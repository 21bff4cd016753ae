"""Source files parsed into syntax trees.

The tree engine sits behind ``GrammarProvider`` so any parser that offers the
``SyntaxNode`` shape can stand in for tree-sitter (tests use this to inject
a provider).
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import tree_sitter

from ..errors import SourceReadError, UnsupportedLanguageError
from ..languages import detect_language, language_for_path, support_for
from ..models import Language

logger = logging.getLogger(__name__)


class SyntaxNode(Protocol):
    """Minimal node interface used by the extractors (tree_sitter.Node fits)."""

    @property
    def type(self) -> str: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def start_point(self) -> tuple[int, int]: ...

    @property
    def end_point(self) -> tuple[int, int]: ...

    def child_by_field_name(self, name: str, /) -> SyntaxNode | None: ...


class GrammarProvider(Protocol):
    """Parses source bytes of a language into a root SyntaxNode."""

    def parse(self, language: Language, source: bytes) -> SyntaxNode:
        """Return the root node, or raise UnsupportedLanguageError."""
        ...


class TreeSitterGrammars:
    """GrammarProvider backed by the ``tree_sitter_<lang>`` grammar packages.

    One parser per language is created lazily and reused for the lifetime of
    this provider.
    """

    def __init__(self) -> None:
        self._parsers: dict[Language, tree_sitter.Parser] = {}

    def parser_for(self, language: Language) -> tree_sitter.Parser:
        """Get or create the parser for a language."""
        parser = self._parsers.get(language)
        if parser is not None:
            return parser

        support = support_for(language)
        if support is None:
            raise UnsupportedLanguageError(f"No grammar for language: {language.value}")
        try:
            mod = importlib.import_module(support.grammar_module)
            lang = tree_sitter.Language(mod.language())
        except (ImportError, AttributeError) as exc:
            raise UnsupportedLanguageError(
                f"Grammar module {support.grammar_module} is not available"
            ) from exc

        parser = tree_sitter.Parser(lang)
        self._parsers[language] = parser
        return parser

    def parse(self, language: Language, source: bytes) -> SyntaxNode:
        """Parse source bytes and return the root node."""
        return self.parser_for(language).parse(source).root_node


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A parsed source file (path, bytes, root node, language)."""

    path: Path
    source: bytes = field(repr=False)
    root: Any = field(repr=False)
    language: Language

    def text(self, node: SyntaxNode) -> str:
        """Source text spanned by a node."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def parse_source_file(path: str | Path, provider: GrammarProvider) -> SourceFile:
    """Read and parse one source file.

    The language comes from the extension, falling back to the content.
    Raises SourceReadError if the file cannot be read and
    UnsupportedLanguageError if no grammar applies.
    """
    p = Path(path)
    try:
        source = p.read_bytes()
    except OSError as exc:
        raise SourceReadError(f"Failed to read source file: {p}") from exc

    language = language_for_path(str(p))
    if language == Language.UNKNOWN:
        language = detect_language(source.decode("utf-8", errors="replace"))
    if language == Language.UNKNOWN:
        raise UnsupportedLanguageError(f"Could not detect language for: {p}")

    root = provider.parse(language, source)
    logger.debug("Parsed source file: %s (%d bytes, %s)", p, len(source), language.display_name)
    return SourceFile(path=p, source=source, root=root, language=language)
