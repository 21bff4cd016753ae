"""Language detection, scoring and per-language capabilities.

``detect_language`` runs ordered checks and returns the first category that
matches (Python, then Go, then Node.js, then file extension). It is not the
same as taking the best ``score_languages`` result; the scorer is an
independent multi-signal estimate.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import PurePath

from .models import LangScore, Language

MAX_SCORE = 100

_PY_SIGNS = ("Traceback (most recent call last)", 'File "', '.py", line')
_GO_SIGNS = ("panic:", "goroutine ", ".go:")
_NODE_HINTS = (".js:", ".ts:", "Error:", "TypeError:")

_SCORE_WEIGHTS: dict[Language, tuple[tuple[str, int], ...]] = {
    Language.PYTHON: (
        ("Traceback (most recent call last)", 50),
        ('File "', 20),
        ('.py", line', 30),
        ("ModuleNotFoundError", 20),
        ("ImportError", 15),
        ("AttributeError", 15),
        ("KeyError", 15),
    ),
    Language.GO: (
        ("panic:", 40),
        ("goroutine ", 30),
        (".go:", 20),
        ("+0x", 10),
        ("runtime.", 15),
    ),
    Language.NODE: (
        ("    at ", 25),
        (".js:", 20),
        (".ts:", 20),
        ("TypeError:", 20),
        ("ReferenceError:", 20),
        ("SyntaxError:", 15),
        ("node_modules", 10),
    ),
}


def _python_stdlib(path: str) -> bool:
    return "/lib/python" in path and not _python_third_party(path)


def _python_third_party(path: str) -> bool:
    return "/site-packages/" in path or "/dist-packages/" in path


def _go_stdlib(path: str) -> bool:
    return path.startswith("/usr/local/go/src/") or "GOROOT" in path


def _go_third_party(path: str) -> bool:
    return "/pkg/mod/" in path or "vendor/" in path


def _node_stdlib(path: str) -> bool:
    return "internal/" in path or path.startswith("node:")


def _node_third_party(path: str) -> bool:
    return "/node_modules/" in path or path.startswith("node_modules/")


@dataclass(frozen=True, slots=True)
class LanguageSupport:
    """Everything the pipeline needs to know about one language.

    The registry below is the only place that branches on language; adding a
    language means adding one record.
    """

    language: Language
    extensions: tuple[str, ...]
    grammar_module: str
    function_types: frozenset[str]
    call_types: frozenset[str]
    class_types: frozenset[str]
    import_types: frozenset[str]
    is_stdlib: Callable[[str], bool]
    is_third_party: Callable[[str], bool]
    test_globs: tuple[str, ...] = ()

    def is_test_path(self, path: str) -> bool:
        p = PurePath(path)
        if "tests" in p.parts[:-1]:
            return True
        return any(fnmatch(p.name, g) for g in self.test_globs)


_REGISTRY: dict[Language, LanguageSupport] = {
    Language.PYTHON: LanguageSupport(
        language=Language.PYTHON,
        extensions=(".py", ".pyw"),
        grammar_module="tree_sitter_python",
        function_types=frozenset({"function_definition"}),
        call_types=frozenset({"call"}),
        class_types=frozenset({"class_definition"}),
        import_types=frozenset({"import_statement", "import_from_statement"}),
        is_stdlib=_python_stdlib,
        is_third_party=_python_third_party,
        test_globs=("test_*.py", "*_test.py", "conftest.py"),
    ),
    Language.GO: LanguageSupport(
        language=Language.GO,
        extensions=(".go",),
        grammar_module="tree_sitter_go",
        function_types=frozenset({"function_declaration", "method_declaration"}),
        call_types=frozenset({"call_expression"}),
        class_types=frozenset(),
        import_types=frozenset({"import_declaration"}),
        is_stdlib=_go_stdlib,
        is_third_party=_go_third_party,
        test_globs=("*_test.go",),
    ),
    Language.NODE: LanguageSupport(
        language=Language.NODE,
        extensions=(".js", ".mjs", ".cjs", ".ts", ".tsx", ".jsx"),
        grammar_module="tree_sitter_javascript",
        function_types=frozenset({"function_declaration", "method_definition"}),
        call_types=frozenset({"call_expression"}),
        class_types=frozenset({"class_declaration"}),
        import_types=frozenset({"import_statement"}),
        is_stdlib=_node_stdlib,
        is_third_party=_node_third_party,
        test_globs=("*.test.*", "*.spec.*"),
    ),
}

SUPPORTED_LANGUAGES: Sequence[Language] = tuple(_REGISTRY)


def support_for(language: Language) -> LanguageSupport | None:
    """Return the capability record for a language (None for UNKNOWN)."""
    return _REGISTRY.get(language)


def language_for_path(path: str) -> Language:
    """Map a file path to a language by extension only."""
    suffix = PurePath(path).suffix.lower()
    for support in _REGISTRY.values():
        if suffix in support.extensions:
            return support.language
    return Language.UNKNOWN


def detect_language(text: str | None) -> Language:
    """Guess the language of a trace (or a file name) with ordered checks."""
    if not text:
        return Language.UNKNOWN

    if any(s in text for s in _PY_SIGNS):
        return Language.PYTHON
    if any(s in text for s in _GO_SIGNS):
        return Language.GO
    if "at " in text and any(s in text for s in _NODE_HINTS):
        return Language.NODE

    _, dot, ext = text.rpartition(".")
    if dot:
        ext = "." + ext.lower()
        for support in _REGISTRY.values():
            if ext in support.extensions:
                return support.language
    return Language.UNKNOWN


def score_languages(text: str | None) -> list[LangScore]:
    """Score text against every supported language (always one per language)."""
    text = text or ""
    out: list[LangScore] = []
    for lang, weights in _SCORE_WEIGHTS.items():
        score = sum(w for needle, w in weights if needle in text)
        out.append(LangScore(language=lang, score=min(score, MAX_SCORE)))
    return out


def is_stdlib_path(path: str | None, language: Language) -> bool:
    support = _REGISTRY.get(language)
    if not path or support is None:
        return False
    return support.is_stdlib(path)


def is_third_party_path(path: str | None, language: Language) -> bool:
    support = _REGISTRY.get(language)
    if not path or support is None:
        return False
    return support.is_third_party(path)
