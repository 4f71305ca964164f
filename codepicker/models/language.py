"""
Language tagging for repository files.
"""

from __future__ import annotations

import posixpath
from enum import Enum
from typing import Dict, List


class Language(Enum):
    """Languages a file can be tagged with."""

    ALL = "all"             # Configuration wildcard, never derived from a path
    CPP = "cpp"
    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GO = "go"
    RUST = "rust"
    UNKNOWN = "unknown"


_EXTENSIONS: Dict[str, Language] = {
    **dict.fromkeys(
        ('.cpp', '.cc', '.c', '.h', '.hpp', '.cxx', '.hxx', '.c++', '.h++',
         '.hh', '.hcc', '.inl', '.ipp', '.tcc', '.tpp', '.txx'),
        Language.CPP,
    ),
    '.java': Language.JAVA,
    '.py': Language.PYTHON,
    **dict.fromkeys(('.mjs', '.js', '.cjs', '.jsx'), Language.JAVASCRIPT),
    **dict.fromkeys(('.ts', '.tsx'), Language.TYPESCRIPT),
    '.go': Language.GO,
    '.rs': Language.RUST,
}


def language_for_path(path: str) -> Language:
    """Derive the language of a file from its extension."""

    return _EXTENSIONS.get(posixpath.splitext(path)[1], Language.UNKNOWN)


def derivable_languages() -> List[Language]:
    """Every language ``language_for_path`` can return."""

    return [language for language in Language if language is not Language.ALL]


__all__ = [
    "Language",
    "language_for_path",
    "derivable_languages",
]
