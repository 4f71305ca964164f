"""
Project files: several repositories sampled in one run.

A project file is a JSON list with one object per repository::

    [
        {
            "repository": "owner/name",
            "revision": "main",
            "files": {
                "cpp": 20,
                "java": {"count": 5, "min_size": 100, "max_size": 4000,
                         "include": ["src"], "exclude": ["src/generated"]}
            }
        }
    ]

Only the languages listed under ``files`` are sampled, each with its own
quota and, in the object form, its own size and directory rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .download import FilterCriteria, LanguageRule
from .github import Repository
from .language import Language


_RULE_KEYS = frozenset({'count', 'min_size', 'max_size', 'include', 'exclude'})


def _positive_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{what} must be a positive integer, got {value!r}")
    return value


def _size(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValueError(f"{what} must be a non-negative number, got {value!r}")
    return value


def _directories(value: Any, what: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(d, str) for d in value):
        raise ValueError(f"{what} must be a list of directories")
    return tuple(value)


def _parse_language(name: str) -> Language:
    try:
        language = Language(name)
    except ValueError:
        raise ValueError(f"Unknown language {name!r}") from None
    if language in (Language.ALL, Language.UNKNOWN):
        raise ValueError(f"Language {name!r} cannot be given a quota")
    return language


def _parse_files(files: Any) -> Tuple[Dict[Language, int], Dict[Language, LanguageRule]]:
    if not isinstance(files, dict) or not files:
        raise ValueError("'files' must be a non-empty object of language quotas")

    quotas: Dict[Language, int] = {}
    rules: Dict[Language, LanguageRule] = {}
    for name, setting in files.items():
        language = _parse_language(name)
        if not isinstance(setting, dict):
            quotas[language] = _positive_int(setting, f"Quota for {name}")
            continue

        unknown = set(setting) - _RULE_KEYS
        if unknown:
            raise ValueError(f"Unknown keys for {name}: {', '.join(sorted(unknown))}")
        quotas[language] = _positive_int(setting.get('count'), f"Count for {name}")
        rules[language] = LanguageRule(
            min_size=_size(setting.get('min_size', 0), f"'min_size' of {name}"),
            max_size=_size(setting.get('max_size', float('inf')), f"'max_size' of {name}"),
            include_dirs=_directories(setting.get('include', []), f"'include' of {name}"),
            exclude_dirs=_directories(setting.get('exclude', []), f"'exclude' of {name}"),
        )
    return quotas, rules


@dataclass(frozen=True)
class ProjectEntry:
    """One repository of a project and the sampling rules for it."""

    repository: Repository
    revision: str
    criteria: FilterCriteria

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectEntry":
        if not isinstance(data, dict):
            raise ValueError("Project entry must be an object")
        if 'repository' not in data:
            raise ValueError("Project entry is missing 'repository'")

        revision = data.get('revision', 'master')
        if not isinstance(revision, str) or not revision:
            raise ValueError("'revision' must be a non-empty string")

        quotas, rules = _parse_files(data.get('files'))
        criteria = FilterCriteria(
            languages=frozenset(quotas),
            quotas=quotas,
            rules=rules,
        )
        return cls(
            repository=Repository.parse(str(data['repository'])),
            revision=revision,
            criteria=criteria,
        )


def parse_project(data: Any) -> List[ProjectEntry]:
    """Validate a decoded project file."""

    if not isinstance(data, list) or not data:
        raise ValueError("Project must be a non-empty list of repositories")

    entries = []
    for index, item in enumerate(data):
        try:
            entries.append(ProjectEntry.from_dict(item))
        except ValueError as e:
            raise ValueError(f"Project entry {index}: {e}") from None
    return entries


__all__ = [
    "ProjectEntry",
    "parse_project",
]
