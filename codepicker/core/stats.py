"""
Run statistics: named counters and per-category histograms.
"""

import math
import threading
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import typer

from ..models import Language, derivable_languages


class Counter(Enum):
    """Counters reported at the end of a run."""

    TREE_FILES = "tree_files"
    DATABASE_FILES = "database_files"
    ALREADY_DOWNLOADED = "already_downloaded"
    MATCHING = "matching"
    FILES = "files"
    ERRORS = "errors"
    EXCLUDED = "excluded"
    NOT_FILES = "not_files"
    LANGUAGE = "language"
    WRONG_LANGUAGE = "wrong_language"
    WRONG_SIZE = "wrong_size"


COUNTER_LABELS: Dict[Counter, str] = {
    Counter.TREE_FILES: "Files in repository",
    Counter.DATABASE_FILES: "Files in database",
    Counter.ALREADY_DOWNLOADED: "Already downloaded",
    Counter.MATCHING: "Files matching all criteria",
    Counter.FILES: "Downloaded files",
    Counter.ERRORS: "Errors",
    Counter.EXCLUDED: "Files in excluded directories",
    Counter.NOT_FILES: "Not file entries",
    Counter.LANGUAGE: "Language",
    Counter.WRONG_LANGUAGE: "Filtered out by language",
    Counter.WRONG_SIZE: "Filtered out by size",
}

# Label column rounded up to a tab stop
COLUMN_WIDTH = math.ceil((max(map(len, COUNTER_LABELS.values())) + 2) / 8) * 8

# Per-language table: title and the histogram feeding each column
LANGUAGE_COLUMNS: List[Tuple[str, Counter]] = [
    ("Files", Counter.TREE_FILES),
    ("Matching", Counter.MATCHING),
    ("Downloaded", Counter.FILES),
    ("Bad dir", Counter.EXCLUDED),
    ("Bad size", Counter.WRONG_SIZE),
]
LANGUAGE_WIDTH = 16
TABLE_WIDTH = 12


def _categories(counter: Counter) -> List[str]:
    if counter is Counter.LANGUAGE:
        return [language.value for language in derivable_languages()]
    return []


class Stats:
    """
    Counters and histograms for one run.

    Created fresh at the start of a run and handed to every component
    that records decisions. Unknown counters and categories read as zero.
    """

    def __init__(self, languages: Iterable[Language] = ()):
        self._languages = frozenset(languages)
        self._counters: Dict[Counter, int] = defaultdict(int)
        self._histograms: Dict[Counter, Dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._lock = threading.Lock()

    def increment(self, counter: Counter, delta: int = 1) -> None:
        with self._lock:
            self._counters[counter] += delta

    def set(self, counter: Counter, value: int) -> None:
        with self._lock:
            self._counters[counter] = value

    def histogram(self, counter: Counter, category: str) -> None:
        with self._lock:
            self._histograms[counter][category] += 1

    def get(self, counter: Counter, category: Optional[str] = None) -> int:
        with self._lock:
            if category is not None:
                histogram = self._histograms.get(counter)
                return histogram.get(category, 0) if histogram else 0
            return self._counters.get(counter, 0)

    def _is_included_language(self, category: str) -> Optional[bool]:
        """None when no language restriction is configured."""

        if not self._languages or Language.ALL in self._languages:
            return None
        return Language(category) in self._languages

    def _style_value(self, counter: Counter) -> str:
        value = str(self.get(counter))
        if counter is Counter.ERRORS:
            return typer.style(value, fg=typer.colors.RED)
        return typer.style(value, fg=typer.colors.BRIGHT_WHITE)

    def _style_category(self, counter: Counter, category: str) -> str:
        value = str(self.get(counter, category))
        included = self._is_included_language(category)
        if included is True:
            return typer.style(value, fg=typer.colors.GREEN)
        if included is False:
            return typer.style(value, fg=typer.colors.RED)
        return typer.style(value, fg=typer.colors.BRIGHT_WHITE)

    def lines(self, styled: bool = False) -> List[str]:
        """Render every counter, and every category of categorized ones."""

        result = ["Statistics:"]
        for counter in Counter:
            label = f"{COUNTER_LABELS[counter]}: ".ljust(COLUMN_WIDTH)
            categories = _categories(counter)
            if categories:
                value = ""
            elif styled:
                value = self._style_value(counter)
            else:
                value = str(self.get(counter))
            result.append(f"{label}{value}".rstrip())

            for category in categories:
                category_label = f"    {category}: ".ljust(COLUMN_WIDTH)
                if styled:
                    category_value = self._style_category(counter, category)
                else:
                    category_value = str(self.get(counter, category))
                result.append(f"{category_label}{category_value}")
        return result

    def language_lines(self, styled: bool = False) -> List[str]:
        """
        Per-language breakdown of the tree: files seen, files matching,
        files downloaded and files rejected by directory or size.

        Only languages present in the tree are listed.
        """
        with self._lock:
            seen = dict(self._histograms.get(Counter.TREE_FILES, {}))
        languages = sorted(category for category, count in seen.items() if count)
        if not languages:
            return []

        result = ["Languages:".ljust(LANGUAGE_WIDTH) + "".join(
            title.rjust(TABLE_WIDTH) for title, _ in LANGUAGE_COLUMNS
        )]
        for category in languages:
            name = f"    {category}".ljust(LANGUAGE_WIDTH)
            if styled and self._is_included_language(category) is not False:
                name = typer.style(name, fg=typer.colors.GREEN)
            elif styled:
                name = typer.style(name, fg=typer.colors.BRIGHT_BLACK)
            values = "".join(
                str(self.get(counter, category)).rjust(TABLE_WIDTH)
                for _, counter in LANGUAGE_COLUMNS
            )
            result.append(f"{name}{values}")
        return result

    def print(self, echo: Callable[[str], None] = typer.echo) -> None:
        """Print the run summary; colors are stripped off a non-terminal."""

        for line in self.lines(styled=True) + self.language_lines(styled=True):
            echo(line)
