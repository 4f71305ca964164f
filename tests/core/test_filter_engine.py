import pytest

from codepicker.core.filter import FilterEngine, is_within
from codepicker.core.stats import Counter, Stats
from codepicker.models import EntryType, FilterCriteria, Language, LanguageRule

from conftest import fake_entry


def make_engine(known=(), **criteria) -> FilterEngine:
    """Helper function to build a FilterEngine with fresh stats."""
    criteria.setdefault('max_size', 10000)
    return FilterEngine(FilterCriteria(**criteria), set(known), Stats())


@pytest.mark.parametrize("path, directory, expected", [
    ("dir1/x.cc", "dir1", True),
    ("dir1", "dir1", True),
    ("dir1/sub/x.cc", "dir1", True),
    ("dir10/x.cc", "dir1", False),
    ("dir1x.cc", "dir1", False),
    ("dir1/x.cc", "dir1/", True),
    ("a/dir1/x.cc", "dir1", False),
])
def test_is_within_respects_directory_boundaries(path, directory, expected):
    assert is_within(path, directory) is expected


def test_tree_entries_are_never_eligible():
    engine = make_engine()
    assert engine.is_eligible(fake_entry("dir1", type=EntryType.TREE)) is False
    assert engine.is_eligible(fake_entry("sub", type=EntryType.COMMIT)) is False
    assert engine.stats.get(Counter.NOT_FILES) == 2


def test_blob_without_url_is_not_a_file():
    engine = make_engine()
    assert engine.is_eligible(fake_entry("a.cc", url=None)) is False
    assert engine.stats.get(Counter.NOT_FILES) == 1


@pytest.mark.parametrize("size", [None, 299, 1001])
def test_size_outside_bounds_is_rejected(size):
    engine = make_engine(min_size=300, max_size=1000)
    assert engine.is_eligible(fake_entry("a.java", size=size)) is False
    assert engine.stats.get(Counter.WRONG_SIZE) == 1


@pytest.mark.parametrize("size", [300, 500, 1000])
def test_size_bounds_are_inclusive(size):
    engine = make_engine(min_size=300, max_size=1000)
    assert engine.is_eligible(fake_entry("a.java", size=size)) is True


def test_include_dirs_match_on_directory_boundary():
    engine = make_engine(include_dirs=["dir1"])
    assert engine.is_eligible(fake_entry("dir1/x.cc")) is True
    assert engine.is_eligible(fake_entry("dir10/x.cc")) is False
    assert engine.is_eligible(fake_entry("x.cc")) is False
    assert engine.stats.get(Counter.EXCLUDED) == 2


def test_exclude_dirs_reject_entries_beneath_them():
    engine = make_engine(exclude_dirs=["third_party"])
    assert engine.is_eligible(fake_entry("third_party/lib.cc")) is False
    assert engine.is_eligible(fake_entry("third_party_tools/lib.cc")) is True
    assert engine.stats.get(Counter.EXCLUDED) == 1


def test_known_hashes_are_skipped():
    engine = make_engine(known={"shaf1.cc"})
    assert engine.is_eligible(fake_entry("f1.cc")) is False
    assert engine.is_eligible(fake_entry("f2.cc")) is True
    assert engine.stats.get(Counter.ALREADY_DOWNLOADED) == 1


def test_language_restriction_and_histogram():
    engine = make_engine(languages=frozenset({Language.JAVA}))
    assert engine.is_eligible(fake_entry("A.java")) is True
    assert engine.is_eligible(fake_entry("a.cpp")) is False
    assert engine.is_eligible(fake_entry("b.cpp")) is False

    assert engine.stats.get(Counter.WRONG_LANGUAGE) == 2
    # The histogram counts excluded languages too
    assert engine.stats.get(Counter.LANGUAGE, "cpp") == 2
    assert engine.stats.get(Counter.LANGUAGE, "java") == 1


@pytest.mark.parametrize("languages", [frozenset(), frozenset({Language.ALL, Language.GO})])
def test_unknown_language_rejected_even_without_restriction(languages):
    engine = make_engine(languages=languages)
    assert engine.is_eligible(fake_entry("README.md")) is False
    assert engine.is_eligible(fake_entry("main.rs")) is True
    assert engine.stats.get(Counter.WRONG_LANGUAGE) == 1
    assert engine.stats.get(Counter.LANGUAGE, "unknown") == 1


def test_rejections_follow_rule_order():
    """An entry failing several rules is counted under the first one only."""
    engine = make_engine(min_size=300, include_dirs=["src"], known={"shadocs/a.md"})
    assert engine.is_eligible(fake_entry("docs/a.md", size=10)) is False
    assert engine.stats.get(Counter.WRONG_SIZE) == 1
    assert engine.stats.get(Counter.EXCLUDED) == 0
    assert engine.stats.get(Counter.ALREADY_DOWNLOADED) == 0
    assert engine.stats.get(Counter.WRONG_LANGUAGE) == 0


def test_language_rules_override_size_and_directories():
    engine = make_engine(
        min_size=300,
        max_size=1000,
        include_dirs=["src"],
        rules={
            Language.JAVA: LanguageRule(min_size=0, max_size=50),
            Language.GO: LanguageRule(include_dirs=("cmd",), exclude_dirs=("cmd/gen",)),
        },
    )

    # java uses its own size range but the run-wide directories
    assert engine.is_eligible(fake_entry("src/A.java", size=20)) is True
    assert engine.is_eligible(fake_entry("src/B.java", size=500)) is False
    assert engine.is_eligible(fake_entry("lib/C.java", size=20)) is False
    # go uses its own directories but the run-wide size range
    assert engine.is_eligible(fake_entry("cmd/main.go", size=500)) is True
    assert engine.is_eligible(fake_entry("cmd/gen/x.go", size=500)) is False
    assert engine.is_eligible(fake_entry("src/y.go", size=500)) is False
    # languages without a rule keep the run-wide settings
    assert engine.is_eligible(fake_entry("src/a.cc", size=20)) is False

    stats = engine.stats
    assert stats.get(Counter.WRONG_SIZE, "java") == 1
    assert stats.get(Counter.WRONG_SIZE, "cpp") == 1
    assert stats.get(Counter.EXCLUDED, "java") == 1
    assert stats.get(Counter.EXCLUDED, "go") == 2
    assert stats.get(Counter.TREE_FILES, "go") == 3
    assert stats.get(Counter.MATCHING, "java") == 1


def test_filter_entries_partitions_by_language():
    engine = make_engine(min_size=50)
    entries = [
        fake_entry("src/main.py"),
        fake_entry("src/app.ts"),
        fake_entry("src/util.py"),
        fake_entry("src/tiny.py", size=10),
        fake_entry("src", type=EntryType.TREE),
        fake_entry("README.md"),
    ]

    result = engine.filter_entries(entries)

    assert [e.path for e in result.by_language[Language.PYTHON]] == ["src/main.py", "src/util.py"]
    assert [e.path for e in result.by_language[Language.TYPESCRIPT]] == ["src/app.ts"]
    assert result.total_files == 6
    assert result.eligible_files == 3
    assert result.excluded_files == 3
    assert engine.stats.get(Counter.TREE_FILES) == 6
    assert engine.stats.get(Counter.MATCHING) == 3


def test_log_skipped_logs_reasons(monkeypatch):
    messages = []
    monkeypatch.setattr(
        "codepicker.core.filter.logger.debug", lambda message: messages.append(message)
    )
    engine = FilterEngine(FilterCriteria(max_size=10), set(), Stats(), log_skipped=True)

    engine.is_eligible(fake_entry("big.cc", size=100))

    assert messages == ["Skipping big.cc: size 100"]
