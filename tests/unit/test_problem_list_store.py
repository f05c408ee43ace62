"""Unit tests for the on-disk problem list."""

from leettui.domain.models import Difficulty, ProblemStatus, ProblemSummary
from leettui.services import ProblemListStore

PROBLEMS = [
    ProblemSummary(
        id="26",
        title="Remove Duplicates from Sorted Array",
        slug="remove-duplicates-from-sorted-array",
        difficulty=Difficulty.EASY,
        status=ProblemStatus.SOLVED,
        ac_rate=61.2,
        tags=("array", "two-pointers"),
    ),
    ProblemSummary(
        id="4",
        title="Median of Two Sorted Arrays",
        slug="median-of-two-sorted-arrays",
        difficulty=Difficulty.HARD,
        paid_only=True,
    ),
]


def test_missing_file_loads_nothing(tmp_path):
    assert ProblemListStore(tmp_path / "problems_cache.json").load() is None


def test_saved_list_loads_back(tmp_path):
    store = ProblemListStore(tmp_path / "nested" / "problems_cache.json")

    store.save(PROBLEMS)
    loaded = store.load()

    assert loaded == PROBLEMS
    assert loaded[0].difficulty is Difficulty.EASY
    assert loaded[0].tags == ("array", "two-pointers")
    assert not (tmp_path / "nested" / "problems_cache.tmp").exists()


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "problems_cache.json"
    path.write_text('[{"id": "26", "title": "truncated')

    assert ProblemListStore(path).load() is None


def test_unwritable_location_is_logged_not_raised(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = ProblemListStore(blocker / "problems_cache.json")

    store.save(PROBLEMS)

    assert store.load() is None
