import pytest

from pull_review_core.models import BlameRange, ChangedFile, FileBlame


def make_blame():
    """Blame shared by every mocked file: mockuser owns most lines, recently."""
    return FileBlame(
        ranges=(
            BlameRange(1, 10, 1, "mockuser"),
            BlameRange(11, 12, 10, "mockuser2"),
            BlameRange(13, 15, 2, "mockuser"),
            BlameRange(16, 16, 1, "mockuser2"),
            BlameRange(17, 25, 3, "mockuser"),
            BlameRange(25, 26, 9, "mockuser3"),
        ),
        line_count=26,
    )


def make_changed_files():
    return [
        ChangedFile("added_file.txt", "added", 999),
        ChangedFile("modified_file_1.txt", "modified", 1),
        ChangedFile("modified_file_2.txt", "modified", 2),
        ChangedFile("modified_file_3.txt", "modified", 3),
        ChangedFile("deleted_file.txt", "removed", 999),
    ]


@pytest.fixture
def blame():
    return make_blame()


@pytest.fixture
def changed_files():
    return make_changed_files()
