"""Blame-weighted reviewer scoring.

A candidate's score estimates how much of the code touched by a pull request
they own: every blamed line counts toward its author, scaled down for older
commits and scaled by how much of the file the PR actually changes.
"""

from __future__ import annotations

import fnmatch
import logging
import math
import posixpath
from collections import defaultdict

from pull_review_core.models import ChangedFile, FileBlame, ReviewerCandidate, ReviewPolicy

logger = logging.getLogger(__name__)

DEFAULT_HALF_LIFE = 10.0

# Binary assets: GitHub returns no blame ranges for them.
BINARY_EXTENSIONS = frozenset(
    ".png .jpg .jpeg .gif .ico .webp .bmp .pdf .woff .woff2 .ttf .otf .mp4 .mp3 .wav .zip .tar .gz .7z .jar".split()
)

# Generated files. Their blame names whoever last ran the generator, not an owner.
GENERATED_FILENAMES = frozenset({"package-lock.json", "npm-shrinkwrap.json", "pnpm-lock.yaml", "go.sum"})
GENERATED_SUFFIXES = (".lock", ".min.js", ".min.css", ".map", ".snap", ".pb.go", "_pb2.py")


def has_useful_blame(filename: str) -> bool:
    """False for binary assets and generated files."""
    basename = posixpath.basename(filename)
    if basename in GENERATED_FILENAMES:
        return False
    lowered = basename.lower()
    if lowered.endswith(GENERATED_SUFFIXES):
        return False
    return posixpath.splitext(lowered)[1] not in BINARY_EXTENSIONS


def is_blacklisted(filename: str, patterns) -> bool:
    """Match ``filename`` against the policy's ``file_blacklist``.

    A pattern is an fnmatch glob tried on the full path and on the basename
    (``src/gen/*.py``, ``*.md``), or a directory that excludes its whole tree
    wherever it appears (``vendor/``, ``docs``, ``src/generated``).
    """
    basename = posixpath.basename(filename)
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern) or fnmatch.fnmatch(basename, pattern):
            return True
        directory = pattern.strip("/")
        if directory and f"/{directory}/" in f"/{filename}":
            return True
    return False


def is_scorable(file: ChangedFile) -> bool:
    """Only files with current content the PR touched carry ownership signal.

    Deleted files have nothing left to blame; an added file counts only when
    it has a body.
    """
    if file.status == "modified":
        return True
    return file.status == "added" and file.change_count > 0


def select_blame_targets(changed_files: list[ChangedFile], policy: ReviewPolicy) -> list[ChangedFile]:
    """Pick the files worth a blame query, largest change first, capped at policy.max_files."""
    targets = [
        f
        for f in changed_files
        if is_scorable(f) and has_useful_blame(f.filename) and not is_blacklisted(f.filename, policy.file_blacklist)
    ]
    targets.sort(key=lambda f: (-f.change_count, f.filename))
    return targets[: policy.max_files]


def recency_weight(age, half_life: float = DEFAULT_HALF_LIFE) -> float:
    """Weight of a blame range by age: 1.0 when new, 0.5 at ``half_life``, never reaching 0."""
    try:
        age = float(age)
    except (TypeError, ValueError):
        age = 0.0
    if not math.isfinite(age) or age < 0:
        age = 0.0
    return 1.0 / (1.0 + age / half_life)


def file_weight(file: ChangedFile, blame: FileBlame) -> float:
    """Fraction of the file's current lines the PR changes, capped at 1."""
    span = blame.line_count
    if span <= 0:
        return 0.0
    return min(max(file.change_count, 0), span) / span


def score(
    changed_files: list[ChangedFile],
    blame_by_file: dict[str, FileBlame],
    pr_author: str | None,
    half_life: float = DEFAULT_HALF_LIFE,
) -> list[ReviewerCandidate]:
    """Accumulate ownership scores across files and rank the candidates.

    The PR author is dropped, as is anyone whose score ends at zero. Ties on
    score are broken by login so identical input always ranks identically.
    """
    totals: dict[str, float] = defaultdict(float)

    for file in changed_files:
        if not is_scorable(file):
            continue
        blame = blame_by_file.get(file.filename) or FileBlame()
        weight = file_weight(file, blame)
        if weight <= 0:
            continue
        for r in blame.ranges:
            contribution = r.line_count * recency_weight(r.age, half_life) * weight
            if not math.isfinite(contribution) or contribution <= 0:
                continue
            totals[r.author_login] += contribution

    if pr_author:
        totals.pop(pr_author, None)

    candidates = [ReviewerCandidate(login=login, score=s) for login, s in totals.items() if s > 0]
    candidates.sort(key=lambda c: (-c.score, c.login))
    logger.debug("Scored candidates: %s", ", ".join(f"{c.login}={c.score:.3f}" for c in candidates))
    return candidates
