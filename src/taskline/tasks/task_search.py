# src/taskline/tasks/task_search.py

from __future__ import annotations

"""
Fuzzy search over a snapshot of tasks.

Each key is scored by an approximate substring match: the smallest
optimal-string-alignment distance (insert / delete / substitute / swap of
adjacent characters) between the query and any substring of the field,
divided by the query length. 0.0 is an exact hit, 1.0 is no match.
Where the hit sits in the field does not matter.

A task is a hit when at least one key scores <= threshold. Its overall score
is the weighted mean of the key scores (keys that miss count as 1.0).
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.4
DEFAULT_MIN_QUERY_LENGTH = 2


@dataclass(slots=True, frozen=True)
class SearchKey:
    name: str
    weight: float
    getter: Callable[[Task], str]


DEFAULT_KEYS: tuple[SearchKey, ...] = (
    SearchKey("name", 2.0, lambda t: t.name),
    SearchKey("category", 1.0, lambda t: t.category),
    SearchKey("priority", 1.0, lambda t: t.priority.value),
)


@dataclass(slots=True, frozen=True)
class SearchHit:
    task: Task
    score: float


def substring_distance(pattern: str, text: str) -> int:
    """
    Minimum OSA edit distance between `pattern` and any substring of `text`.

    Row 0 is all zeros so a match may start anywhere; the answer is the
    minimum of the last row so it may end anywhere.
    """
    m, n = len(pattern), len(text)
    if m == 0:
        return 0
    if n == 0:
        return m

    prev2: list[int] = []
    prev = [0] * (n + 1)
    for i in range(1, m + 1):
        cur = [i] + [0] * n
        pc = pattern[i - 1]
        for j in range(1, n + 1):
            cost = 0 if pc == text[j - 1] else 1
            best = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
            if i > 1 and j > 1 and pc == text[j - 2] and pattern[i - 2] == text[j - 1]:
                best = min(best, prev2[j - 2] + 1)
            cur[j] = best
        prev2, prev = prev, cur
    return min(prev)


def match_score(query: str, text: str) -> float:
    """Normalized score in [0, 1]; both sides are casefolded."""
    q = query.casefold()
    if not q:
        return 0.0
    dist = substring_distance(q, (text or "").casefold())
    return min(1.0, dist / len(q))


class TaskSearchIndex:
    """
    Search index built once from a snapshot of tasks.

    The index is never updated: start a new session (build a new index) to
    see tasks added or changed after the snapshot was taken.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        *,
        threshold: float = DEFAULT_THRESHOLD,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
        keys: Sequence[SearchKey] = DEFAULT_KEYS,
    ) -> None:
        if not keys:
            raise ValueError("at least one search key is required")
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._threshold = float(threshold)
        self._min_query_length = max(0, int(min_query_length))
        self._keys = tuple(keys)
        self._total_weight = sum(k.weight for k in self._keys)
        logger.debug(
            "Search index built tasks=%d threshold=%.2f min_len=%d",
            len(self._tasks),
            self._threshold,
            self._min_query_length,
        )

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def is_active(self, term: str) -> bool:
        """False when the query is too short to filter anything."""
        q = (term or "").strip()
        return bool(q) and len(q) >= self._min_query_length

    def score_task(self, task: Task, term: str) -> SearchHit | None:
        q = (term or "").strip()
        scores = [match_score(q, key.getter(task)) for key in self._keys]
        if not any(s <= self._threshold for s in scores):
            return None
        weighted = sum(s * k.weight for s, k in zip(scores, self._keys)) / self._total_weight
        return SearchHit(task=task, score=weighted)

    def search_with_scores(self, term: str) -> list[SearchHit]:
        """
        Hits sorted by score (best first). Inactive queries return every task
        with score 0.0 in snapshot order.
        """
        if not self.is_active(term):
            return [SearchHit(task=t, score=0.0) for t in self._tasks]

        hits = [h for h in (self.score_task(t, term) for t in self._tasks) if h is not None]
        hits.sort(key=lambda h: h.score)
        return hits

    def search(self, term: str) -> list[Task]:
        return [h.task for h in self.search_with_scores(term)]
