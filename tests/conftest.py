"""Shared fixtures: in-memory collaborators for the recalculation engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any

import pytest

from domain.common import MatchRecord, MatchStatus, RatingSnapshot, Team
from domain.errors import MissingUserError
from domain.pipeline import RecalcSummary, recalculate_ratings
from domain.protocol import SetMatchUserIds, UpdateProfile, UpsertLedgerEntry, WriteOp
from domain.ratings.calculator import RatingParameters


class InMemoryMatchSource:
    def __init__(self, *, reverse_pages: bool = False) -> None:
        self.matches: dict[str, MatchRecord] = {}
        self.user_ids: dict[str, tuple[str, ...]] = {}
        self.reverse_pages = reverse_pages

    def add(self, *matches: MatchRecord) -> None:
        for match in matches:
            self.matches[match.match_id] = match

    def remove(self, match_id: str) -> MatchRecord:
        return self.matches.pop(match_id)

    def fetch_completed_since(self, lower_bound: int, *, limit: int) -> list[MatchRecord]:
        eligible = sorted(
            (
                match
                for match in self.matches.values()
                if match.completed_at is not None
                and match.completed_at >= lower_bound
                and match.status.is_terminal
            ),
            key=lambda match: (match.completed_at, match.match_id),
        )[:limit]
        if self.reverse_pages:
            eligible.reverse()
        return eligible


class InMemoryLedger:
    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], RatingSnapshot] = {}
        self.lookups: list[tuple[str, int]] = []

    def upsert(self, snapshot: RatingSnapshot) -> None:
        self.entries[(snapshot.user_id, snapshot.match_id)] = replace(snapshot)

    def latest_before(self, user_id: str, timestamp: int) -> RatingSnapshot | None:
        self.lookups.append((user_id, timestamp))
        candidates = [
            entry
            for (entry_user, _), entry in self.entries.items()
            if entry_user == user_id and entry.timestamp < timestamp
        ]
        if not candidates:
            return None
        latest = max(candidates, key=lambda entry: (entry.timestamp, entry.match_id))
        return replace(latest)

    def highest_non_provisional(self, user_id: str) -> float | None:
        ratings = [
            entry.rating
            for (entry_user, _), entry in self.entries.items()
            if entry_user == user_id and not entry.provisional
        ]
        return max(ratings) if ratings else None

    def delete_for_match(self, match_id: str) -> int:
        keys = [key for key in self.entries if key[1] == match_id]
        for key in keys:
            del self.entries[key]
        return len(keys)


class InMemoryProfiles:
    def __init__(self) -> None:
        self.profiles: dict[str, dict[str, Any]] = {}

    def create(self, *user_ids: str) -> None:
        for user_id in user_ids:
            self.profiles.setdefault(user_id, {})

    def update_stats(self, user_id: str, fields: dict[str, Any]) -> None:
        if user_id not in self.profiles:
            raise MissingUserError(user_id)
        self.profiles[user_id].update(fields)


class InMemoryCursor:
    def __init__(self, timestamp: int | None = None) -> None:
        self.timestamp = timestamp
        self.writes: list[int] = []

    def get(self) -> int | None:
        return self.timestamp

    def replace(self, timestamp: int) -> None:
        self.timestamp = timestamp
        self.writes.append(timestamp)

    def clear(self) -> None:
        self.timestamp = None


class InMemoryBatchWriter:
    def __init__(
        self,
        *,
        ledger: InMemoryLedger,
        profiles: InMemoryProfiles,
        matches: InMemoryMatchSource,
    ) -> None:
        self.ledger = ledger
        self.profiles = profiles
        self.matches = matches
        self._ops: list[WriteOp] = []
        self.committed: list[WriteOp] = []

    @property
    def pending(self) -> int:
        return len(self._ops)

    def enqueue(self, op: WriteOp) -> None:
        self._ops.append(op)

    def commit(self) -> int:
        ops = self._ops[:]
        self._ops.clear()
        for op in ops:
            if isinstance(op, UpsertLedgerEntry):
                self.ledger.upsert(op.snapshot)
            elif isinstance(op, UpdateProfile):
                self.profiles.update_stats(op.user_id, op.fields)
            elif isinstance(op, SetMatchUserIds):
                self.matches.user_ids[op.match_id] = op.user_ids
            self.committed.append(op)
        return len(ops)


class RecalcHarness:
    """Wires the in-memory collaborators into ``recalculate_ratings``."""

    def __init__(self, params: RatingParameters | None = None, *, reverse_pages: bool = False) -> None:
        self.params = params or RatingParameters()
        self.matches = InMemoryMatchSource(reverse_pages=reverse_pages)
        self.ledger = InMemoryLedger()
        self.profiles = InMemoryProfiles()
        self.cursor = InMemoryCursor()
        self.writer = InMemoryBatchWriter(
            ledger=self.ledger,
            profiles=self.profiles,
            matches=self.matches,
        )

    def add_matches(self, *matches: MatchRecord) -> None:
        self.matches.add(*matches)
        for match in matches:
            self.profiles.create(*match.user_ids)

    def collaborators(self) -> dict[str, Any]:
        return {
            "matches": self.matches,
            "ledger": self.ledger,
            "cursor": self.cursor,
            "writer": self.writer,
            "params": self.params,
        }

    def run(self, **kwargs: Any) -> RecalcSummary:
        return recalculate_ratings(**self.collaborators(), **kwargs)


MatchFactory = Callable[..., MatchRecord]


@pytest.fixture
def make_match() -> MatchFactory:
    def _make_match(
        match_id: str,
        completed_at: int | None,
        *,
        blue: tuple[str, ...] = ("alice",),
        red: tuple[str, ...] = ("bob",),
        winner: str = "blue",
        blue_spymaster: str | None = None,
        red_spymaster: str | None = None,
        blue_agents: int | None = None,
        red_agents: int | None = None,
    ) -> MatchRecord:
        if completed_at is None:
            status = MatchStatus.IN_PROGRESS
        else:
            status = MatchStatus.BLUE_WON if winner == "blue" else MatchStatus.RED_WON
        # A normal win means the winning team revealed all of its agents.
        if blue_agents is None:
            blue_agents = 0 if winner == "blue" else 2
        if red_agents is None:
            red_agents = 0 if winner == "red" else 2
        return MatchRecord(
            match_id=match_id,
            blue_team=Team(user_ids=blue, spymaster=blue_spymaster),
            red_team=Team(user_ids=red, spymaster=red_spymaster),
            status=status,
            completed_at=completed_at,
            blue_agents=blue_agents,
            red_agents=red_agents,
        )

    return _make_match


@pytest.fixture
def harness() -> RecalcHarness:
    return RecalcHarness()


@pytest.fixture
def harness_factory() -> Callable[..., RecalcHarness]:
    return RecalcHarness
