"""Resumable rating ledger recalculation over completed matches."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from domain.common import MatchRecord
from domain.config import DEFAULT_PAGE_SIZE
from domain.protocol import (
    BatchWriter,
    CursorStore,
    LedgerStore,
    MatchSource,
    SetMatchUserIds,
    UpdateProfile,
    UpsertLedgerEntry,
    WriteOp,
)
from domain.ratings.accumulator import apply_match_outcome
from domain.ratings.cache import UserRatingCache
from domain.ratings.calculator import RatingParameters
from domain.ratings.queries import purge_match_history


@dataclass(frozen=True)
class RecalcSummary:
    """Outcome of one recalculation pass."""

    lower_bound: int
    processed_matches: int
    ledger_writes: int
    profiles_updated: int
    committed_writes: int
    next_cursor: int | None
    dry_run: bool


def recalculate_ratings(
    *,
    matches: MatchSource,
    ledger: LedgerStore,
    cursor: CursorStore,
    writer: BatchWriter,
    params: RatingParameters,
    timestamp: int | None = None,
    deleted_match: MatchRecord | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> RecalcSummary:
    """Run one bounded pass starting at ``timestamp`` (or the stored cursor).

    Ledger entries are upserted per (user, match), every touched profile is
    rewritten with its final snapshot, and the cursor is advanced when the
    page moved past the lower bound so that another pass can pick up the
    remainder.
    """
    if page_size <= 0:
        raise ValueError("page_size must be greater than 0")

    lower_bound = timestamp if timestamp is not None else (cursor.get() or 0)
    page = matches.fetch_completed_since(lower_bound, limit=page_size)
    if echo is not None:
        echo(f"fetched lower_bound={lower_bound} matches={len(page)}")

    if not page and deleted_match is None:
        return RecalcSummary(
            lower_bound=lower_bound,
            processed_matches=0,
            ledger_writes=0,
            profiles_updated=0,
            committed_writes=0,
            next_cursor=None,
            dry_run=dry_run,
        )

    ordered = sorted(page, key=_completion_order)
    cache = UserRatingCache(ledger, params)
    queued: list[WriteOp] = []

    if deleted_match is not None:
        if echo is not None:
            echo(
                f"seeding deleted match_id={deleted_match.match_id} "
                f"users={len(deleted_match.user_ids)}"
            )
        cache.hydrate(deleted_match)

    ledger_writes = 0
    last_timestamp = 0
    for match in ordered:
        cache.hydrate(match)
        queued.append(SetMatchUserIds(match_id=match.match_id, user_ids=match.user_ids))

        apply_match_outcome(match, cache, params)

        for user_id in match.user_ids:
            # Working snapshots keep mutating; the ledger gets a copy.
            queued.append(
                UpsertLedgerEntry(snapshot=replace(cache[user_id], match_id=match.match_id))
            )
            ledger_writes += 1

        last_timestamp = _completed_at(match)

    for user_id, snapshot in cache.items():
        queued.append(UpdateProfile(user_id=user_id, fields=snapshot.profile_fields()))

    next_cursor = last_timestamp if last_timestamp > lower_bound else None

    if dry_run:
        if echo is not None:
            echo(
                f"[dry-run] lower_bound={lower_bound} "
                f"processed_matches={len(ordered)} "
                f"ledger_writes={ledger_writes} "
                f"tracked_users={len(cache)}"
            )
        return RecalcSummary(
            lower_bound=lower_bound,
            processed_matches=len(ordered),
            ledger_writes=ledger_writes,
            profiles_updated=len(cache),
            committed_writes=0,
            next_cursor=next_cursor,
            dry_run=True,
        )

    for op in queued:
        writer.enqueue(op)
    committed_writes = writer.commit()

    if next_cursor is not None:
        cursor.replace(next_cursor)

    if echo is not None:
        echo(
            "completed "
            f"lower_bound={lower_bound} "
            f"processed_matches={len(ordered)} "
            f"ledger_writes={ledger_writes} "
            f"profiles_updated={len(cache)} "
            f"committed_writes={committed_writes} "
            f"next_cursor={next_cursor}"
        )

    return RecalcSummary(
        lower_bound=lower_bound,
        processed_matches=len(ordered),
        ledger_writes=ledger_writes,
        profiles_updated=len(cache),
        committed_writes=committed_writes,
        next_cursor=next_cursor,
        dry_run=False,
    )


def run_until_caught_up(
    *,
    matches: MatchSource,
    ledger: LedgerStore,
    cursor: CursorStore,
    writer: BatchWriter,
    params: RatingParameters,
    timestamp: int | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_passes: int = 100,
    echo: Callable[[str], None] | None = None,
) -> list[RecalcSummary]:
    """Chain passes through the cursor until no continuation is requested."""
    if max_passes <= 0:
        raise ValueError("max_passes must be greater than 0")

    summaries: list[RecalcSummary] = []
    lower_bound = timestamp
    for _ in range(max_passes):
        summary = recalculate_ratings(
            matches=matches,
            ledger=ledger,
            cursor=cursor,
            writer=writer,
            params=params,
            timestamp=lower_bound,
            page_size=page_size,
            echo=echo,
        )
        summaries.append(summary)
        if summary.next_cursor is None:
            break
        lower_bound = None
    else:
        if echo is not None:
            echo(f"stopped after max_passes={max_passes}; cursor still pending")

    return summaries


def compensate_deleted_match(
    deleted_match: MatchRecord,
    *,
    matches: MatchSource,
    ledger: LedgerStore,
    cursor: CursorStore,
    writer: BatchWriter,
    params: RatingParameters,
    page_size: int = DEFAULT_PAGE_SIZE,
    echo: Callable[[str], None] | None = None,
) -> RecalcSummary | None:
    """Drop a deleted match from the ledger and re-derive everything after it.

    Returns ``None`` when the match never completed (nothing was rated).
    """
    removed = purge_match_history(ledger, deleted_match.match_id)
    if echo is not None:
        echo(f"purged match_id={deleted_match.match_id} ledger_entries={removed}")

    if deleted_match.completed_at is None:
        return None

    return recalculate_ratings(
        matches=matches,
        ledger=ledger,
        cursor=cursor,
        writer=writer,
        params=params,
        timestamp=deleted_match.completed_at,
        deleted_match=deleted_match,
        page_size=page_size,
        echo=echo,
    )


def _completed_at(match: MatchRecord) -> int:
    if match.completed_at is None:
        raise ValueError(f"match_id={match.match_id} has no completed_at")
    return match.completed_at


def _completion_order(match: MatchRecord) -> tuple[int, str]:
    return _completed_at(match), match.match_id


__all__ = [
    "RecalcSummary",
    "compensate_deleted_match",
    "recalculate_ratings",
    "run_until_caught_up",
]
