#!/usr/bin/env python3
"""Rating ledger recalculation commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.config import RecalcConfig, load_recalc_config
from domain.errors import MatchNotFoundError
from domain.pipeline import recalculate_ratings, run_until_caught_up
from domain.ratings.queries import highest_rating, latest_before
from repositories import (
    SqlBatchWriter,
    SqlCursorStore,
    SqlLedgerStore,
    SqlMatchSource,
    delete_match_and_recalculate,
    ensure_ratings_schema,
)

DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "recalc.toml"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Rating ledger jobs.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="RATINGS_DB_URL",
        help="Database URL. Defaults to the local codenames postgres instance.",
    ),
]
ConfigOption = Annotated[
    Path,
    typer.Option("--config", help="Recalc TOML config file."),
]


def _load_config(config_path: Path) -> RecalcConfig:
    try:
        return load_recalc_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@app.command("init-schema")
def init_schema(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Create the ratings tables if they do not exist."""
    ensure_ratings_schema(create_db_engine(db_url))
    typer.echo("schema ready")


@app.command("recalc")
def recalc(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    from_timestamp: Annotated[
        int | None,
        typer.Option(
            "--from-timestamp",
            help="Explicit lower bound (epoch ms). Defaults to the stored cursor.",
        ),
    ] = None,
    until_caught_up: Annotated[
        bool,
        typer.Option("--until-caught-up", help="Keep running passes while the cursor advances."),
    ] = False,
    max_passes: Annotated[
        int,
        typer.Option("--max-passes", help="Upper bound on chained passes."),
    ] = 100,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute ratings without writing anything."),
    ] = False,
) -> None:
    """Recompute ratings for completed matches from the cursor onward."""
    if from_timestamp is not None and from_timestamp < 0:
        raise typer.BadParameter("--from-timestamp must be >= 0")
    if until_caught_up and dry_run:
        raise typer.BadParameter("--dry-run cannot be combined with --until-caught-up")

    config = _load_config(config_path)
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)
    cursor = SqlCursorStore(session_factory)
    writer = SqlBatchWriter(session_factory, max_writes_per_commit=config.max_writes_per_commit)

    typer.echo(
        f"config={config.file_path.name} "
        f"system={config.name} "
        f"config_json={json.dumps(config.as_config_json(), sort_keys=True)}"
    )

    with session_factory() as session:
        matches = SqlMatchSource(session)
        ledger = SqlLedgerStore(session)

        if until_caught_up:
            summaries = run_until_caught_up(
                matches=matches,
                ledger=ledger,
                cursor=cursor,
                writer=writer,
                params=config.parameters,
                timestamp=from_timestamp,
                page_size=config.page_size,
                max_passes=max_passes,
                echo=typer.echo,
            )
            typer.echo(
                f"passes={len(summaries)} "
                f"processed_matches={sum(summary.processed_matches for summary in summaries)}"
            )
            return

        recalculate_ratings(
            matches=matches,
            ledger=ledger,
            cursor=cursor,
            writer=writer,
            params=config.parameters,
            timestamp=from_timestamp,
            page_size=config.page_size,
            dry_run=dry_run,
            echo=typer.echo,
        )


@app.command("delete-match")
def delete_match_command(
    match_id: Annotated[str, typer.Argument(help="Match to remove from the rating history.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Delete a match, purge its ledger entries and re-derive affected ratings."""
    config = _load_config(config_path)
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)

    try:
        summary = delete_match_and_recalculate(
            session_factory,
            match_id,
            params=config.parameters,
            page_size=config.page_size,
            max_writes_per_commit=config.max_writes_per_commit,
            echo=typer.echo,
        )
    except MatchNotFoundError as exc:
        raise typer.BadParameter(str(exc), param_hint="MATCH_ID") from exc
    if summary is None:
        typer.echo(f"match_id={match_id} was never completed; no ratings to re-derive")


@app.command("highest-rating")
def highest_rating_command(
    user_id: Annotated[str, typer.Argument()],
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Print the user's peak non-provisional rating."""
    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        peak = highest_rating(SqlLedgerStore(session), user_id)
    typer.echo(f"user_id={user_id} highest_rating={'none' if peak is None else f'{peak:.2f}'}")


@app.command("show-user")
def show_user(
    user_id: Annotated[str, typer.Argument()],
    before: Annotated[
        int | None,
        typer.Option("--before", help="Epoch ms; defaults to the latest snapshot."),
    ] = None,
    history: Annotated[
        bool,
        typer.Option("--history", help="Print every ledger entry, oldest first."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Print the user's most recent rating snapshot before a timestamp."""
    config = _load_config(config_path)
    session_factory = create_session_factory(create_db_engine(db_url))
    timestamp = before if before is not None else sys.maxsize
    with session_factory() as session:
        ledger = SqlLedgerStore(session)
        if history:
            for entry in ledger.history(user_id):
                if entry.timestamp < timestamp:
                    typer.echo(
                        f"match_id={entry.match_id} "
                        f"timestamp={entry.timestamp} "
                        f"rating={entry.rating:.2f} "
                        f"games_played={entry.games_played} "
                        f"provisional={entry.provisional}"
                    )
        snapshot = latest_before(ledger, user_id, timestamp, config.parameters)

    typer.echo(
        f"user_id={snapshot.user_id} "
        f"match_id={snapshot.match_id or '-'} "
        f"rating={snapshot.rating:.2f} "
        f"games_played={snapshot.games_played} "
        f"games_won={snapshot.games_won} "
        f"current_streak={snapshot.current_streak} "
        f"best_streak={snapshot.best_streak} "
        f"spymaster_games={snapshot.spymaster_games} "
        f"spymaster_wins={snapshot.spymaster_wins} "
        f"assassins_as_spymaster={snapshot.assassins_as_spymaster} "
        f"provisional={snapshot.provisional}"
    )


@app.command("reset-cursor")
def reset_cursor(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Forget the stored watermark so the next recalc starts from the beginning."""
    cursor = SqlCursorStore(create_session_factory(create_db_engine(db_url)))
    previous = cursor.get()
    cursor.clear()
    typer.echo(f"cursor cleared previous={previous}")


if __name__ == "__main__":
    app()
