"""Load the recalculation engine config from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.calculator import RatingParameters

DEFAULT_PAGE_SIZE = 500
DEFAULT_MAX_WRITES_PER_COMMIT = 500


@dataclass(frozen=True)
class RecalcConfig:
    """Rating constants plus paging/commit limits for one deployment."""

    name: str
    description: str | None
    file_path: Path
    parameters: RatingParameters
    page_size: int = DEFAULT_PAGE_SIZE
    max_writes_per_commit: int = DEFAULT_MAX_WRITES_PER_COMMIT

    def as_config_json(self) -> dict[str, Any]:
        return {
            "base_rating": self.parameters.base_rating,
            "k_factor": self.parameters.k_factor,
            "scale_factor": self.parameters.scale_factor,
            "provisional_games": self.parameters.provisional_games,
            "page_size": self.page_size,
            "max_writes_per_commit": self.max_writes_per_commit,
        }


def load_recalc_config(file_path: Path) -> RecalcConfig:
    """Load and validate one recalc TOML config file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise ValueError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_recalc_config(raw, file_path)


def _parse_recalc_config(raw: dict[str, Any], file_path: Path) -> RecalcConfig:
    system_raw = raw.get("system", {})
    ratings_raw = raw.get("ratings", {})
    recalc_raw = raw.get("recalc", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = RatingParameters(
        base_rating=_float_value(ratings_raw, "ratings", "base_rating", 1200.0, file_path),
        k_factor=_float_value(ratings_raw, "ratings", "k_factor", 32.0, file_path),
        scale_factor=_float_value(ratings_raw, "ratings", "scale_factor", 400.0, file_path),
        provisional_games=_int_value(ratings_raw, "ratings", "provisional_games", 0, file_path),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    page_size = _int_value(recalc_raw, "recalc", "page_size", DEFAULT_PAGE_SIZE, file_path)
    if page_size <= 0:
        raise ValueError(f"{file_path}: [recalc].page_size must be > 0")

    max_writes_per_commit = _int_value(
        recalc_raw,
        "recalc",
        "max_writes_per_commit",
        DEFAULT_MAX_WRITES_PER_COMMIT,
        file_path,
    )
    if max_writes_per_commit <= 0:
        raise ValueError(f"{file_path}: [recalc].max_writes_per_commit must be > 0")

    return RecalcConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
        page_size=page_size,
        max_writes_per_commit=max_writes_per_commit,
    )


def _float_value(raw: dict[str, Any], section: str, key: str, default: float, file_path: Path) -> float:
    value = raw.get(key, default)
    # TOML booleans would otherwise coerce to 0.0/1.0.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{file_path}: [{section}].{key} must be a number (got {value!r})")
    return float(value)


def _int_value(raw: dict[str, Any], section: str, key: str, default: int, file_path: Path) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer (got {value!r})")
    return value


def _validate_parameters(*, file_path: Path, parameters: RatingParameters) -> None:
    if parameters.base_rating <= 0.0:
        raise ValueError(f"{file_path}: [ratings].base_rating must be > 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [ratings].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [ratings].scale_factor must be > 0")
    if parameters.provisional_games < 0:
        raise ValueError(f"{file_path}: [ratings].provisional_games must be >= 0")


__all__ = ["RecalcConfig", "load_recalc_config"]
