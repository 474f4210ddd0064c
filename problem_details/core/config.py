"""Problem details configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

from problem_details.api.negotiation import ProblemFormat

DEFAULT_FORMATS = "json,xml"
DEFAULT_STATUS_CODE = 500


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


def parse_formats(raw: str) -> tuple[ProblemFormat, ...]:
    """Parse a comma separated list of format names, keeping order and dropping repeats."""
    formats: list[ProblemFormat] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if not name:
            continue
        try:
            problem_format = ProblemFormat(name)
        except ValueError as exc:
            raise ValueError(f"Unknown problem details format `{name}`") from exc
        if problem_format not in formats:
            formats.append(problem_format)
    if not formats:
        raise ValueError("At least one problem details format must be enabled")
    return tuple(formats)


@dataclass(frozen=True)
class ProblemSettings:
    """Runtime settings for rendering problem responses."""

    formats: tuple[ProblemFormat, ...] = (ProblemFormat.JSON, ProblemFormat.XML)
    default_status: int = DEFAULT_STATUS_CODE

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings in a log-friendly shape."""
        return {
            "formats": ",".join(problem_format.value for problem_format in self.formats),
            "default_status": self.default_status,
        }


@lru_cache(maxsize=1)
def get_problem_settings() -> ProblemSettings:
    """Load problem rendering settings from the environment."""
    return ProblemSettings(
        formats=parse_formats(os.getenv("PROBLEM_DETAILS_FORMATS", DEFAULT_FORMATS)),
        default_status=_get_int_env("PROBLEM_DETAILS_DEFAULT_STATUS", DEFAULT_STATUS_CODE),
    )
