"""Content negotiation between the available problem formats and a client's Accept header."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Sequence
from enum import Enum
import math

from problem_details.codecs.json_codec import JSON_MEDIA_TYPE
from problem_details.codecs.xml_codec import XML_MEDIA_TYPE


class ProblemFormat(str, Enum):
    JSON = "json"
    XML = "xml"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def aliases(self) -> tuple[str, ...]:
        """Media types a client may ask for to receive this format."""
        return _ALIASES[self]


_MEDIA_TYPES: dict[ProblemFormat, str] = {
    ProblemFormat.JSON: JSON_MEDIA_TYPE,
    ProblemFormat.XML: XML_MEDIA_TYPE,
}

_ALIASES: dict[ProblemFormat, tuple[str, ...]] = {
    ProblemFormat.JSON: (JSON_MEDIA_TYPE, "application/json"),
    ProblemFormat.XML: (XML_MEDIA_TYPE, "application/xml", "text/xml"),
}


def parse_accept(header: str | None) -> list[str]:
    """Return the media ranges of an Accept header, most preferred first.

    Ranges with equal quality keep their header order. Ranges whose ``q`` is
    zero, unparsable, not finite or above 1 are dropped.
    """
    if not header:
        return []

    ranked: list[tuple[float, int, str]] = []
    for index, part in enumerate(header.split(",")):
        media_range, _, params = part.partition(";")
        media_range = media_range.strip().lower()
        if not media_range:
            continue

        quality = 1.0
        for param in params.split(";"):
            key, _, value = param.partition("=")
            if key.strip().lower() != "q":
                continue
            try:
                quality = float(value.strip())
            except ValueError:
                quality = 0.0
        if not math.isfinite(quality) or not 0 < quality <= 1:
            continue
        ranked.append((-quality, index, media_range))

    return [media_range for _, _, media_range in sorted(ranked)]


def select_format(available: Sequence[ProblemFormat], preferences: Iterable[str]) -> ProblemFormat:
    """Pick the first available format the client prefers.

    Falls back to JSON when it is available and nothing matches, otherwise to
    the first available format.
    """
    formats = list(available)
    if not formats:
        raise ValueError("At least one problem format must be available")

    for preference in preferences:
        media_range = preference.split(";", 1)[0].strip().lower()
        for problem_format in formats:
            if _matches(problem_format, media_range):
                return problem_format

    if ProblemFormat.JSON in formats:
        return ProblemFormat.JSON
    return formats[0]


def _matches(problem_format: ProblemFormat, media_range: str) -> bool:
    if media_range == "*/*":
        return True
    if media_range.endswith("/*"):
        prefix = media_range[:-1]
        return any(alias.startswith(prefix) for alias in problem_format.aliases)
    return media_range in problem_format.aliases
