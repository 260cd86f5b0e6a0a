"""Allowed-origin set for CORS authorization.

The set is built once at startup from a built-in base list plus any
operator-supplied extras, and is read-only afterwards.

Version: 1.0.0
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

BASE_ALLOWED_ORIGINS: tuple[str, ...] = (
    "https://kenyaonabudgetsafaris.co.uk",
    "https://www.kenyaonabudgetsafaris.co.uk",
)

# Added to the base list only in development mode
DEVELOPMENT_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def normalize_origin(origin: str) -> str:
    """Normalize a configured origin: trim whitespace and trailing slashes."""
    return origin.strip().rstrip("/")


def normalize_request_origin(origin: str) -> str:
    """Normalize an Origin header value by trimming a single trailing slash."""
    return origin[:-1] if origin.endswith("/") else origin


def _split(values: str | Iterable[str] | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return values.split(",")
    return list(values)


@dataclass(frozen=True)
class AllowedOriginSet:
    """Immutable, ordered, de-duplicated set of authorized web origins.

    Membership is exact string equality after normalization. There is no
    wildcard or subdomain matching.
    """

    origins: tuple[str, ...] = ()

    @classmethod
    def from_sources(
        cls,
        base: str | Iterable[str] | None = BASE_ALLOWED_ORIGINS,
        extra: str | Iterable[str] | None = None,
    ) -> AllowedOriginSet:
        """Build the set from a base list and optional extras.

        Args:
            base: Built-in origins (iterable or comma-separated string).
            extra: Operator-supplied origins, typically the raw
                ALLOWED_ORIGINS environment value.

        Returns:
            A new AllowedOriginSet with first-seen order preserved.
        """
        seen: dict[str, None] = {}
        for raw in [*_split(base), *_split(extra)]:
            origin = normalize_origin(raw)
            if origin:
                seen.setdefault(origin, None)
        return cls(origins=tuple(seen))

    def __contains__(self, origin: object) -> bool:
        return isinstance(origin, str) and origin in self.origins

    def __iter__(self) -> Iterator[str]:
        return iter(self.origins)

    def __len__(self) -> int:
        return len(self.origins)

    def as_list(self) -> list[str]:
        return list(self.origins)
