from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .paths import EXEMPT_PATHS, PathMatcher, is_exempt
from .tokens import ONE_HOUR_MS, is_valid_credential

__all__ = [
    "Decision",
    "decide",
]


class Decision(str, Enum):
    exempt = "exempt"
    admit = "admit"
    reject = "reject"

    @property
    def admitted(self) -> bool:
        return self is not Decision.reject


def decide(
    path: str,
    header_value: str | None,
    now_ms: int,
    *,
    exempt: Iterable[PathMatcher] = EXEMPT_PATHS,
    window_ms: int = ONE_HOUR_MS,
) -> Decision:
    """Decide whether one inbound request may reach the route handlers.

    Order:
      exempt path            -> exempt (credential never inspected)
      valid recent credential -> admit
      anything else           -> reject

    Exempt and admit both let the request through; reject means 401.
    """
    if is_exempt(path, exempt):
        return Decision.exempt
    if is_valid_credential(header_value, now_ms, window_ms):
        return Decision.admit
    return Decision.reject
