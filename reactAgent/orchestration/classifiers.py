"""Free-text classification of model replies.

The dialogue loop only asks two questions of a reply in natural language:
does it announce an action, and did the model declare the task complete.
Both sit behind ``ResponseClassifier`` so a stronger classifier can replace
the keyword regexes without touching routing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class CompletionVerdict:
    complete: bool
    reason: Optional[str] = None


@runtime_checkable
class ResponseClassifier(Protocol):
    def has_action_intent(self, text: str) -> bool:
        ...

    def parse_completion(self, text: str) -> CompletionVerdict:
        ...


ACTION_INTENT_PATTERN = re.compile(
    r"(?:create|make|write|add|run|execute|install|build|start|implement|refactor)",
    re.IGNORECASE,
)
COMPLETE_PATTERN = re.compile(r"COMPLETE:\s*(yes|no)", re.IGNORECASE)
REASON_PATTERN = re.compile(r"REASON:\s*(.+)", re.IGNORECASE)


class RegexResponseClassifier:
    """Keyword classifier used by default."""

    def __init__(
        self,
        action_pattern: re.Pattern = ACTION_INTENT_PATTERN,
        complete_pattern: re.Pattern = COMPLETE_PATTERN,
        reason_pattern: re.Pattern = REASON_PATTERN,
    ):
        self.action_pattern = action_pattern
        self.complete_pattern = complete_pattern
        self.reason_pattern = reason_pattern

    def has_action_intent(self, text: str) -> bool:
        return bool(self.action_pattern.search(text or ""))

    def parse_completion(self, text: str) -> CompletionVerdict:
        match = self.complete_pattern.search(text or "")
        if not match:
            return CompletionVerdict(complete=False)
        reason_match = self.reason_pattern.search(text)
        reason = reason_match.group(1).strip() if reason_match else None
        return CompletionVerdict(complete=match.group(1).lower() == "yes", reason=reason)


__all__ = [
    "CompletionVerdict",
    "ResponseClassifier",
    "RegexResponseClassifier",
    "ACTION_INTENT_PATTERN",
]
