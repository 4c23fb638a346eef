"""Typo-tolerant suggestions for unrecognized commands."""

from dataclasses import dataclass
from typing import Iterable


DEFAULT_THRESHOLD = 0.2
MAX_SHOWN = 5


def _bigrams(s: str) -> list[str]:
    return [s[i:i + 2] for i in range(len(s) - 1)]


def similarity(a: str, b: str) -> float:
    """Sorensen-Dice coefficient over character bigrams, in [0, 1]."""
    a = a.lower()
    b = b.lower()
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    counts: dict[str, int] = {}
    for gram in _bigrams(a):
        counts[gram] = counts.get(gram, 0) + 1

    common = 0
    for gram in _bigrams(b):
        if counts.get(gram, 0) > 0:
            counts[gram] -= 1
            common += 1

    return 2.0 * common / (len(a) + len(b) - 2)


@dataclass(frozen=True)
class Match:
    name: str
    score: float


class Suggestion:
    """Candidates close to a mistyped name, best first."""

    def __init__(self, wrong: str, candidates: Iterable[str],
                 threshold: float = DEFAULT_THRESHOLD):
        self.wrong = wrong
        self.threshold = threshold
        scored = [Match(name, similarity(wrong, name)) for name in set(candidates)]
        kept = [m for m in scored if m.score >= threshold]
        # ties break on name so the output never depends on input order
        self.matches = sorted(kept, key=lambda m: (-m.score, m.name))

    def names(self) -> list[str]:
        return [m.name for m in self.matches]

    def say(self, message: str) -> str:
        shown = self.names()[:MAX_SHOWN]
        if not shown:
            return message
        if len(shown) == 1:
            return f"{message}\nDid you mean `{shown[0]}`?"
        lines = [message, "Did you mean one of:"]
        lines.extend(f"  {name}" for name in shown)
        return "\n".join(lines)
