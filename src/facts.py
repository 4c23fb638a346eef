"""Build facts: lowercase tokens describing the build for conditional compilation."""

import os
from typing import Iterable, Mapping, Optional

from prefs import Preferences


CI_JOB_ENV = "GITHUB_JOB"
FACTS_ENV = "VBUILD_FACTS"


def build_facts(prefs: Preferences, environ: Optional[Mapping[str, str]] = None) -> list[str]:
    """Return target os, C compiler, arch, then `prod` and the CI job name if any.

    Order matters: consumers may take the first matching fact.
    """
    env = os.environ if environ is None else environ
    facts = [prefs.os.lower(), prefs.ccompiler_type.lower(), prefs.arch.lower()]
    if prefs.is_prod:
        facts.append("prod")
    job = env.get(CI_JOB_ENV, "")
    if job:
        facts.append(job.lower())
    return facts


class FactSet:
    """Ordered, duplicate-free facts registered for the current process."""

    def __init__(self):
        self._facts: list[str] = []

    def register(self, facts: Iterable[str]) -> None:
        for fact in facts:
            if fact and fact not in self._facts:
                self._facts.append(fact)

    def __contains__(self, fact: str) -> bool:
        return fact in self._facts

    def __len__(self) -> int:
        return len(self._facts)

    def as_list(self) -> list[str]:
        return list(self._facts)

    def as_env(self) -> str:
        return ",".join(self._facts)
