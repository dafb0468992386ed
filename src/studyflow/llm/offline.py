# src/studyflow/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable


def setup_instructions(credential_names: Iterable[str]) -> str:
    """
    Canned reply used when no provider credential is configured.

    Returned as a normal assistant message (not an error) so a fresh install
    tells the student what to do instead of failing.
    """
    names = list(credential_names)
    listed = ", ".join(names[:-1]) + f" or {names[-1]}" if len(names) > 1 else "".join(names)
    return (
        "The study assistant is not configured yet.\n"
        f"Please add {listed} to your .env file and restart the server.\n"
        "The first key found (in that order) picks the provider."
    )
