# kgms/utils/cypher_sanitize.py
import re
from typing import Iterable, List

from kgms.core.errors import InvalidInputError

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(value: str, kind: str = "identifier") -> str:
    """
    Check a label / relationship type / property key against a plain
    identifier grammar and return it stripped.

    Raises InvalidInputError for anything else (spaces, backticks, colons...).
    """
    cleaned = (value or "").strip()
    if not IDENTIFIER.match(cleaned):
        raise InvalidInputError(
            f"invalid {kind} {value!r}: must match {IDENTIFIER.pattern}"
        )
    return cleaned


def validate_labels(labels: Iterable[str]) -> List[str]:
    """Validate every label, dropping blanks and duplicates (order kept)."""
    out: List[str] = []
    for label in labels:
        if not label or not label.strip():
            continue
        cleaned = validate_identifier(label, "label")
        if cleaned not in out:
            out.append(cleaned)
    return out
