"""Header-based column detection.

Columns are located by substring heuristics against an ordered table of
roles and synonyms, so column order in the upload does not matter.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

URL = "url"
TITLE = "title"
CREATED = "created"
UPDATED = "updated"
VIEWS = "views"


@dataclass(frozen=True)
class ColumnRule:
    role: str
    synonyms: tuple[str, ...]
    required: bool = False


DEFAULT_COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule(URL, ("url", "page"), required=True),
    ColumnRule(TITLE, ("title", "name")),
    ColumnRule(CREATED, ("created", "date")),
    ColumnRule(UPDATED, ("updated", "modified")),
    ColumnRule(VIEWS, ("view", "traffic", "visit")),
)


def normalize_header(value: object) -> str:
    if value is None:
        return ""
    return str(value).lower().strip()


def build_column_rules(overrides: dict[str, list[str]]) -> tuple[ColumnRule, ...]:
    """Apply synonym overrides to the default table.

    Unknown roles are appended as optional columns.
    """
    rules = []
    for rule in DEFAULT_COLUMN_RULES:
        synonyms = overrides.get(rule.role)
        if synonyms:
            rule = ColumnRule(rule.role, tuple(s.lower() for s in synonyms), rule.required)
        rules.append(rule)
    known = {rule.role for rule in DEFAULT_COLUMN_RULES}
    for role, synonyms in overrides.items():
        if role not in known and synonyms:
            rules.append(ColumnRule(role, tuple(s.lower() for s in synonyms)))
    return tuple(rules)


def detect_columns(
    headers: Sequence[object], rules: Iterable[ColumnRule] = DEFAULT_COLUMN_RULES
) -> dict[str, int]:
    """Map each role to the index of the first header containing a synonym.

    Roles without a matching header are absent from the result.
    """
    normalized = [normalize_header(h) for h in headers]
    found: dict[str, int] = {}
    for rule in rules:
        for index, header in enumerate(normalized):
            if any(s in header for s in rule.synonyms):
                found[rule.role] = index
                break
    return found
