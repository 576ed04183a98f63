"""Predicate compiler mapping atom text to predicate kinds."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from taskfilter.logging_config import LOGGER_NAME
from taskfilter.query_language.dates import parse_date_ref
from taskfilter.query_language.predicates import (
    Assigned,
    ByLabel,
    ByProject,
    BySection,
    DeadlineAfter,
    DeadlineBefore,
    DeadlineOverdue,
    DeadlineToday,
    DeadlineTomorrow,
    Delegated,
    DueAfter,
    DueBefore,
    DueWithinDays,
    HasDate,
    HasDeadline,
    HasDescription,
    HasDuration,
    HasLabels,
    NoDeadline,
    NoDueDate,
    Overdue,
    PredicateKind,
    Priority,
    RawContains,
    Recurring,
    Search,
    Today,
    Tomorrow,
    Unassigned,
)


logger = logging.getLogger(LOGGER_NAME)


KEYWORDS: dict[str, PredicateKind] = {
    "today": Today(),
    "tomorrow": Tomorrow(),
    "overdue": Overdue(),
    "no date": NoDueDate(),
    "no due date": NoDueDate(),
    "no deadline": NoDeadline(),
    "recurring": Recurring(),
    "assigned": Assigned(),
    "unassigned": Unassigned(),
    "delegated": Delegated(),
}

HAS_KINDS: dict[str, PredicateKind] = {
    "date": HasDate(),
    "description": HasDescription(),
    "labels": HasLabels(),
    "deadline": HasDeadline(),
    "duration": HasDuration(),
}

DEADLINE_KINDS: dict[str, PredicateKind] = {
    "today": DeadlineToday(),
    "tomorrow": DeadlineTomorrow(),
    "overdue": DeadlineOverdue(),
}

PRIORITY_RE = re.compile(r"^p([1-4])$")
DAYS_RE = re.compile(r"^(?:next\s+)?(\d{1,9})\s*days?$")
PROJECT_RE = re.compile(r"^#(.+)$", re.DOTALL)
LABEL_RE = re.compile(r"^@(.+)$", re.DOTALL)
SECTION_RE = re.compile(r"^/(.+)$", re.DOTALL)
HAS_RE = re.compile(r"^has:(date|description|labels|deadline|duration)$")
SEARCH_RE = re.compile(r"^search:(.+)$", re.DOTALL)
DEADLINE_RE = re.compile(r"^deadline:(today|tomorrow|overdue)$")
DELEGATED_RE = re.compile(r"^delegated:(.+)$", re.DOTALL)
BOUND_RE = re.compile(r"^(due|deadline)\s+(before|after):\s*(.+)$", re.DOTALL)

BOUND_KINDS: dict[tuple[str, str], Callable[..., PredicateKind]] = {
    ("due", "before"): DueBefore,
    ("due", "after"): DueAfter,
    ("deadline", "before"): DeadlineBefore,
    ("deadline", "after"): DeadlineAfter,
}


def _compile_named(text: str) -> PredicateKind | None:
    """Compile ``#project``, ``@label`` and ``/section`` references."""
    for pattern, kind in ((PROJECT_RE, ByProject), (LABEL_RE, ByLabel), (SECTION_RE, BySection)):
        match = pattern.match(text)
        if match is None:
            continue
        name = match.group(1).strip()
        if name:
            return kind(name)
    return None


def _compile_prefixed(text: str) -> PredicateKind | None:
    """Compile ``has:``, ``search:``, ``deadline:`` and ``delegated:`` forms."""
    match = HAS_RE.match(text)
    if match:
        return HAS_KINDS[match.group(1)]

    match = SEARCH_RE.match(text)
    if match:
        term = match.group(1).strip()
        if term:
            return Search(term)

    match = DEADLINE_RE.match(text)
    if match:
        return DEADLINE_KINDS[match.group(1)]

    match = DELEGATED_RE.match(text)
    if match:
        name = match.group(1).strip()
        return Delegated(None if name == "*" else name) if name else Delegated()

    match = BOUND_RE.match(text)
    if match:
        ref = parse_date_ref(match.group(3))
        if ref is not None:
            return BOUND_KINDS[(match.group(1), match.group(2))](ref)
        logger.debug("Unparseable date bound in %r", text)
    return None


def compile_predicate(atom_text: str) -> PredicateKind:
    """Compile one atom to its predicate kind.

    Matching is case-insensitive and ordered: keywords, priority, day ranges,
    name references, prefixed forms. Anything unrecognized becomes a
    ``RawContains`` content search with the original text.

    Args:
        atom_text: Joined atom text from the parser

    Returns:
        The predicate kind for the atom
    """
    text = " ".join(atom_text.split()).lower()

    keyword = KEYWORDS.get(text)
    if keyword is not None:
        return keyword

    match = PRIORITY_RE.match(text)
    if match:
        return Priority(int(match.group(1)))

    match = DAYS_RE.match(text)
    if match:
        return DueWithinDays(int(match.group(1)))

    compiled = _compile_named(atom_text.strip())
    if compiled is not None:
        return compiled

    compiled = _compile_prefixed(text)
    if compiled is not None:
        return compiled

    logger.debug("No predicate shape for %r, using content search", atom_text)
    return RawContains(atom_text)
