"""
studyplan.titles
---------

Derives human-readable task titles for sections whose extracted title is not informative.

A title is tried from an ordered list of candidate sources. The first source is the raw section
title; when that reads like a page range or placeholder ("Pages 1-10", "Untitled"), the remaining
sources (topic tags, then the blueprint's concepts, terms, objectives and high-yield points) are
searched in order until enough distinct candidates are found.
"""

from __future__ import annotations
from collections.abc import Callable, Iterable
import re
from studyplan.section import Section
from studyplan.validation import truncate

MAX_TITLE_LENGTH = 200
MAX_TITLE_PARTS = 2
TITLE_SEPARATOR = " – "

_GENERIC_TITLE = re.compile(
    r"\b(?:pages?|slides?|section|chapter|part)\s*\d+(?:\s*(?:-|–|—|to)\s*\d+)?\b"
    r"|\b(?:untitled|unknown\s+section)\b",
    re.IGNORECASE,
)
_LEADING_VERB = re.compile(
    r"^(?:understand|describe|explain|identify|outline|review)\s+", re.IGNORECASE
)
_TYPE_PREFIX = re.compile(r"^(?:study|questions|review)\s*:\s*", re.IGNORECASE)

CandidateSource = Callable[[Section], Iterable[str]]

# priority order; the raw title is handled separately
CANDIDATE_SOURCES: tuple[CandidateSource, ...] = (
    lambda section: section.topic_tags,
    lambda section: section.blueprint.key_concepts,
    lambda section: section.blueprint.terms_to_define,
    lambda section: section.blueprint.learning_objectives,
    lambda section: section.blueprint.high_yield_points,
)


def is_generic_title(title: str | None) -> bool:
    """
    Returns True for empty titles and titles that only locate a section ("Page 3", "Chapter 2").

    "Chapter 2: Cardiac Output" is not generic; "Pages 1-10" and "Untitled" are.
    """

    if title is None:
        return True

    # whatever is left once locators are removed must contain a word
    remainder = _GENERIC_TITLE.sub(" ", title)
    return re.search(r"[^\W\d_]", remainder) is None


def _clean_candidate(candidate: str) -> str:
    return _LEADING_VERB.sub("", candidate.strip()).strip()


def _collect_candidates(
    section: Section,
    sources: Iterable[CandidateSource],
    limit: int,
) -> list[str]:
    seen = set()
    candidates = []

    for source in sources:
        for raw in source(section):
            if is_generic_title(raw):
                continue

            candidate = _clean_candidate(raw)
            if not candidate or candidate.casefold() in seen:
                continue

            seen.add(candidate.casefold())
            candidates.append(candidate)

            if len(candidates) >= limit:
                return candidates

    return candidates


def derive_section_title(
    section: Section,
    position: int,
    sources: Iterable[CandidateSource] = CANDIDATE_SOURCES,
) -> str:
    """
    Returns the display title of a section.

    Args:
        section: The section to name.
        position: Zero-based position of the section in its course, used for the last-resort "Section N".
        sources: Candidate sources to search when the raw title is generic, in priority order.

    Returns:
        str: The raw title when it is informative, otherwise a title assembled from the section's
        content signals, otherwise "Section N".
    """

    if not is_generic_title(section.title):
        return truncate(section.title.strip(), MAX_TITLE_LENGTH)

    candidates = _collect_candidates(section, sources, limit=MAX_TITLE_PARTS)
    if candidates:
        return truncate(TITLE_SEPARATOR.join(candidates), MAX_TITLE_LENGTH)

    return f"Section {position + 1}"


def resolve_task_title(title: str, section: Section | None) -> str:
    """
    Replaces the generic body of a stored task title with one derived from its section.

    The type prefix ("Study: ", "Review: ", ...) is kept. The title is returned unchanged when its
    body is already specific, when there is no section, or when the section offers nothing better.
    """

    match = _TYPE_PREFIX.match(title)
    prefix = match.group(0) if match else ""
    body = title[len(prefix) :].strip()

    if not is_generic_title(body) or section is None:
        return title

    better = derive_section_title(section, position=0)
    if is_generic_title(better):
        return title

    return f"{prefix}{better}"


__all__ = [
    "is_generic_title",
    "derive_section_title",
    "resolve_task_title",
    "CANDIDATE_SOURCES",
]
