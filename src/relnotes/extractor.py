"""Release-note extraction from pull request descriptions.

PR authors format release notes inconsistently, so extraction is an ordered
cascade of patterns. The earliest rules follow the project convention (a
fenced ``release-note`` block); later ones fall back to free-text heuristics.
The first rule that matches decides the result; a match whose text is
blank yields no note rather than handing over to a later rule.

All rules search the whole body with DOTALL, non-greedy captures; no rule is
anchored where it starts, so multi-line notes are captured as-is. A heading
section ends at the next line that opens with ``###``.
"""

from __future__ import annotations

import re

from .models import EMPTY_BODY_MESSAGE, NOT_FOUND, NOT_FOUND_MESSAGE, ExtractionResult

# (name, pattern) in priority order. Group 1 is always the note text.
RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ('fenced', re.compile(r'```release-note\n(.*?)\n```', re.DOTALL)),
    ('fenced-loose', re.compile(r'```\s*release-note\s*\n(.*?)\n\s*```', re.DOTALL)),
    (
        'heading',
        re.compile(r'###\s*Release Note\s*\n(.*?)(?:^###|\n\Z)', re.DOTALL | re.MULTILINE),
    ),
    ('prefix', re.compile(r'release-note:\s*(.*?)(?:\n\n|\n\Z)', re.DOTALL)),
    (
        'mention',
        re.compile(
            r'(?:release notes?|release changes?)[:\s]+(.*?)(?:\n\n|\n\Z)',
            re.DOTALL | re.IGNORECASE,
        ),
    ),
)


def _normalize(body: str) -> str:
    # Rules 3-5 may end at end-of-document, which they see as a final newline.
    return body if body.endswith('\n') else body + '\n'


def extract_with_rule(body: str | None) -> tuple[ExtractionResult, str | None]:
    """Return the extraction result and the name of the rule that matched."""
    if not body:
        return NOT_FOUND, None
    text = _normalize(body)
    for name, pattern in RULES:
        m = pattern.search(text)
        if not m:
            continue
        note = m.group(1).strip()
        return (ExtractionResult.of(note) if note else NOT_FOUND), name
    return NOT_FOUND, None


def extract(body: str | None) -> ExtractionResult:
    result, _ = extract_with_rule(body)
    return result


def render_release_note(body: str | None) -> str:
    """Human-readable note for console output, including the not-found sentinels."""
    if not body:
        return EMPTY_BODY_MESSAGE
    return extract(body).render(NOT_FOUND_MESSAGE)


__all__ = ['RULES', 'extract', 'extract_with_rule', 'render_release_note']
