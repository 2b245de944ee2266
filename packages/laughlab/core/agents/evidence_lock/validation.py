"""Deterministic validation of Stage B summaries.

Checks that a generated summary is safe to show: it has the required
structure and every citation it makes is one of Stage A's approved receipt
ranges. Separate from Pydantic schema validation:
- Pydantic: the summary field exists and is a non-empty string
- Heuristic: paragraph structure, length, formatting, citation grounding

The validator is a pure function and never raises.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from laughlab.core.agents.evidence_lock.models import (
    RANGE_PATTERN,
    Receipt,
    SummaryValidationResult,
    ValidationFailure,
    ValidationFailureReason,
    normalize_range,
)

CLOSING_LINE = "Ready to analyze some punchline gaps?"
REQUIRED_PARAGRAPHS = 3
MIN_WORD_COUNT = 500

# Canonical metric keys plus the aliases writers commonly use
APPROVED_METRIC_SUBSTRINGS: tuple[str, ...] = (
    "overallScore",
    "overall_score",
    "LPM",
    "laughsPerMinute",
    "LPJ",
    "linesPerJoke",
    "lines_per_joke",
    "CHS",
    "callbackFrequency",
    "characterBalance",
    "character_balance",
    "ensemble_balance",
    "retentionCliff",
    "gapPriorityScores",
    "gapPriority",
    "retention_risk",
    "retentionRisk",
)

RECEIPT_RANGE_REGEX = re.compile(RANGE_PATTERN)

# Bullets, numbering, ALLCAPS headings, section labels
FORMATTING_VIOLATION_REGEX = re.compile(
    r"^(\s*-\s+|\s*\d+\.\s+|[A-Z\s]{10,}:|PARAGRAPH|SECTION|CARD)", re.MULTILINE
)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

_MISSING_METRIC = {
    1: ValidationFailureReason.MISSING_METRIC_P1,
    2: ValidationFailureReason.MISSING_METRIC_P2,
    3: ValidationFailureReason.MISSING_METRIC_P3,
}
_MISSING_RECEIPT = {
    1: ValidationFailureReason.MISSING_RECEIPT_P1,
    2: ValidationFailureReason.MISSING_RECEIPT_P2,
    3: ValidationFailureReason.MISSING_RECEIPT_P3,
}


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines into trimmed, non-empty paragraphs."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def extract_cited_ranges(text: str) -> list[str]:
    """Return every receipt citation in text, normalized, in order of appearance."""
    return [normalize_range(m.group(0)) for m in RECEIPT_RANGE_REGEX.finditer(text)]


def content_paragraphs(text: str) -> list[str]:
    """Paragraphs excluding a trailing standalone closing line."""
    paragraphs = split_paragraphs(text)
    if paragraphs and paragraphs[-1] == CLOSING_LINE:
        return paragraphs[:-1]
    return paragraphs


def validate_summary(
    summary: str | None,
    receipts: Iterable[Receipt | Mapping[str, Any]] | None,
) -> SummaryValidationResult:
    """Validate a Stage B summary against the Evidence-Lock rules.

    Args:
        summary: Summary text from Stage B (or the fallback generator)
        receipts: Approved receipts from Stage A

    Returns:
        SummaryValidationResult; valid iff no failures were found.

    Validation Rules (all checked, failures accumulate):
        - The closing line appears verbatim
        - Exactly 3 content paragraphs (a trailing closing-line paragraph is not counted)
        - At least 500 whitespace-delimited words
        - No bullets, numbering, ALLCAPS headings or section labels
        - Every cited range is an approved receipt range
        - Each of the 3 content paragraphs names a metric and cites a receipt
    """
    text = summary if isinstance(summary, str) else ""
    failures: list[ValidationFailure] = []

    if CLOSING_LINE not in text:
        failures.append(
            ValidationFailure(
                reason=ValidationFailureReason.MISSING_CLOSING_LINE,
                details=f'Summary must contain the closing line "{CLOSING_LINE}"',
            )
        )

    paragraphs = content_paragraphs(text)
    if len(paragraphs) != REQUIRED_PARAGRAPHS:
        failures.append(
            ValidationFailure(
                reason=ValidationFailureReason.PARAGRAPH_COUNT,
                details=f"Expected {REQUIRED_PARAGRAPHS} content paragraphs, found {len(paragraphs)}",
            )
        )

    word_count = len(text.split())
    if word_count < MIN_WORD_COUNT:
        failures.append(
            ValidationFailure(
                reason=ValidationFailureReason.WORD_COUNT,
                details=f"Expected at least {MIN_WORD_COUNT} words, found {word_count}",
            )
        )

    if FORMATTING_VIOLATION_REGEX.search(text):
        failures.append(
            ValidationFailure(
                reason=ValidationFailureReason.FORMATTING_VIOLATION,
                details="Summary contains bullets, numbering, ALLCAPS headings or section labels",
            )
        )

    failures.extend(_validate_citations(text, receipts))
    failures.extend(_validate_paragraph_grounding(paragraphs))

    return SummaryValidationResult(valid=not failures, failures=failures)


def _approved_ranges(receipts: Iterable[Receipt | Mapping[str, Any]] | None) -> set[str]:
    approved: set[str] = set()
    for receipt in receipts or ():
        if isinstance(receipt, Mapping):
            raw = receipt.get("range")
        else:
            raw = getattr(receipt, "range", None)
        if isinstance(raw, str):
            approved.add(normalize_range(raw))
    return approved


def _validate_citations(
    text: str, receipts: Iterable[Receipt | Mapping[str, Any]] | None
) -> list[ValidationFailure]:
    """One failure per distinct cited range that is not an approved receipt range."""
    approved = _approved_ranges(receipts)
    failures: list[ValidationFailure] = []
    seen: set[str] = set()

    for cited in extract_cited_ranges(text):
        if cited in approved or cited in seen:
            continue
        seen.add(cited)
        failures.append(
            ValidationFailure(
                reason=ValidationFailureReason.UNAPPROVED_RECEIPT_RANGE,
                details=f'Cited range "{cited}" not found in approved receipts',
                cited_range=cited,
            )
        )

    return failures


def _validate_paragraph_grounding(paragraphs: list[str]) -> list[ValidationFailure]:
    failures: list[ValidationFailure] = []

    for number, paragraph in enumerate(paragraphs[:REQUIRED_PARAGRAPHS], start=1):
        if not any(key in paragraph for key in APPROVED_METRIC_SUBSTRINGS):
            failures.append(
                ValidationFailure(
                    reason=_MISSING_METRIC[number],
                    details=f"Paragraph {number} does not contain an approved metric substring",
                )
            )

        if not RECEIPT_RANGE_REGEX.search(paragraph):
            failures.append(
                ValidationFailure(
                    reason=_MISSING_RECEIPT[number],
                    details=f"Paragraph {number} does not contain a receipt range",
                )
            )

    return failures
