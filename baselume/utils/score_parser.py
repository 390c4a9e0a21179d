"""
Parsing utilities for AI scoring responses.

The drawing judge answers in free-form text that usually, but not always,
contains a JSON object. These helpers turn that untrusted answer into a
score the ledger will accept.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict

from baselume.constants import ScoreConstants

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_SCORE_RE = re.compile(r"score[:\s]*(\d+)", re.IGNORECASE)

FALLBACK_FEEDBACK = "Unable to analyze drawing automatically. Manual review recommended."
DEFAULT_FEEDBACK = "Good effort! Keep practicing."
PLAIN_TEXT_FEEDBACK = "Drawing evaluated. Keep up the good work!"


@dataclass(frozen=True)
class ScoringResult:
    """Sanitized outcome of one AI judgement."""
    score: int
    feedback: str
    criteria: Dict[str, int] = field(default_factory=dict)


def _bound(number: float) -> int:
    """Round half up into the accepted range without overflowing on huge values."""
    if number >= ScoreConstants.MAX_SCORE:
        return ScoreConstants.MAX_SCORE
    if number <= ScoreConstants.MIN_SCORE:
        return ScoreConstants.MIN_SCORE
    return max(ScoreConstants.MIN_SCORE, min(ScoreConstants.MAX_SCORE, math.floor(number + 0.5)))


def clamp_score(value: Any, default: int = ScoreConstants.DEFAULT_AI_SCORE) -> int:
    """
    Convert an untrusted value into an integer score between 1 and 10.

    Numbers are rounded half up and clamped, so infinities land on the
    bounds. Missing, zero, non-numeric and NaN values fall back to
    ``default``.

    Args:
        value: Raw value taken from the model answer
        default: Score used when the value cannot be interpreted

    Returns:
        Integer score within the accepted range
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or value == 0:
        return default
    if isinstance(value, float) and math.isnan(value):
        return default
    return _bound(value)


def fallback_result() -> ScoringResult:
    """Result used when the model could not be reached at all."""
    default = ScoreConstants.DEFAULT_AI_SCORE
    return ScoringResult(
        score=default,
        feedback=FALLBACK_FEEDBACK,
        criteria={name: default for name in ScoreConstants.CRITERIA},
    )


def parse_scoring_response(text: str) -> ScoringResult:
    """
    Parse the judge's answer into a ScoringResult.

    Tries the first JSON object in the text, then a plain ``score: N``
    pattern, then gives up with the default score. Never raises.
    """
    text = text or ''

    match = _JSON_OBJECT_RE.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning(f"Could not decode JSON in scoring response: {e}")
            parsed = None

        if isinstance(parsed, dict):
            raw_criteria = parsed.get('criteria')
            if not isinstance(raw_criteria, dict):
                raw_criteria = {}
            feedback = parsed.get('feedback')
            return ScoringResult(
                score=clamp_score(parsed.get('score')),
                feedback=feedback if isinstance(feedback, str) and feedback else DEFAULT_FEEDBACK,
                criteria={
                    name: clamp_score(raw_criteria.get(name))
                    for name in ScoreConstants.CRITERIA
                },
            )

    score_match = _SCORE_RE.search(text)
    if score_match:
        score = _bound(float(score_match.group(1)))
    else:
        score = ScoreConstants.DEFAULT_AI_SCORE

    return ScoringResult(
        score=score,
        feedback=PLAIN_TEXT_FEEDBACK,
        criteria={name: score for name in ScoreConstants.CRITERIA},
    )
