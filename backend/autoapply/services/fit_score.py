"""
Fit-Score Engine - deterministic keyword-overlap scoring

Estimates how much of a job description's vocabulary appears in a
candidate's text. There is no model behind it: the "AI match score" shown
to users is exactly this heuristic, and its constants are calibrated so
sparse input does not produce harshly low numbers.

Algorithm:
    1. Lowercase both texts, split on runs of non-word characters
    2. Drop stop words and tokens of <= 2 characters from the job side
    3. U = distinct remaining job tokens
    4. M = |{t in U : t appears anywhere in the candidate tokens}|
    5. score = min(100, round(M / max(1, |U|) * 100) + 20)

Either text blank -> DEFAULT_SCORE (50), not an error.

Complexity Analysis:
    - tokenize: O(n) where n = text length
    - compute_fit_score: O(j + c) with a set built over candidate tokens
"""

import math
import re
from typing import Dict, List

DEFAULT_SCORE = 50
SCORE_BONUS = 20
MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset({"and", "the", "a", "an", "in", "on", "at", "to", "for", "of", "with"})

# ASCII word characters only: [A-Za-z0-9_]
_NON_WORD = re.compile(r"\W+", re.ASCII)

# Keywords the analyzer reports as strengths / gaps
ANALYZER_KEYWORDS = [
    "collaboration",
    "teamwork",
    "communication",
    "javascript",
    "react",
    "typescript",
    "node.js",
    "agile",
    "project management",
]
ANALYZER_LIST_LIMIT = 4


def tokenize(text: str) -> List[str]:
    """Lowercase and split on non-word runs, discarding empty tokens."""
    return [token for token in _NON_WORD.split(text.lower()) if token]


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; 12.5 must become 13
    return int(math.floor(value + 0.5))


def compute_fit_score(job_text: str, candidate_text: str) -> int:
    """
    Score the lexical overlap between a job description and candidate text.

    Args:
        job_text: Job posting / description text
        candidate_text: Resume or profile text

    Returns:
        Integer in [0, 100]. DEFAULT_SCORE when either input is blank.
    """
    if not job_text.strip() or not candidate_text.strip():
        return DEFAULT_SCORE

    job_terms = {
        token
        for token in tokenize(job_text)
        if token not in STOP_WORDS and len(token) >= MIN_TOKEN_LENGTH
    }
    candidate_tokens = set(tokenize(candidate_text))

    matches = sum(1 for term in job_terms if term in candidate_tokens)
    raw = matches / max(1, len(job_terms))

    return min(100, _round_half_up(raw * 100) + SCORE_BONUS)


def score_band(score: int) -> str:
    """Bucket a score the way the analyzer labels it."""
    if score >= 80:
        return "strong"
    if score >= 60:
        return "moderate"
    return "weak"


def analyze_keywords(job_text: str, candidate_text: str) -> Dict[str, object]:
    """
    Fit score plus the strengths / missing keyword lists.

    A keyword counts as present when it is a substring of any candidate
    token, so "react" is found in "reactjs". Keywords containing a separator
    ("node.js", "project management") never fit inside one token and
    therefore always land in "missing".

    Returns:
        {"score": int, "band": str, "strengths": [...], "missing": [...]}
    """
    score = compute_fit_score(job_text, candidate_text)
    candidate_tokens = tokenize(candidate_text)

    strengths = []
    missing = []
    for keyword in ANALYZER_KEYWORDS:
        if any(keyword in token for token in candidate_tokens):
            strengths.append(keyword)
        else:
            missing.append(keyword)

    return {
        "score": score,
        "band": score_band(score),
        "strengths": strengths[:ANALYZER_LIST_LIMIT],
        "missing": missing[:ANALYZER_LIST_LIMIT],
    }
