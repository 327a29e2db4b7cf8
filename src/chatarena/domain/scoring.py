"""Text scoring engine.

Turns one combatant's battle text into seven sub-scores ("dimensions") and a
weighted total. Scoring is a pure function of the text and the scoring rules:
the same text always produces the same vector. All randomness in a battle
lives in :mod:`chatarena.domain.battle`.

Examples:
    >>> vector = score_text("이긴다!")
    >>> vector.length
    3.0
    >>> 0.0 <= vector.total <= 10.0
    True
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from functools import cache

from chatarena.domain import scoring_data as data
from chatarena.domain.enums import Dimension
from chatarena.domain.rules_config import DEFAULT_RULES, ScoringRules

POSSESSIVE_PATTERN = re.compile(r"\w+'s\s+\w+|\w+의\s+\w+")
SENTENCE_SPLIT = re.compile(r"[.!?。…！？]+")
ELONGATED_PATTERN = re.compile(r"(\w)\1{2,}")
EMPHATIC_ENDINGS = ("!!", "!?", "?!", "！！")
EXCLAMATIONS = ("!", "！")


@dataclass(frozen=True, slots=True)
class ScoreVector:
    """Seven dimension scores plus their weighted total, all within [0, 10]."""

    creativity: float
    impact: float
    focus: float
    linguistic_power: float
    strategy: float
    emotion_momentum: float
    length: float
    total: float

    def get(self, dimension: Dimension) -> float:
        """Return the score for a single dimension."""
        return getattr(self, dimension.value)

    def dimensions(self) -> dict[Dimension, float]:
        """Return the seven dimension scores keyed by dimension, in a fixed order."""
        return {dimension: self.get(dimension) for dimension in Dimension}

    def excellent_count(self, threshold: float) -> int:
        """Count dimensions scoring at or above ``threshold``."""
        return sum(1 for value in self.dimensions().values() if value >= threshold)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@cache
def _term_pattern(term: str) -> re.Pattern[str]:
    # ASCII terms only match whole words; Hangul has no reliable word boundary.
    return re.compile(rf"(?<![a-z]){re.escape(term)}(?![a-z])")


def _contains(lowered: str, term: str) -> bool:
    if term.isascii():
        return _term_pattern(term).search(lowered) is not None
    return term in lowered


def count_terms(lowered: str, terms: Iterable[str]) -> int:
    """Count how many distinct ``terms`` appear in already lower-cased text."""
    return sum(1 for term in terms if _contains(lowered, term))


def _is_decorative(char: str) -> bool:
    if char in data.DECORATIVE_SYMBOLS:
        return True
    code = ord(char)
    return any(low <= code <= high for low, high in data.EMOJI_RANGES)


def _opens_with(first_word: str, opener: str) -> bool:
    # Korean openers carry particles ("폭풍이"), English ones must match exactly.
    if opener.isascii():
        return first_word == opener
    return first_word.startswith(opener)


def _sentence_count(text: str) -> int:
    return sum(1 for part in SENTENCE_SPLIT.split(text) if part.strip())


def score_creativity(text: str, lowered: str, rules: ScoringRules) -> float:
    """Character diversity, decoration, figurative patterns and evocative nouns."""
    score = rules.dimension_base

    chars = [char for char in text if not char.isspace()]
    if len(chars) >= rules.diversity_min_chars:
        diversity = len(set(chars)) / len(chars)
        if diversity >= 0.7:
            score += 2.0
        elif diversity >= 0.5:
            score += 1.0

    if any(_is_decorative(char) for char in chars):
        score += 1.5
    if POSSESSIVE_PATTERN.search(lowered):
        score += 1.0
    if count_terms(lowered, data.SIMILE_MARKERS):
        score += 1.0

    score += min(count_terms(lowered, data.EVOCATIVE_NOUNS) * 0.5, 2.0)
    return score


def score_impact(text: str, lowered: str, rules: ScoringRules) -> float:
    """Dramatic openings and closings plus high-intensity phrases."""
    score = rules.dimension_base
    stripped = lowered.strip()
    if not stripped:
        return score

    if stripped.startswith(EXCLAMATIONS):
        score += 1.5
    first_word = stripped.split()[0].strip("!?.,~").strip()
    if first_word and any(_opens_with(first_word, opener) for opener in data.DRAMATIC_OPENERS):
        score += 1.5

    if stripped.endswith(EMPHATIC_ENDINGS):
        score += 2.0
    elif stripped.endswith(EXCLAMATIONS):
        score += 1.0
    elif stripped.endswith(("...", "…")):
        score += 0.5

    score += min(count_terms(lowered, data.INTENSITY_PHRASES), 3) * 1.0
    return score


def theme_hits(lowered: str) -> dict[str, int]:
    """Return the number of distinct theme words found, per theme."""
    return {
        str(theme): count_terms(lowered, words) for theme, words in data.THEME_WORDS.items()
    }


def score_focus(text: str, lowered: str, rules: ScoringRules) -> float:
    """Thematic concentration, reasonable word count and sentence structure."""
    score = rules.dimension_base

    hits = theme_hits(lowered)
    total_hits = sum(hits.values())
    if total_hits == 0:
        score -= 1.0
    else:
        dominant = max(hits.values())
        concentration = dominant / total_hits
        if dominant >= 2 and concentration >= 0.75:
            score += 2.5
        elif concentration >= 0.5:
            score += 1.5
        else:
            score += 0.5

    words = len(text.split())
    if rules.focus_min_words <= words <= rules.focus_max_words:
        score += 1.5
    elif words < 3:
        score -= 1.0

    if _sentence_count(text) >= 2:
        score += 1.0
    return score


def score_linguistic_power(text: str, lowered: str, rules: ScoringRules) -> float:  # noqa: ARG001
    """Strong action verbs and vivid adjectives."""
    score = rules.dimension_base
    verbs = count_terms(lowered, data.ACTION_VERBS)
    adjectives = count_terms(lowered, data.VIVID_ADJECTIVES)
    if not verbs and not adjectives:
        return score - 1.0
    score += min(verbs, 3) * 1.0
    score += min(adjectives * 0.75, 2.5)
    return score


def score_strategy(text: str, lowered: str, rules: ScoringRules) -> float:  # noqa: ARG001
    """Offensive and defensive vocabulary plus preparation language."""
    score = rules.dimension_base
    offensive = count_terms(lowered, data.OFFENSIVE_TACTICS)
    defensive = count_terms(lowered, data.DEFENSIVE_TACTICS)
    score += min(offensive, 2) * 1.0
    score += min(defensive, 2) * 1.0
    if offensive and defensive:
        score += 1.0
    score += min(count_terms(lowered, data.PREPARATION_WORDS), 2) * 1.0
    return score


def score_emotion_momentum(text: str, lowered: str, rules: ScoringRules) -> float:
    """Exclamations, emotion words and battle cries."""
    score = rules.dimension_base
    exclamations = sum(text.count(mark) for mark in EXCLAMATIONS)
    score += min(exclamations, 3) * 0.75
    score += min(count_terms(lowered, data.EMOTION_WORDS), 3) * 0.75
    score += min(count_terms(lowered, data.BATTLE_CRIES), 2) * 1.0
    if ELONGATED_PATTERN.search(lowered):
        score += 0.5
    return score


def score_length(text: str) -> float:
    """Banded score on the character count of the stripped text."""
    length = len(text.strip())
    if length < 10:
        return 3.0
    if length < 30:
        return 6.0
    if length <= 100:
        return 10.0
    if length <= 150:
        return 8.0
    return 6.0


def score_text(text: str, rules: ScoringRules = DEFAULT_RULES.scoring) -> ScoreVector:
    """Score a battle text across all seven dimensions.

    Args:
        text: The combatant's battle text
        rules: Scoring constants and weights

    Returns:
        ScoreVector with every dimension rounded to one decimal and the
        weighted total (also rounded to one decimal)
    """
    lowered = text.lower()

    def bounded(value: float) -> float:
        return round(_clamp(value, rules.dimension_min, rules.dimension_max), 1)

    creativity = bounded(score_creativity(text, lowered, rules))
    impact = bounded(score_impact(text, lowered, rules))
    focus = bounded(score_focus(text, lowered, rules))
    linguistic_power = bounded(score_linguistic_power(text, lowered, rules))
    strategy = bounded(score_strategy(text, lowered, rules))
    emotion_momentum = bounded(score_emotion_momentum(text, lowered, rules))
    length = bounded(score_length(text))

    total = (
        creativity * rules.creativity_weight
        + impact * rules.impact_weight
        + focus * rules.focus_weight
        + linguistic_power * rules.linguistic_power_weight
        + strategy * rules.strategy_weight
        + emotion_momentum * rules.emotion_momentum_weight
        + length * rules.length_weight
    )

    return ScoreVector(
        creativity=creativity,
        impact=impact,
        focus=focus,
        linguistic_power=linguistic_power,
        strategy=strategy,
        emotion_momentum=emotion_momentum,
        length=length,
        total=bounded(total),
    )


def dimension_gaps(winner: ScoreVector, loser: ScoreVector) -> dict[Dimension, float]:
    """Return winner-minus-loser gaps for every dimension."""
    return {
        dimension: round(winner.get(dimension) - loser.get(dimension), 1)
        for dimension in Dimension
    }
