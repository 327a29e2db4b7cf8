"""Curated vocabularies for the text scoring engine.

Entries are matched as lower-cased substrings, so Korean stems (e.g. "베다")
also match conjugated forms where the stem survives. English entries are
matched on word boundaries by the scorer.
"""

from __future__ import annotations

from chatarena.domain.enums import Dimension, Theme

# --- Creativity -----------------------------------------------------------------

DECORATIVE_SYMBOLS = frozenset("~♪♫★☆♥♡♣♠◆◇※✦✧✨⚡☄❄☀☾")

# Code point ranges treated as emoji.
EMOJI_RANGES: tuple[tuple[int, int], ...] = (
    (0x1F300, 0x1FAFF),
    (0x2600, 0x27BF),
)

SIMILE_MARKERS: tuple[str, ...] = (
    "처럼",
    "같은",
    "같이",
    "마치",
    "듯이",
    "like",
    "as if",
    "as though",
)

EVOCATIVE_NOUNS: tuple[str, ...] = (
    "별",
    "달빛",
    "태양",
    "우주",
    "전설",
    "운명",
    "영혼",
    "심연",
    "무지개",
    "봉황",
    "star",
    "moon",
    "soul",
    "destiny",
    "legend",
    "abyss",
    "cosmos",
    "phoenix",
    "eternity",
    "galaxy",
)

# --- Impact ---------------------------------------------------------------------

DRAMATIC_OPENERS: tuple[str, ...] = (
    "폭풍",
    "번개",
    "천둥",
    "지옥",
    "최후",
    "운명",
    "멸망",
    "behold",
    "thunder",
    "doom",
    "storm",
    "fate",
    "now",
)

INTENSITY_PHRASES: tuple[str, ...] = (
    "필살기",
    "최후의 일격",
    "끝이다",
    "전력을 다해",
    "한 방에",
    "모든 것을 걸고",
    "final strike",
    "finishing blow",
    "no mercy",
    "all or nothing",
    "game over",
    "last stand",
)

# --- Focus ----------------------------------------------------------------------

THEME_WORDS: dict[Theme, tuple[str, ...]] = {
    Theme.ELEMENTAL: (
        "불꽃",
        "화염",
        "얼음",
        "번개",
        "마법",
        "주문",
        "원소",
        "fire",
        "flame",
        "ice",
        "lightning",
        "magic",
        "spell",
    ),
    Theme.MELEE: (
        "검",
        "칼",
        "주먹",
        "창",
        "방패",
        "베다",
        "sword",
        "blade",
        "fist",
        "spear",
        "axe",
        "shield",
    ),
    Theme.DARK: (
        "어둠",
        "그림자",
        "저주",
        "악마",
        "죽음",
        "심연",
        "dark",
        "shadow",
        "curse",
        "demon",
        "death",
        "void",
    ),
    Theme.LIGHT: (
        "빛",
        "성스러운",
        "신성",
        "천사",
        "정의",
        "축복",
        "light",
        "holy",
        "divine",
        "angel",
        "justice",
        "blessing",
    ),
    Theme.NATURE: (
        "숲",
        "나무",
        "바람",
        "대지",
        "바다",
        "야수",
        "forest",
        "tree",
        "wind",
        "earth",
        "ocean",
        "beast",
    ),
}

# --- Linguistic power -----------------------------------------------------------

ACTION_VERBS: tuple[str, ...] = (
    "부순다",
    "부숴",
    "파괴",
    "꿰뚫",
    "베어",
    "짓밟",
    "날려",
    "분쇄",
    "찢어",
    "smash",
    "crush",
    "pierce",
    "slash",
    "shatter",
    "strike",
    "destroy",
    "obliterate",
)

VIVID_ADJECTIVES: tuple[str, ...] = (
    "강력한",
    "거대한",
    "무시무시한",
    "찬란한",
    "맹렬한",
    "최강",
    "무적",
    "mighty",
    "fierce",
    "blazing",
    "colossal",
    "radiant",
    "relentless",
    "unstoppable",
)

# --- Strategy -------------------------------------------------------------------

OFFENSIVE_TACTICS: tuple[str, ...] = (
    "공격",
    "돌격",
    "기습",
    "선제",
    "연타",
    "attack",
    "charge",
    "ambush",
    "flank",
    "assault",
)

DEFENSIVE_TACTICS: tuple[str, ...] = (
    "방어",
    "막아",
    "회피",
    "반격",
    "보호",
    "defend",
    "block",
    "dodge",
    "parry",
    "guard",
    "counter",
)

PREPARATION_WORDS: tuple[str, ...] = (
    "약점",
    "틈",
    "준비",
    "노린다",
    "계획",
    "전략",
    "weakness",
    "prepare",
    "plan",
    "strategy",
    "outsmart",
    "exploit",
)

# --- Emotion & momentum ---------------------------------------------------------

EMOTION_WORDS: tuple[str, ...] = (
    "분노",
    "열정",
    "용기",
    "희망",
    "결의",
    "기쁨",
    "두려워",
    "절망",
    "rage",
    "fury",
    "passion",
    "courage",
    "hope",
    "pride",
    "despair",
    "fear",
)

BATTLE_CRIES: tuple[str, ...] = (
    "으아아",
    "우오오",
    "이얍",
    "하앗",
    "가자",
    "덤벼라",
    "각오해라",
    "간다",
    "charge!",
    "for glory",
    "onward",
    "let's go",
    "hyah",
    "aaargh",
)

# --- Narrative ------------------------------------------------------------------

DIMENSION_LABELS: dict[Dimension, str] = {
    Dimension.CREATIVITY: "creativity",
    Dimension.IMPACT: "impact",
    Dimension.FOCUS: "focus",
    Dimension.LINGUISTIC_POWER: "linguistic power",
    Dimension.STRATEGY: "strategy",
    Dimension.EMOTION_MOMENTUM: "emotion and momentum",
    Dimension.LENGTH: "length",
}

COACHING_TIPS: dict[Dimension, str] = {
    Dimension.CREATIVITY: (
        "Try a vivid image: a simile, a symbol like ★, or an unexpected noun."
    ),
    Dimension.IMPACT: "Open with a dramatic word and finish on an exclamation.",
    Dimension.FOCUS: (
        "Pick one theme (fire, steel, shadow, light or nature) and stay with it."
    ),
    Dimension.LINGUISTIC_POWER: "Swap plain verbs for strong ones like smash or pierce.",
    Dimension.STRATEGY: "Mention both how you attack and how you defend.",
    Dimension.EMOTION_MOMENTUM: "Let your fighter shout a battle cry and show some passion!",
    Dimension.LENGTH: "Aim for a battle text between 30 and 100 characters.",
}
