"""Thematic analysis, intensity scoring and the narrative tables for the overall reading.

Every table is keyed by card number and holds an (upright, reversed) pair, so
all 22 x 2 combinations can be audited directly.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from .cards import Card


class Theme(str, Enum):
    # Declaration order is the tie-break order for dominant_theme().
    BEGINNINGS = "beginnings"
    AUTHORITY = "authority"
    INTROSPECTION = "introspection"
    TRANSFORMATION = "transformation"
    FULFILLMENT = "fulfillment"
    CHALLENGE = "challenge"
    SPIRITUAL = "spiritual"


class IntensityTier(str, Enum):
    GENTLE = "gentle"
    MODERATE = "moderate"
    INTENSE = "intense"
    TRANSFORMATIVE = "transformative"

    @property
    def rank(self) -> int:
        return list(IntensityTier).index(self)


THEME_MEMBERS: Dict[Theme, frozenset] = {
    Theme.BEGINNINGS: frozenset({0, 1, 3}),
    Theme.AUTHORITY: frozenset({4, 5, 11}),
    Theme.INTROSPECTION: frozenset({2, 9, 12}),
    Theme.TRANSFORMATION: frozenset({13, 16, 20}),
    Theme.FULFILLMENT: frozenset({6, 19, 21}),
    Theme.CHALLENGE: frozenset({7, 8, 15}),
    Theme.SPIRITUAL: frozenset({14, 17, 18}),
}

# Wheel of Fortune (10) belongs to no theme.
_THEME_BY_CARD: Dict[int, Theme] = {
    number: theme for theme, members in THEME_MEMBERS.items() for number in members
}

HIGH_INTENSITY_CARDS = frozenset({10, 13, 15, 16, 20})

HIGH_INTENSITY_UPRIGHT_WEIGHT = 2
HIGH_INTENSITY_REVERSED_WEIGHT = 1
REVERSED_CARD_WEIGHT = 1

# (minimum score, tier), checked top down
INTENSITY_THRESHOLDS: Tuple[Tuple[int, IntensityTier], ...] = (
    (5, IntensityTier.TRANSFORMATIVE),
    (3, IntensityTier.INTENSE),
    (1, IntensityTier.MODERATE),
)

PAST_CLAUSES: Dict[int, Tuple[str, str]] = {
    0: ("was a season of bold, trusting leaps into the unknown",
        "carried the cost of a leap taken without looking"),
    1: ("taught you how focused will turns ideas into reality",
        "left talents unused and intentions tangled"),
    2: ("was guided by a quiet inner knowing",
        "was marked by secrets and an intuition you learned to ignore"),
    3: ("was rich with care, comfort and creative growth",
        "held a tenderness that turned smothering and stalled your growth"),
    4: ("gave you structure and a steady foundation",
        "was ruled by control that felt more like a cage"),
    5: ("was shaped by teachers and traditions you trusted",
        "was spent outgrowing rules that never fitted you"),
    6: ("was defined by a bond and a choice made from the heart",
        "was strained by mistrust and a choice against your values"),
    7: ("was won through determination and a firm hand on the reins",
        "pulled you in too many directions at once"),
    8: ("proved that gentle courage can outlast brute force",
        "was clouded by self-doubt and uneven power"),
    9: ("was a time of solitude that lit an inner lamp",
        "drifted from healing solitude into isolation"),
    10: ("turned on a stroke of fortune you could not have planned",
         "turned against you in ways that still feel unfinished"),
    11: ("set in motion consequences that are now coming due",
         "left an imbalance that was never set right"),
    12: ("asked you to pause and see the world from a new angle",
         "held you suspended in a sacrifice without purpose"),
    13: ("closed a chapter decisively and cleared the ground",
         "clung to an ending that needed to happen"),
    14: ("blended patience and purpose into a steady balance",
         "tipped into excess and haste"),
    15: ("bound you to an attachment stronger than you admitted",
         "began the slow work of breaking old chains"),
    16: ("was shaken by an upheaval that exposed the truth",
         "narrowly avoided a collapse that still waits to happen"),
    17: ("was lit by a hope that carried you through the dark",
         "dimmed your faith and taught you to guard your hopes"),
    18: ("was wrapped in uncertainty and half-seen shapes",
         "began to release the fears that once distorted everything"),
    19: ("shone with a joy that still warms you",
         "saw your joy dimmed and your success delayed"),
    20: ("brought a reckoning that awakened a deeper calling",
         "echoed with a harsh inner verdict that drowned out your calling"),
    21: ("completed an important cycle and made you whole",
         "left a cycle unfinished and still seeking closure"),
}

PRESENT_CLAUSES: Dict[int, Tuple[str, str]] = {
    0: ("a fresh start is open to you if you are willing to begin",
        "you are torn between rushing ahead and holding back"),
    1: ("every tool you need is already in your hands",
        "your energy is scattered and someone may be bending the truth"),
    2: ("the answer is already forming beneath the surface",
        "outside noise is drowning out your own knowing"),
    3: ("this is a fertile moment for what you are nurturing",
        "your creativity is blocked by giving too much away"),
    4: ("clear leadership and firm structure will bring order",
        "control has hardened into rigidity"),
    5: ("trusted mentors and proven paths have wisdom to share",
        "the old rules no longer fit and you must define your own"),
    6: ("an honest choice will reveal what you truly value",
        "something is out of alignment between your actions and your values"),
    7: ("focus and willpower can carry you forward",
        "force is replacing direction"),
    8: ("quiet strength and compassion will achieve more than force",
        "your inner critic is louder than your courage"),
    9: ("stepping back from the noise will reveal the next step",
        "solitude is sliding into loneliness"),
    10: ("the wheel is turning in your favour",
         "clinging to control is making a downturn harder"),
    11: ("honesty and fairness will balance the scales",
         "accountability is being dodged somewhere close to you"),
    12: ("surrender offers a perspective that effort cannot",
         "indecision keeps you suspended"),
    13: ("something is ending so that something truer can begin",
         "holding on is only prolonging a change already underway"),
    14: ("a patient middle path will bring peace",
         "you are overdoing something and need to recalibrate"),
    15: ("you can see the chains you have accepted",
         "you are loosening limiting beliefs and reclaiming your power"),
    16: ("what was built on weak foundations is falling away",
         "fear of change is propping up a crumbling structure"),
    17: ("renewal is flowing in and healing has begun",
         "discouragement clouds a hope that has not actually left"),
    18: ("not everything is as it seems",
         "the fog is lifting and buried feelings are surfacing"),
    19: ("joy and vitality are yours to claim",
         "simple pleasures are needed to lift a low mood"),
    20: ("you are being called to rise and answer",
         "self-judgement is drowning out your calling"),
    21: ("a cycle is closing in fulfillment",
         "you are close to completion but seeking approval outside yourself"),
}

FUTURE_CLAUSES: Dict[int, Tuple[str, str]] = {
    0: ("opens an unexpected door and invites you to trust the journey",
        "urges a pause before the next leap so that courage does not become carelessness"),
    1: ("promises a moment when skill and timing align in your favour",
        "warns against polished promises and gifts left unused"),
    2: ("brings hidden knowledge to the surface for your instincts to recognise",
        "suggests a concealed truth will emerge, asking you to trust yourself again"),
    3: ("promises growth and comfort as the harvest of patient care",
        "asks you to protect the space your ideas need before giving more away"),
    4: ("points toward responsibility where discipline pays off",
         "cautions that flexibility will achieve more than force"),
    5: ("brings a teacher, ritual or commitment that steadies your growth",
        "foretells a challenge to tradition that ends in greater freedom"),
    6: ("holds a relationship or decision that asks for your whole heart",
        "asks you to repair trust before it is tested"),
    7: ("promises victory if you hold your course",
        "warns that the road will stall until you choose a destination"),
    8: ("reveals reserves of courage you did not know you had",
        "asks you to keep fear and anger from taking the reins"),
    9: ("brings a period of retreat that yields hard-won wisdom",
        "asks you to seek guidance from others as well as within"),
    10: ("marks a turning point where luck favours the ready",
         "may bring a setback, yet the wheel always turns again"),
    11: ("brings a fair resolution that reflects what you have invested",
         "warns of biased judgements, your own included"),
    12: ("asks for patience and rewards it with fresh insight",
         "foresees delays until you release what you are holding"),
    13: ("brings a profound transformation that closes one chapter and opens another",
         "delivers a change you keep postponing, gentler if you meet it willingly"),
    14: ("offers harmony as patience and purpose keep mixing well",
         "calls for realignment before anything new is added"),
    15: ("tests what you are willing to be bound to",
         "brings freedom from an old bond as you keep choosing release"),
    16: ("brings a sudden revelation that clears the ground for rebuilding",
         "lets you avert disaster only by dismantling what no longer holds"),
    17: ("promises a hopeful, healing stretch guided by purpose",
         "returns renewal once you reconnect with what gives you meaning"),
    18: ("leads through a confusing passage where intuition must light the way",
         "brings clarity as illusions fall away"),
    19: ("brings success and happiness that warm everything they touch",
         "still brings success, though later or more modestly than hoped"),
    20: ("holds an awakening that will redefine your direction",
         "repeats the call, asking you to listen without condemning yourself"),
    21: ("brings completion, accomplishment and a sense of wholeness",
         "asks you to finish what you started before chasing the next goal"),
}

CONNECTORS: Dict[IntensityTier, str] = {
    IntensityTier.GENTLE: "and that energy now flows gently into a present where",
    IntensityTier.MODERATE: "and that momentum carries steadily into a present where",
    IntensityTier.INTENSE: "and that force presses urgently into a present where",
    IntensityTier.TRANSFORMATIVE: "and that upheaval breaks wide open into a present where",
}

THEME_CONTINUATIONS: Dict[Theme, str] = {
    Theme.BEGINNINGS: "The same spirit of new beginnings runs from your past into this moment, so trust what you have started.",
    Theme.AUTHORITY: "The question of who holds authority links your past to your present; decide where you stand.",
    Theme.INTROSPECTION: "Your past and present share an inward pull, and the answers keep pointing you back to yourself.",
    Theme.TRANSFORMATION: "Transformation threads your past into your present, and the change already underway is not finished.",
    Theme.FULFILLMENT: "Fulfillment echoes from past to present; what brought you joy before can do so again.",
    Theme.CHALLENGE: "The same test of will connects your past and your present, and every trial has been building your strength.",
    Theme.SPIRITUAL: "A spiritual current flows unbroken from your past into your present; keep following it.",
}

THEME_CONCLUSIONS: Dict[Theme, str] = {
    Theme.BEGINNINGS: "Above all, this reading is about beginnings: the seeds you plant now will shape a whole new chapter.",
    Theme.AUTHORITY: "Above all, this reading is about structure and authority: claim responsibility for your own direction.",
    Theme.INTROSPECTION: "Above all, this reading turns you inward: your clearest guidance comes from reflection.",
    Theme.TRANSFORMATION: "Above all, this reading speaks of transformation: endings and awakenings are clearing the way for renewal.",
    Theme.FULFILLMENT: "Above all, this reading points toward fulfillment: harmony and completion are within reach.",
    Theme.CHALLENGE: "Above all, this reading is a test of will: courage and steady effort will carry you through.",
    Theme.SPIRITUAL: "Above all, this reading carries a spiritual message: hope, balance and intuition will light your path.",
}

NO_THEME_CONCLUSION = "Above all, this reading asks you to meet each turn of fortune with an open mind."

INTENSITY_CLOSINGS: Dict[IntensityTier, str] = {
    IntensityTier.GENTLE: "The energies here are gentle; small, steady steps will serve you well.",
    IntensityTier.MODERATE: "The energies here are active but manageable; stay attentive and keep adjusting as you go.",
    IntensityTier.INTENSE: "The energies here run strong; expect significant shifts and give yourself room to adapt.",
    IntensityTier.TRANSFORMATIVE: "The energies here are transformative; what is unfolding will reshape your life, so let the old give way to the new.",
}


def _pick(table: Dict[int, Tuple[str, str]], card: Card) -> str:
    return table[card.identity][1 if card.reversed else 0]


def theme_of(identity: int) -> Optional[Theme]:
    return _THEME_BY_CARD.get(identity)


def share_theme(a: Card, b: Card) -> bool:
    theme = theme_of(a.identity)
    return theme is not None and theme == theme_of(b.identity)


def intensity_score(cards: Sequence[Card]) -> int:
    score = 0
    for card in cards:
        if card.identity in HIGH_INTENSITY_CARDS:
            score += HIGH_INTENSITY_REVERSED_WEIGHT if card.reversed else HIGH_INTENSITY_UPRIGHT_WEIGHT
        if card.reversed:
            score += REVERSED_CARD_WEIGHT
    return score


def intensity_tier(score: int) -> IntensityTier:
    for minimum, tier in INTENSITY_THRESHOLDS:
        if score >= minimum:
            return tier
    return IntensityTier.GENTLE


def dominant_theme(cards: Sequence[Card]) -> Optional[Theme]:
    """Most frequent theme among the cards; ties go to the earlier Theme member."""
    counts = Counter(t for t in (theme_of(c.identity) for c in cards) if t is not None)
    if not counts:
        return None
    best = max(counts.values())
    for theme in Theme:
        if counts.get(theme) == best:
            return theme
    return None


def compose_overall(past: Card, present: Card, future: Card) -> str:
    cards = (past, present, future)
    tier = intensity_tier(intensity_score(cards))

    parts = [
        f"Your past, shaped by {past.display_name()}, {_pick(PAST_CLAUSES, past)}, "
        f"{CONNECTORS[tier]} {present.display_name()} shows that {_pick(PRESENT_CLAUSES, present)}."
    ]
    if share_theme(past, present):
        parts.append(THEME_CONTINUATIONS[theme_of(past.identity)])
    parts.append(f"Looking ahead, {future.display_name()} {_pick(FUTURE_CLAUSES, future)}.")

    theme = dominant_theme(cards)
    parts.append(THEME_CONCLUSIONS[theme] if theme is not None else NO_THEME_CONCLUSION)
    parts.append(INTENSITY_CLOSINGS[tier])
    return " ".join(parts)
