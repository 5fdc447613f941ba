"""The 22 Major Arcana definitions and the Card value used throughout a reading."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import NotFound

REVERSED_SUFFIX = " (Reversed)"


class ArcanaDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=0, le=21)
    name: str
    upright: str
    reversed: str


def _arcana(number: int, name: str, upright: str, reversed_: str) -> ArcanaDefinition:
    return ArcanaDefinition(number=number, name=name, upright=upright, reversed=reversed_)


MAJOR_ARCANA: Tuple[ArcanaDefinition, ...] = (
    _arcana(0, "The Fool",
            "New beginnings, innocence, spontaneity, free spirit, originality",
            "Recklessness, foolishness, risk-taking, inconsideration"),
    _arcana(1, "The Magician",
            "Manifestation, resourcefulness, power, inspired action, creativity",
            "Manipulation, poor planning, untapped talents, deception"),
    _arcana(2, "The High Priestess",
            "Intuition, sacred knowledge, divine feminine, the subconscious mind",
            "Secrets, disconnected from intuition, withdrawal, silence"),
    _arcana(3, "The Empress",
            "Femininity, beauty, nature, nurturing, abundance, creativity",
            "Creative block, dependence on others, smothering, lack of growth"),
    _arcana(4, "The Emperor",
            "Authority, establishment, structure, father figure, leadership",
            "Tyranny, rigidity, coldness, domination, excessive control"),
    _arcana(5, "The Hierophant",
            "Spiritual wisdom, religious beliefs, conformity, tradition, institutions",
            "Personal beliefs, freedom, challenging the status quo, rebellion"),
    _arcana(6, "The Lovers",
            "Love, harmony, relationships, values alignment, choices",
            "Disharmony, imbalance, misalignment of values, trust issues"),
    _arcana(7, "The Chariot",
            "Control, willpower, success, determination, direction",
            "Lack of control, lack of direction, aggression, scattered energy"),
    _arcana(8, "Strength",
            "Strength, courage, persuasion, influence, compassion",
            "Self-doubt, lack of confidence, abuse of power, weakness"),
    _arcana(9, "The Hermit",
            "Soul searching, introspection, inner guidance, solitude",
            "Isolation, loneliness, withdrawal, lost your way, paranoia"),
    _arcana(10, "Wheel of Fortune",
            "Good luck, karma, life cycles, destiny, turning point",
            "Bad luck, lack of control, clinging to control, unwelcome changes"),
    _arcana(11, "Justice",
            "Justice, fairness, truth, cause and effect, law",
            "Unfairness, lack of accountability, dishonesty, bias"),
    _arcana(12, "The Hanged Man",
            "Suspension, restriction, letting go, sacrifice, martyrdom",
            "Delays, resistance, stalling, indecision, apathy"),
    _arcana(13, "Death",
            "Endings, transformation, transition, letting go, rebirth",
            "Resistance to change, personal transformation, inner purging"),
    _arcana(14, "Temperance",
            "Balance, moderation, patience, purpose, meaning",
            "Imbalance, excess, self-healing, re-alignment, rushed"),
    _arcana(15, "The Devil",
            "Shadow self, attachment, addiction, restriction, sexuality",
            "Releasing limiting beliefs, exploring dark thoughts, detachment"),
    _arcana(16, "The Tower",
            "Sudden change, upheaval, chaos, revelation, awakening",
            "Personal transformation, fear of change, averting disaster"),
    _arcana(17, "The Star",
            "Hope, faith, purpose, renewal, spirituality, healing",
            "Lack of faith, despair, self-trust, disconnection from spirit"),
    _arcana(18, "The Moon",
            "Illusion, fear, anxiety, subconscious, intuition",
            "Release of fear, repressed emotion, inner confusion, unveiling"),
    _arcana(19, "The Sun",
            "Positivity, fun, warmth, success, vitality, enlightenment",
            "Inner child, feeling down, overly optimistic, delayed success"),
    _arcana(20, "Judgement",
            "Judgement, rebirth, inner calling, absolution, awakening",
            "Self-doubt, inner critic, ignoring the call, harsh judgement"),
    _arcana(21, "The World",
            "Completion, integration, accomplishment, travel, fulfillment",
            "Seeking external validation, incomplete, lack of achievement"),
)


def definition_for(number: int) -> ArcanaDefinition:
    if isinstance(number, int) and 0 <= number < len(MAJOR_ARCANA):
        return MAJOR_ARCANA[number]
    raise NotFound(f"Invalid arcana number: {number}")


class Card:
    """One drawn card.

    Name and meanings never change after construction; orientation is the
    only mutable state. Two cards are equal when their identities match,
    whatever way up they lie.
    """

    __slots__ = ("_identity", "_name", "_upright", "_reversed_meaning", "reversed")

    def __init__(self, identity: int, name: str, upright_meaning: str, reversed_meaning: str) -> None:
        self._identity = identity
        self._name = name
        self._upright = upright_meaning
        self._reversed_meaning = reversed_meaning
        self.reversed = False

    @classmethod
    def from_definition(cls, definition: ArcanaDefinition) -> "Card":
        return cls(definition.number, definition.name, definition.upright, definition.reversed)

    @property
    def identity(self) -> int:
        return self._identity

    @property
    def name(self) -> str:
        return self._name

    @property
    def upright_meaning(self) -> str:
        return self._upright

    @property
    def reversed_meaning(self) -> str:
        return self._reversed_meaning

    def current_meaning(self) -> str:
        return self._reversed_meaning if self.reversed else self._upright

    def display_name(self) -> str:
        return self._name + REVERSED_SUFFIX if self.reversed else self._name

    def flip(self) -> None:
        self.reversed = not self.reversed

    def set_orientation(self, reversed_: bool) -> None:
        self.reversed = bool(reversed_)

    def reset_orientation(self) -> None:
        self.reversed = False

    def copy(self) -> "Card":
        clone = Card(self._identity, self._name, self._upright, self._reversed_meaning)
        clone.reversed = self.reversed
        return clone

    def detailed(self) -> str:
        return f"{self.display_name()}\n{self.current_meaning()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._identity == other._identity

    def __hash__(self) -> int:
        return hash(self._identity)

    def __repr__(self) -> str:
        suffix = REVERSED_SUFFIX if self.reversed else ""
        return f"Card({self._identity}: {self._name}{suffix})"
