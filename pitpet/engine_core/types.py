"""
Core type definitions for the duel engine.

Every symbol that appears on the reels, every phase of the match and
every card sub-game stage is a closed enumeration. Values are the
display labels so snapshots serialize to readable JSON.
"""

from enum import Enum


class Action(str, Enum):
    """Reel A: what the combo does."""
    STRIKE = "Strike"
    GUARD = "Guard"
    HEX = "Hex"
    HEAL = "Heal"
    CHARGE = "Charge"
    STEAL_TURN = "StealTurn"
    DOUBLE = "Double"
    WILD = "Wild"


class Element(str, Enum):
    """Reel B: the element the combo is cast in."""
    FLAME = "Flame"
    AQUA = "Aqua"
    TERRA = "Terra"
    VOLT = "Volt"
    GALE = "Gale"
    BLOOM = "Bloom"
    METAL = "Metal"
    VOID = "Void"
    WILD = "Wild"


class Modifier(str, Enum):
    """Reel C: the rider attached to the combo."""
    X1 = "x1"
    X1_5 = "x1.5"
    X2 = "x2"
    CRIT_PLUS = "Crit+"
    PIERCE = "Pierce"
    DOT = "DoT"
    SPLASH = "Splash"
    SHIELD_PLUS = "Shield+"
    LEECH = "Leech"
    CLEANSE = "Cleanse"
    MISS = "Miss?"
    CARD_TICKET = "Card-Ticket"


class Column(str, Enum):
    """Grid columns, in reel order."""
    ACTION = "action"
    ELEMENT = "element"
    MODIFIER = "modifier"

    @property
    def index(self) -> int:
        return _COLUMN_INDEX[self]


_COLUMN_INDEX = {Column.ACTION: 0, Column.ELEMENT: 1, Column.MODIFIER: 2}


class Phase(str, Enum):
    """Match phases."""
    IDLE = "Idle"
    SPUN = "Spun"
    PETJACK = "PetJack"
    RESOLVE_TURN = "ResolveTurn"
    END_ROUND = "EndRound"
    FINISHED = "Finished"


class Side(str, Enum):
    """The two combatants."""
    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> "Side":
        return Side.AI if self is Side.PLAYER else Side.PLAYER


class MatchOutcome(str, Enum):
    """Final result of a match."""
    PLAYER = "player"
    AI = "ai"
    DRAW = "draw"


class PetJackStage(str, Enum):
    """Stages of one PetJack hand."""
    PLAYER_TURN = "playerTurn"
    DEALER_TURN = "dealerTurn"
    RESULT = "result"
    BUFF = "buff"


class PetJackOutcome(str, Enum):
    """Who took the PetJack hand."""
    PLAYER = "player"
    DEALER = "dealer"
    PUSH = "push"


class PetJackBuff(str, Enum):
    """Buffs offered after a PetJack win. Valid for the current round only."""
    INITIATIVE = "initiative"
    CRIT = "crit"
    STATUS = "status"


DAMAGING_ACTIONS = frozenset({Action.STRIKE, Action.DOUBLE, Action.WILD})
"""Actions that go through the hit/damage pipeline."""

STATUS_MODIFIERS = (Modifier.SHIELD_PLUS, Modifier.CLEANSE, Modifier.DOT)
"""Modifiers that roll against the status chance before the action resolves."""

GRID_SIZE = 3
"""Rows and columns in a slot grid."""
