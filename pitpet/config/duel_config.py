"""
Duel Configuration - the fixed rules a match is played under.

Loaded once, never mutated by gameplay. Covers:
- Economy (starting coins, bet tiers and their damage boosts)
- Match length
- The elemental chain and its multipliers
- Both combatants' stat blocks
- The three reel weight tables and the boosted modifier subset
- The PetJack deck and thresholds
"""

from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..engine_core.types import Action, Element, Modifier

LabelT = TypeVar("LabelT")

CONFIG_ENV_VAR = "PITPET_CONFIG"


class ReelOption(BaseModel, Generic[LabelT]):
    """One weighted symbol on a reel."""
    label: LabelT
    weight: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class ReelTables(BaseModel):
    """Weight tables for the three reels."""
    actions: tuple[ReelOption[Action], ...]
    elements: tuple[ReelOption[Element], ...]
    modifiers: tuple[ReelOption[Modifier], ...]
    boosted_modifiers: tuple[Modifier, ...] = ()
    boost_min_bet: int = Field(default=50, description="Bets at or above this double the boosted modifiers")

    model_config = ConfigDict(frozen=True)


class StatBlock(BaseModel):
    """Fixed per-match combat stats."""
    hp: int = Field(gt=0)
    atk: int = Field(ge=0)
    defense: int = Field(ge=0)
    spd: int = Field(ge=0)
    luk: int = Field(ge=0)
    wis: int = Field(ge=0)
    level: int = Field(default=1, ge=1)

    model_config = ConfigDict(frozen=True)


class CombatantProfile(BaseModel):
    """A named pitpet and its stat block."""
    name: str
    stats: StatBlock

    model_config = ConfigDict(frozen=True)


class ElementalConfig(BaseModel):
    """The advantage cycle and its multipliers."""
    chain: tuple[Element, ...]
    advantage: float = 1.25
    disadvantage: float = 0.8
    neutral: float = 1.0

    model_config = ConfigDict(frozen=True)


class PetJackConfig(BaseModel):
    """Card sub-game deck and thresholds."""
    deck_values: tuple[int, ...]
    dealer_stands_at: int = 17
    bust_above: int = 21
    max_hand_size: int = 3
    crit_buff: float = 15
    status_buff: float = 10
    loss_crit_penalty: float = 5

    model_config = ConfigDict(frozen=True)


class DuelConfig(BaseModel):
    """
    Complete configuration for a duel.

    Frozen: a session holds one instance for its whole lifetime
    and `resetConfig` swaps it for the defaults.
    """
    starting_coins: int = 1000
    max_rounds: int = 10
    bet_tiers: tuple[int, ...]
    bet_boost: dict[int, float]
    respin_cost_ratio: float = 0.2
    elements: ElementalConfig
    player: CombatantProfile
    ai: CombatantProfile
    reels: ReelTables
    petjack: PetJackConfig

    model_config = ConfigDict(frozen=True)

    def boost_for(self, bet: int) -> float:
        """Damage multiplier granted by a bet tier."""
        return self.bet_boost.get(bet, 1.0)

    def respin_cost(self, bet: int) -> int:
        """Coins charged for a single respin at this bet."""
        return math.floor(self.respin_cost_ratio * bet)


def create_default_config() -> DuelConfig:
    """
    Create the stock duel configuration.

    Flaro (player) against Aqualin (ai), ten rounds, four bet tiers.
    """
    return DuelConfig(
        starting_coins=1000,
        max_rounds=10,
        bet_tiers=(10, 20, 50, 100),
        bet_boost={10: 1.0, 20: 1.1, 50: 1.25, 100: 1.45},
        respin_cost_ratio=0.2,
        elements=ElementalConfig(
            chain=(
                Element.FLAME,
                Element.BLOOM,
                Element.TERRA,
                Element.VOLT,
                Element.GALE,
                Element.METAL,
                Element.AQUA,
            ),
            advantage=1.25,
            disadvantage=0.8,
            neutral=1.0,
        ),
        player=CombatantProfile(
            name="Flaro",
            stats=StatBlock(hp=180, atk=40, defense=28, spd=22, luk=14, wis=16, level=8),
        ),
        ai=CombatantProfile(
            name="Aqualin",
            stats=StatBlock(hp=220, atk=34, defense=34, spd=18, luk=10, wis=20, level=8),
        ),
        reels=_define_reels(),
        petjack=PetJackConfig(deck_values=tuple(range(1, 12))),
    )


def _define_reels() -> ReelTables:
    """Stock reel weights."""
    actions = [
        (Action.STRIKE, 36),
        (Action.GUARD, 16),
        (Action.HEX, 14),
        (Action.HEAL, 14),
        (Action.CHARGE, 10),
        (Action.STEAL_TURN, 5),
        (Action.DOUBLE, 4),
        (Action.WILD, 1),
    ]
    elements = [(element, 12) for element in Element if element is not Element.WILD]
    elements.append((Element.WILD, 4))
    modifiers = [
        (Modifier.X1, 30),
        (Modifier.X1_5, 22),
        (Modifier.X2, 10),
        (Modifier.CRIT_PLUS, 12),
        (Modifier.PIERCE, 8),
        (Modifier.DOT, 6),
        (Modifier.SPLASH, 5),
        (Modifier.SHIELD_PLUS, 4),
        (Modifier.LEECH, 2),
        (Modifier.CLEANSE, 0.8),
        (Modifier.MISS, 0.2),
        (Modifier.CARD_TICKET, 10),
    ]
    return ReelTables(
        actions=tuple(ReelOption[Action](label=label, weight=w) for label, w in actions),
        elements=tuple(ReelOption[Element](label=label, weight=w) for label, w in elements),
        modifiers=tuple(ReelOption[Modifier](label=label, weight=w) for label, w in modifiers),
        boosted_modifiers=(Modifier.X2, Modifier.CRIT_PLUS, Modifier.PIERCE, Modifier.LEECH),
        boost_min_bet=50,
    )


def load_config(path: str | Path) -> DuelConfig:
    """
    Load and validate a JSON configuration file.

    Raises ConfigValidationError if the file parses but breaks a rule.
    """
    from .validation import ConfigValidationError, validate_config

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = DuelConfig.model_validate(data)
    result = validate_config(config)
    if not result.valid:
        raise ConfigValidationError(result.errors)
    return config


def config_from_env() -> DuelConfig:
    """Load the config named by PITPET_CONFIG, or the defaults when unset."""
    path = os.getenv(CONFIG_ENV_VAR)
    if path:
        return load_config(path)
    return create_default_config()
