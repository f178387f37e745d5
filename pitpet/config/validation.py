"""
Config Validation - Rule checks pydantic field types cannot express.

Validates that:
1. Every bet tier has a positive damage boost
2. Reel tables are non-empty and can actually be drawn from
3. The elemental chain is a proper cycle
4. The PetJack deck is usable
5. Invariants hold (e.g., max_rounds >= 1)
"""

from __future__ import annotations
from dataclasses import dataclass

from ..engine_core.types import Element
from .duel_config import DuelConfig


class ConfigValidationError(Exception):
    """Raised when a loaded config breaks a rule."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Config validation failed with {len(errors)} error(s): " + "; ".join(errors))


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_config(config: DuelConfig) -> ValidationResult:
    """
    Validate a complete duel configuration.

    Returns ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    # Economy
    if not config.bet_tiers:
        errors.append("bet_tiers must not be empty")
    for tier in config.bet_tiers:
        if tier <= 0:
            errors.append(f"Bet tier {tier} must be positive")
        if tier not in config.bet_boost:
            errors.append(f"Bet tier {tier} has no bet_boost entry")
        elif config.bet_boost[tier] <= 0:
            errors.append(f"Bet boost for tier {tier} must be positive")
    if config.starting_coins < 0:
        errors.append("starting_coins must be >= 0")
    elif config.bet_tiers and config.starting_coins < min(config.bet_tiers):
        warnings.append("starting_coins is below the lowest bet tier - no spin is affordable")
    if config.max_rounds < 1:
        errors.append("max_rounds must be >= 1")

    # Reels
    errors.extend(_validate_reel("actions", config.reels.actions, warnings))
    errors.extend(_validate_reel("elements", config.reels.elements, warnings))
    errors.extend(_validate_reel("modifiers", config.reels.modifiers, warnings))
    modifier_labels = {option.label for option in config.reels.modifiers}
    for mod in config.reels.boosted_modifiers:
        if mod not in modifier_labels:
            errors.append(f"Boosted modifier '{mod.value}' is not on the modifier reel")

    # Elements
    chain = config.elements.chain
    if len(chain) < 3:
        errors.append("Element chain needs at least 3 elements")
    if len(set(chain)) != len(chain):
        errors.append("Element chain must not repeat an element")
    for element in (Element.WILD, Element.VOID):
        if element in chain:
            errors.append(f"Element chain must not contain {element.value}")

    # PetJack
    deck = config.petjack.deck_values
    if not deck:
        errors.append("PetJack deck must not be empty")
    if any(value <= 0 for value in deck):
        errors.append("PetJack card values must be positive")
    if config.petjack.max_hand_size < 2:
        errors.append("PetJack max_hand_size must be >= 2")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_reel(name: str, options, warnings: list[str]) -> list[str]:
    """Validate a single reel table."""
    errors = []
    if not options:
        errors.append(f"Reel '{name}' is empty")
        return errors

    total = sum(option.weight for option in options)
    if total <= 0:
        errors.append(f"Reel '{name}' has zero total weight")

    for option in options:
        if option.weight == 0:
            warnings.append(f"Reel '{name}' entry '{option.label.value}' has zero weight")

    return errors
