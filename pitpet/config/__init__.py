"""Duel configuration - the fixed rules, stat blocks and reel tables a match runs under."""

from .duel_config import (
    DuelConfig,
    ReelOption,
    ReelTables,
    StatBlock,
    CombatantProfile,
    ElementalConfig,
    PetJackConfig,
    create_default_config,
    load_config,
    config_from_env,
    CONFIG_ENV_VAR,
)
from .validation import validate_config, ConfigValidationError, ValidationResult

__all__ = [
    "DuelConfig",
    "ReelOption",
    "ReelTables",
    "StatBlock",
    "CombatantProfile",
    "ElementalConfig",
    "PetJackConfig",
    "create_default_config",
    "load_config",
    "config_from_env",
    "CONFIG_ENV_VAR",
    "validate_config",
    "ConfigValidationError",
    "ValidationResult",
]
