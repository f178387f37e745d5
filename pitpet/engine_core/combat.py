"""
Combat Resolver - Applies one combo row from an attacker to a defender.

Resolution order is fixed:
1. Wild actions pick their element; the used element is remembered
2. Status modifiers (Shield+, Cleanse, DoT) roll independently
3. The action itself (support actions, Hex, or the damage pipeline)
4. Modifier log lines are appended after the action's own lines

Every roll is `rng.next() * 100 <= chance` with the chance clamped first.
Mutates the combatants it is given; the reducer hands it a cloned state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from .elements import ElementalModel
from .rng import DeterministicRandom
from .state import CombatantState, ComboRow, DotEffect
from .types import Action, Element, Modifier

LogSink = Callable[[str], None]

STATUS_BASE = 35
STATUS_MIN = 15
STATUS_MAX = 65
HIT_BASE = 90
HIT_MIN = 30
HIT_MAX = 98
MISS_PENALTY = 30
CRIT_BASE = 10
CRIT_PLUS_BONUS = 15
CRIT_MULTIPLIER = 1.75
PIERCE_DEF_FACTOR = 0.6
CHARGE_FACTOR = 1.25
DOUBLE_HIT_POWER = 0.7
GUARD_SHIELD_RATIO = 0.1
SHIELD_PLUS_RATIO = 0.15
DOT_RATIO = 0.08 * 0.5
DOT_TICKS = 2
LEECH_RATIO = 0.3

MODIFIER_SCALARS: dict[Modifier, float] = {
    Modifier.X1: 1.0,
    Modifier.X1_5: 1.5,
    Modifier.X2: 2.0,
}


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def fmt(value: float) -> str:
    return f"{value:.2f}"


def modifier_scalar(modifier: Modifier) -> float:
    return MODIFIER_SCALARS.get(modifier, 1.0)


def status_chance(attacker: CombatantState, defender: CombatantState) -> float:
    base = STATUS_BASE + (attacker.stats.wis - defender.stats.wis) / 4 + attacker.status_mod
    return clamp(base, STATUS_MIN, STATUS_MAX)


def hit_chance(attacker: CombatantState, defender: CombatantState, modifier: Modifier) -> float:
    penalty = MISS_PENALTY if modifier is Modifier.MISS else 0
    return clamp(HIT_BASE + (attacker.stats.spd - defender.stats.spd) / 5 - penalty, HIT_MIN, HIT_MAX)


def crit_chance(attacker: CombatantState, modifier: Modifier) -> float:
    bonus = CRIT_PLUS_BONUS if modifier is Modifier.CRIT_PLUS else 0
    return clamp(CRIT_BASE + attacker.stats.luk / 3 + attacker.crit_mod + bonus, 0, 100)


def crit_multiplier(attacker: CombatantState) -> float:
    return CRIT_MULTIPLIER * (1 + attacker.stats.luk / 400)


def effective_defense(defender: CombatantState, modifier: Modifier) -> float:
    if modifier is Modifier.PIERCE:
        return defender.stats.defense * PIERCE_DEF_FACTOR
    return float(defender.stats.defense)


def dot_damage(target: CombatantState) -> float:
    return target.stats.hp * DOT_RATIO


@dataclass
class HitOutcome:
    """One pass through the damage pipeline."""
    hit: bool
    critical: bool = False
    raw_damage: float = 0.0
    absorbed: float = 0.0
    hp_damage: float = 0.0


@dataclass
class ActionResolution:
    """What one combo did, for callers that should not parse log text."""
    action: Action
    element: Element
    hits: list[HitOutcome]
    defeated: bool = False

    @property
    def hit(self) -> bool:
        return any(h.hit for h in self.hits)

    @property
    def critical(self) -> bool:
        return any(h.critical for h in self.hits)

    @property
    def damage(self) -> float:
        return sum(h.hp_damage for h in self.hits)

    @property
    def absorbed(self) -> float:
        return sum(h.absorbed for h in self.hits)


@dataclass
class CombatResolver:
    """Applies combos. Holds only the elemental model; all state is passed in."""
    elements: ElementalModel

    def resolve(
        self,
        attacker: CombatantState,
        defender: CombatantState,
        combo: ComboRow,
        rng: DeterministicRandom,
        log: LogSink,
    ) -> ActionResolution:
        element = combo.element
        if combo.action is Action.WILD:
            element = self.elements.choose_wild_element(defender.last_element)
            log(f"Wild element optimizes to {element.value}.")
        attacker.last_element = element

        extra_logs = self._roll_status_modifiers(attacker, defender, combo.modifier, rng, log)
        resolution = ActionResolution(action=combo.action, element=element, hits=[])

        action = combo.action
        if action is Action.GUARD:
            shield = attacker.stats.hp * GUARD_SHIELD_RATIO
            attacker.shield += shield
            log(f"Guard grants {fmt(shield)} shield.")
        elif action is Action.HEAL:
            heal = (attacker.stats.atk / max(1, attacker.stats.defense)) * attacker.bet_boost
            attacker.hp = min(float(attacker.stats.hp), attacker.hp + heal)
            log(f"Heal restores {fmt(heal)} HP (HP now {fmt(attacker.hp)}).")
        elif action is Action.CHARGE:
            attacker.charge_bonus = True
            log("Charge readies +25% on next damaging action.")
        elif action is Action.STEAL_TURN:
            defender.skip_next = True
            log("StealTurn triggers: defender skips their action this round.")
        elif action is Action.HEX:
            self._resolve_hex(attacker, defender, rng, log)
        elif action is Action.DOUBLE:
            for number in (1, 2):
                outcome = self._resolve_hit(attacker, defender, combo, element, DOUBLE_HIT_POWER, rng, log)
                resolution.hits.append(outcome)
                if not outcome.hit:
                    extra_logs.append(f"Double hit {number} missed.")
                if defender.is_defeated:
                    break
            extra_logs.append(f"Double total damage {fmt(resolution.damage)}.")
        elif action in (Action.STRIKE, Action.WILD):
            resolution.hits.append(self._resolve_hit(attacker, defender, combo, element, 1.0, rng, log))
        else:
            raise ValueError(f"Unknown action: {action!r}")

        for line in extra_logs:
            log(line)

        resolution.defeated = defender.is_defeated
        return resolution

    def _roll_status_modifiers(
        self,
        attacker: CombatantState,
        defender: CombatantState,
        modifier: Modifier,
        rng: DeterministicRandom,
        log: LogSink,
    ) -> list[str]:
        """Roll Shield+/Cleanse/DoT. Returns the outcome lines to append after the action."""
        lines: list[str] = []
        if modifier is Modifier.SHIELD_PLUS:
            chance = status_chance(attacker, defender)
            roll = rng.next() * 100
            log(f"Shield+ status roll {fmt(roll)} vs {fmt(chance)}.")
            if roll <= chance:
                value = attacker.stats.hp * SHIELD_PLUS_RATIO
                attacker.shield += value
                lines.append(f"Shield+ adds {fmt(value)} shield.")
            else:
                lines.append("Shield+ fizzles.")
        elif modifier is Modifier.CLEANSE:
            chance = status_chance(attacker, defender)
            roll = rng.next() * 100
            log(f"Cleanse roll {fmt(roll)} vs {fmt(chance)}.")
            if roll <= chance:
                attacker.dot = None
                attacker.crit_mod = max(0.0, attacker.crit_mod)
                lines.append("Cleanse removes negative effects.")
            else:
                lines.append("Cleanse fails.")
        elif modifier is Modifier.DOT:
            chance = status_chance(attacker, defender)
            roll = rng.next() * 100
            log(f"DoT roll {fmt(roll)} vs {fmt(chance)}.")
            if roll <= chance:
                damage = dot_damage(defender)
                defender.dot = DotEffect(ticks_left=DOT_TICKS, damage=damage)
                lines.append(f"DoT inflicts {fmt(damage)} over {DOT_TICKS} rounds.")
            else:
                lines.append("DoT fails to stick.")
        return lines

    def _resolve_hex(
        self,
        attacker: CombatantState,
        defender: CombatantState,
        rng: DeterministicRandom,
        log: LogSink,
    ) -> None:
        chance = status_chance(attacker, defender)
        roll = rng.next() * 100
        log(f"Hex status roll {fmt(roll)} vs {fmt(chance)}.")
        if roll <= chance:
            damage = dot_damage(defender)
            defender.dot = DotEffect(ticks_left=DOT_TICKS, damage=damage)
            log(f"Hex inflicts DoT for {fmt(damage)} over {DOT_TICKS} rounds.")
        else:
            log("Hex fails to take hold.")

    def _resolve_hit(
        self,
        attacker: CombatantState,
        defender: CombatantState,
        combo: ComboRow,
        element: Element,
        power: float,
        rng: DeterministicRandom,
        log: LogSink,
    ) -> HitOutcome:
        """Hit roll, damage, crit roll, shield, HP, then Leech/Splash."""
        modifier = combo.modifier
        chance = hit_chance(attacker, defender, modifier)
        roll = rng.next() * 100
        landed = roll <= chance
        log(f"Hit Roll {fmt(roll)} vs {fmt(chance)}% -> {'Hit' if landed else 'Miss'}")
        if not landed:
            return HitOutcome(hit=False)

        damage = (attacker.stats.atk / max(1.0, effective_defense(defender, modifier))) * power
        if attacker.charge_bonus:
            damage *= CHARGE_FACTOR
            attacker.charge_bonus = False
            log("Charge bonus consumed (+25% power).")

        element_mult = self.elements.multiplier(element, defender.last_element)
        log(f"Element multiplier: {fmt(element_mult)}")
        scalar = modifier_scalar(modifier)
        log(f"Mod scalar: {fmt(scalar)}")

        crit = crit_chance(attacker, modifier)
        crit_roll = rng.next() * 100
        critical = crit_roll <= crit
        log(f"Crit chance {fmt(crit)}% roll {fmt(crit_roll)}")

        crit_mult = crit_multiplier(attacker) if critical else 1.0
        log(f"Bet boost {fmt(attacker.bet_boost)}x")
        damage = damage * element_mult * scalar * crit_mult * attacker.bet_boost
        if modifier is Modifier.MISS:
            damage *= 0.5
        damage = max(0.0, damage)
        log(f"Final damage before shields: {fmt(damage)}")

        outcome = HitOutcome(hit=True, critical=critical, raw_damage=damage)
        remaining = damage
        if defender.shield > 0:
            outcome.absorbed = min(defender.shield, remaining)
            defender.shield -= outcome.absorbed
            remaining -= outcome.absorbed
            log(f"Shield absorbed {fmt(outcome.absorbed)}.")

        hp_before = defender.hp
        defender.hp = max(0.0, defender.hp - remaining)
        outcome.hp_damage = hp_before - defender.hp
        log(f"Damage dealt to HP: {fmt(remaining)} (HP now {fmt(defender.hp)})")

        if modifier is Modifier.LEECH:
            heal = remaining * LEECH_RATIO
            attacker.hp = min(float(attacker.stats.hp), attacker.hp + heal)
            log(f"Leech healed {fmt(heal)} HP.")
        if modifier is Modifier.SPLASH:
            log("Splash echoes for 50% (log-only).")
        return outcome

    @staticmethod
    def tick_end_of_round(player: CombatantState, ai: CombatantState, log: LogSink) -> None:
        """Tick both sides' DoT: shield absorbs first, the rest hits HP."""
        for label, target in (("Player", player), ("AI", ai)):
            if target.dot is None or target.dot.ticks_left <= 0:
                continue
            target.dot.ticks_left -= 1
            damage = target.dot.damage
            if target.shield > 0:
                absorbed = min(target.shield, damage)
                target.shield -= absorbed
                target.hp = max(0.0, target.hp - (damage - absorbed))
                log(f"{label} DoT tick {fmt(damage)} (shield absorbed {fmt(absorbed)}).")
            else:
                target.hp = max(0.0, target.hp - damage)
                log(f"{label} DoT tick {fmt(damage)}.")
            if target.dot.ticks_left <= 0:
                target.dot = None
