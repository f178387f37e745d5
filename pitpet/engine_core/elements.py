"""
Elemental Model - the cyclic advantage chain.

Each chain element beats the next element in the cycle and is beaten
by the previous one. Wild and Void never take part: Wild attackers,
Wild/absent defenders and Void on either side are neutral.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .types import Element

if TYPE_CHECKING:
    from ..config import ElementalConfig


@dataclass
class ElementalModel:
    """Multiplier lookup over a fixed element cycle."""
    config: ElementalConfig

    @property
    def chain(self) -> tuple[Element, ...]:
        return self.config.chain

    def advantage_target(self, element: Element) -> Element | None:
        """The element this one is strong against."""
        if element not in self.chain:
            return None
        index = self.chain.index(element)
        return self.chain[(index + 1) % len(self.chain)]

    def disadvantage_target(self, element: Element) -> Element | None:
        """The element this one is weak against."""
        if element not in self.chain:
            return None
        index = self.chain.index(element)
        return self.chain[(index - 1) % len(self.chain)]

    def multiplier(self, attacker: Element, defender: Element | None) -> float:
        """Damage multiplier for attacker element against defender element."""
        if attacker is Element.WILD:
            return self.config.neutral
        if defender is None or defender is Element.WILD:
            return self.config.neutral
        if attacker == defender:
            return self.config.neutral
        if self.advantage_target(attacker) == defender:
            return self.config.advantage
        if self.disadvantage_target(attacker) == defender:
            return self.config.disadvantage
        return self.config.neutral

    def choose_wild_element(self, defender: Element | None) -> Element:
        """
        Element a Wild action should take against the defender.

        Walks the chain back one step to the element that beats the
        defender; Void when there is nothing to exploit.
        """
        if defender is None or defender is Element.WILD or defender not in self.chain:
            return Element.VOID
        return self.disadvantage_target(defender)
