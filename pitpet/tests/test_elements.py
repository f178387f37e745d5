"""
Tests for the elemental chain.
"""

import pytest

from ..engine_core.types import Element


class TestElementalModel:
    """Tests for ElementalModel."""

    def test_chain_closes(self, elements):
        """Following the advantage link visits every element and returns."""
        start = elements.chain[0]
        current = start
        seen = []
        for _ in range(len(elements.chain)):
            seen.append(current)
            current = elements.advantage_target(current)
        assert current == start
        assert sorted(seen) == sorted(elements.chain)

    def test_links_are_inverse(self, elements):
        """Disadvantage is the reverse of advantage."""
        for element in elements.chain:
            assert elements.disadvantage_target(elements.advantage_target(element)) == element
            assert elements.advantage_target(element) != elements.disadvantage_target(element)
            assert elements.advantage_target(elements.advantage_target(element)) != element

    def test_advantage(self, elements):
        """Flame beats Bloom; Aqua wraps round to beat Flame."""
        assert elements.multiplier(Element.FLAME, Element.BLOOM) == 1.25
        assert elements.multiplier(Element.AQUA, Element.FLAME) == 1.25

    def test_disadvantage(self, elements):
        """The beaten element hits back weakly."""
        assert elements.multiplier(Element.BLOOM, Element.FLAME) == 0.8
        assert elements.multiplier(Element.FLAME, Element.AQUA) == 0.8

    @pytest.mark.parametrize("attacker,defender", [
        (Element.FLAME, Element.FLAME),
        (Element.FLAME, Element.TERRA),
        (Element.VOID, Element.FLAME),
        (Element.FLAME, Element.VOID),
        (Element.WILD, Element.BLOOM),
        (Element.FLAME, Element.WILD),
        (Element.FLAME, None),
    ])
    def test_neutral(self, elements, attacker, defender):
        """Same, distant, Void, Wild and unknown pairings are neutral."""
        assert elements.multiplier(attacker, defender) == 1.0

    def test_wild_picks_counter(self, elements):
        """Against every chain element the Wild pick has the advantage."""
        for defender in elements.chain:
            chosen = elements.choose_wild_element(defender)
            assert elements.multiplier(chosen, defender) == 1.25
        assert elements.choose_wild_element(Element.BLOOM) is Element.FLAME

    @pytest.mark.parametrize("defender", [None, Element.WILD, Element.VOID])
    def test_wild_without_target(self, elements, defender):
        """Nothing to exploit means Void."""
        assert elements.choose_wild_element(defender) is Element.VOID
