"""
Tests for the PetJack card sub-game.
"""

import pytest

from ..engine_core import petjack
from ..engine_core.state import PetJackState
from ..engine_core.types import PetJackOutcome, PetJackStage
from .helpers import ScriptedRandom, card


@pytest.fixture
def rules(config):
    return config.petjack


def cards(*values):
    return ScriptedRandom([card(v) for v in values])


class TestDeal:
    """Tests for dealing."""

    def test_deal_order(self, rules):
        """Player, player, dealer, dealer."""
        hand = petjack.deal(rules, cards(2, 3, 4, 5))
        assert hand.player_hand == [2, 3]
        assert hand.dealer_hand == [4, 5]
        assert hand.stage is PetJackStage.PLAYER_TURN
        assert hand.outcome is None

    def test_draw_covers_deck(self, rules):
        """The lowest and highest rolls reach both ends of the deck."""
        assert petjack.draw_card(rules, ScriptedRandom([0.0])) == 1
        assert petjack.draw_card(rules, ScriptedRandom([0.999])) == 11


class TestPlayerTurn:
    """Tests for hit and stand."""

    def test_hit_adds_card(self, rules):
        hand = PetJackState(player_hand=[2, 3], dealer_hand=[10, 7])
        drawn = petjack.player_hit(rules, hand, cards(6))
        assert drawn == 6
        assert hand.player_hand == [2, 3, 6]
        assert hand.stage is PetJackStage.PLAYER_TURN

    def test_hit_to_21_moves_to_dealer(self, rules):
        """Reaching 21 ends the player's turn."""
        hand = PetJackState(player_hand=[10, 10], dealer_hand=[10, 7])
        petjack.player_hit(rules, hand, cards(1))
        assert hand.stage is PetJackStage.DEALER_TURN

    def test_only_one_hit(self, rules):
        """A three-card hand cannot hit again."""
        hand = PetJackState(player_hand=[2, 3], dealer_hand=[10, 7])
        petjack.player_hit(rules, hand, cards(4))
        assert not petjack.can_hit(rules, hand)
        with pytest.raises(ValueError):
            petjack.player_hit(rules, hand, cards(4))

    def test_stand(self):
        hand = PetJackState(player_hand=[10, 8], dealer_hand=[10, 7])
        petjack.player_stand(hand)
        assert hand.stage is PetJackStage.DEALER_TURN


class TestDealer:
    """Tests for the dealer and scoring."""

    def test_dealer_draws_to_17(self, rules):
        """The dealer draws below 17 and stops at or above it."""
        hand = PetJackState(player_hand=[10, 10], dealer_hand=[10, 5], stage=PetJackStage.DEALER_TURN)
        rng = cards(3)
        outcome = petjack.play_dealer(rules, hand, rng)

        assert hand.dealer_hand == [10, 5, 3]
        assert rng.calls == 1
        assert outcome is PetJackOutcome.PLAYER
        assert hand.stage is PetJackStage.BUFF

    def test_dealer_stands_on_17(self, rules):
        hand = PetJackState(player_hand=[10, 5], dealer_hand=[10, 7], stage=PetJackStage.DEALER_TURN)
        rng = ScriptedRandom([])
        outcome = petjack.play_dealer(rules, hand, rng)
        assert outcome is PetJackOutcome.DEALER
        assert hand.stage is PetJackStage.RESULT
        assert rng.calls == 0

    def test_dealer_needs_dealer_turn(self, rules):
        hand = PetJackState(player_hand=[10, 5], dealer_hand=[10, 7])
        with pytest.raises(ValueError):
            petjack.play_dealer(rules, hand, ScriptedRandom([]))

    @pytest.mark.parametrize("player,dealer,expected", [
        ([10, 10, 5], [10, 7], PetJackOutcome.DEALER),
        ([10, 5], [10, 6, 9], PetJackOutcome.PLAYER),
        ([10, 10, 5], [10, 6, 9], PetJackOutcome.DEALER),
        ([10, 9], [10, 8], PetJackOutcome.PLAYER),
        ([10, 7], [10, 8], PetJackOutcome.DEALER),
        ([10, 8], [10, 8], PetJackOutcome.PUSH),
        ([10, 10, 1], [10, 10, 1], PetJackOutcome.PUSH),
    ])
    def test_score_hand(self, rules, player, dealer, expected):
        """Player bust loses first, then dealer bust, then totals."""
        assert petjack.score_hand(rules, player, dealer) is expected


class TestAutoPlay:
    """Tests for the opponent's hand."""

    def test_draws_both_sides_to_17(self, rules):
        """Deal, player draws to 17, then the dealer plays."""
        rng = cards(2, 3, 10, 7, 10, 5)
        hand = petjack.auto_play(rules, rng)

        assert hand.player_hand == [2, 3, 10, 5]
        assert hand.dealer_hand == [10, 7]
        assert hand.outcome is PetJackOutcome.PLAYER
        assert rng.calls == 6
