"""
PetJack - the push-17 card sub-game a Card-Ticket row launches.

Flat card values, no soft aces, draws with replacement from the deck.
The interactive side gets one optional hit; the automated side draws
to the dealer threshold. Functions mutate the PetJackState in place.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .rng import DeterministicRandom
from .state import PetJackState
from .types import PetJackOutcome, PetJackStage

if TYPE_CHECKING:
    from ..config import PetJackConfig


def hand_value(cards: list[int]) -> int:
    return sum(cards)


def draw_card(config: PetJackConfig, rng: DeterministicRandom) -> int:
    deck = config.deck_values
    return deck[rng.next_int(len(deck))]


def deal(config: PetJackConfig, rng: DeterministicRandom) -> PetJackState:
    """Two cards each, dealt player, player, dealer, dealer."""
    player_hand = [draw_card(config, rng), draw_card(config, rng)]
    dealer_hand = [draw_card(config, rng), draw_card(config, rng)]
    return PetJackState(player_hand=player_hand, dealer_hand=dealer_hand)


def can_hit(config: PetJackConfig, hand: PetJackState) -> bool:
    return (
        hand.stage is PetJackStage.PLAYER_TURN
        and len(hand.player_hand) < config.max_hand_size
    )


def player_hit(config: PetJackConfig, hand: PetJackState, rng: DeterministicRandom) -> int:
    """
    Draw one card for the player.

    Reaching the bust threshold total (21 by default) moves play to the
    dealer. Callers check can_hit first.
    """
    if not can_hit(config, hand):
        raise ValueError("Hit not allowed in this hand")
    card = draw_card(config, rng)
    hand.player_hand.append(card)
    if hand_value(hand.player_hand) >= config.bust_above:
        hand.stage = PetJackStage.DEALER_TURN
    return card


def player_stand(hand: PetJackState) -> None:
    if hand.stage is PetJackStage.PLAYER_TURN:
        hand.stage = PetJackStage.DEALER_TURN


def draw_until(config: PetJackConfig, cards: list[int], rng: DeterministicRandom) -> list[int]:
    """Copy of `cards` extended until it reaches the dealer threshold."""
    hand = list(cards)
    while hand_value(hand) < config.dealer_stands_at:
        hand.append(draw_card(config, rng))
    return hand


def play_dealer(config: PetJackConfig, hand: PetJackState, rng: DeterministicRandom) -> PetJackOutcome:
    """Dealer draws to its threshold, then the hand is scored."""
    if hand.stage is not PetJackStage.DEALER_TURN:
        raise ValueError(f"Dealer cannot play in stage {hand.stage.value}")

    hand.dealer_hand = draw_until(config, hand.dealer_hand, rng)
    hand.outcome = score_hand(config, hand.player_hand, hand.dealer_hand)
    hand.stage = PetJackStage.BUFF if hand.outcome is PetJackOutcome.PLAYER else PetJackStage.RESULT
    return hand.outcome


def score_hand(config: PetJackConfig, player_hand: list[int], dealer_hand: list[int]) -> PetJackOutcome:
    player_total = hand_value(player_hand)
    dealer_total = hand_value(dealer_hand)
    if player_total > config.bust_above:
        return PetJackOutcome.DEALER
    if dealer_total > config.bust_above:
        return PetJackOutcome.PLAYER
    if player_total > dealer_total:
        return PetJackOutcome.PLAYER
    if player_total < dealer_total:
        return PetJackOutcome.DEALER
    return PetJackOutcome.PUSH


def auto_play(config: PetJackConfig, rng: DeterministicRandom) -> PetJackState:
    """
    Non-interactive hand for the opponent.

    Deal, draw the player hand to the dealer threshold, then let the
    dealer play. The returned hand is already scored.
    """
    hand = deal(config, rng)
    hand.player_hand = draw_until(config, hand.player_hand, rng)
    hand.stage = PetJackStage.DEALER_TURN
    play_dealer(config, hand, rng)
    return hand
