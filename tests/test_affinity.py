import pytest

from destiny.affinity import SuitBonuses, SuitWeights, score_suits
from destiny.cards import Suit, draw, parse_cards


def test_spade_weighted_action_scores_only_spades():
    bonuses = score_suits(parse_cards(["2s", "5s", "9h"]), SuitWeights(spades=5))
    assert bonuses == SuitBonuses(spades=10, hearts=0, clubs=0, diamonds=0)
    assert bonuses.total == 10


def test_each_suit_scores_independently():
    cards = parse_cards(["2s", "3h", "4h", "5c", "6c", "7c", "8d"])
    bonuses = score_suits(cards, SuitWeights(spades=1, hearts=2, clubs=3, diamonds=4))
    assert bonuses.as_dict() == {"spades": 1, "hearts": 4, "clubs": 9, "diamonds": 4}
    assert bonuses.total == 18


def test_zero_weights_ignore_suits():
    bonuses = score_suits(draw(10, seed=5), SuitWeights())
    assert bonuses.total == 0


def test_score_is_count_times_weight_for_random_hands():
    weights = SuitWeights(spades=3, hearts=0, clubs=7, diamonds=1)
    for seed in range(100):
        cards = draw(8, seed=seed)
        bonuses = score_suits(cards, weights)
        for suit in Suit:
            expected = sum(1 for card in cards if card.suit == suit) * weights.weight(suit)
            assert bonuses.bonus(suit) == expected


def test_suit_weights_reject_negative_and_non_integer_values():
    with pytest.raises(ValueError, match="non-negative"):
        SuitWeights(hearts=-1)
    with pytest.raises(ValueError, match="integer"):
        SuitWeights(clubs=1.5)  # type: ignore[arg-type]


def test_suit_weights_from_dict():
    assert SuitWeights.from_dict({"spades": 4}) == SuitWeights(spades=4)
    with pytest.raises(ValueError, match="Unknown suit weights"):
        SuitWeights.from_dict({"stars": 2})
