"""
Testing pure game logic.
"""

import random

import pytest

from digit_duel.engine import (
    Signature,
    arrangements,
    count_digits,
    feedback,
    feedback_message,
    is_legal,
    is_win,
    opening_guess,
    random_legal,
    space_size,
)
from digit_duel.errors import InvalidConfiguration

def test_feedback_same_digits_wrong_order():
    # secret "1234", guess "1243": every digit shared, two swapped
    result = feedback("1243", "1234")
    assert result == Signature("all_wrong_order", 4)
    assert not result.is_exact

def test_feedback_counts_repeats_by_smaller_frequency():
    # '1' twice in both, '5' once in both -> 3 shared, order differs
    assert feedback("511", "115") == Signature("all_wrong_order", 3)

    # '1' appears three times in the guess but once in the secret
    assert feedback("111", "123") == Signature("partial", 1)

def test_feedback_no_shared_digits():
    assert feedback("456", "123") == Signature("none", 0)

def test_feedback_exact_match():
    for value in ["0", "007", "1234", "9876543210"]:
        assert feedback(value, value).is_exact
        assert feedback(value, value).correct == len(value)

def test_feedback_partial():
    assert feedback("1789", "1234") == Signature("partial", 1)
    assert feedback("2255", "2525") == Signature("all_wrong_order", 4)
    assert feedback("2200", "2525") == Signature("partial", 2)

def test_feedback_shared_count_is_symmetric():
    rng = random.Random(7)
    for _ in range(200):
        a = random_legal(5, True, rng)
        b = random_legal(5, True, rng)
        assert feedback(a, b).correct == feedback(b, a).correct

def test_all_wrong_order_iff_anagram():
    rng = random.Random(11)
    for _ in range(200):
        a = random_legal(4, True, rng)
        b = "".join(rng.sample(a, len(a))) if rng.random() < 0.5 else random_legal(4, True, rng)
        is_anagram = sorted(a) == sorted(b) and a != b
        assert (feedback(a, b).kind == "all_wrong_order") == is_anagram

def test_feedback_rejects_length_mismatch():
    with pytest.raises(ValueError):
        feedback("123", "1234")
    with pytest.raises(ValueError):
        feedback("", "")

def test_feedback_messages():
    assert feedback_message(feedback("123", "123")) == "Correct!"
    assert feedback_message(feedback("132", "123")) == "All digits correct but wrong arrangement."
    assert feedback_message(feedback("456", "123")) == "No correct digits."
    assert feedback_message(feedback("145", "123")) == "1 digit correct."
    assert feedback_message(feedback("125", "123")) == "2 digits correct."

def test_is_win_true_and_false():
    assert is_win("1234", "1234") is True
    assert is_win("1234", "1243") is False
    assert is_win("", "") is False

def test_is_legal():
    assert is_legal("0123", 4, False)
    assert is_legal("0012", 4, True)
    assert not is_legal("0012", 4, False)
    assert not is_legal("012", 4, True)
    assert not is_legal("01a2", 4, True)

def test_random_legal_respects_duplicate_policy():
    rng = random.Random(3)
    for _ in range(100):
        value = random_legal(6, False, rng)
        assert is_legal(value, 6, False)
    assert is_legal(random_legal(12, True, rng), 12, True)
    with pytest.raises(InvalidConfiguration):
        random_legal(11, False, rng)

def test_opening_guess():
    assert opening_guess(4) == "1234"
    assert opening_guess(6) == "123456"
    assert opening_guess(10) == "1234567890"
    with pytest.raises(InvalidConfiguration):
        opening_guess(11)

def test_space_size():
    assert space_size(3, True) == 1000
    assert space_size(3, False) == 720
    assert space_size(10, False) == 3628800
    with pytest.raises(InvalidConfiguration):
        space_size(11, False)
    with pytest.raises(InvalidConfiguration):
        space_size(0, True)

def test_arrangements_of_a_multiset():
    assert arrangements(count_digits("115")) == 3
    assert arrangements(count_digits("1234")) == 24
    assert arrangements(count_digits("0000")) == 1
