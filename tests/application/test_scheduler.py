import logging
import random
import time

import pytest

from cadence.application.scheduler import (
    calculate_next_review,
    clamp_ease,
    classify_state,
    round_interval,
    sanitize_card,
    validate_card,
)
from cadence.domain.constants import MAX_EASE_FACTOR, MIN_EASE_FACTOR, MS_PER_DAY
from cadence.domain.errors import InvalidCardError
from cadence.domain.models import CardState, Rating


# ---------- Rating branches ----------


@pytest.mark.parametrize("rating", list(Rating))
def test_fresh_card_every_rating(fresh_card, now, rating):
    result = calculate_next_review(fresh_card, rating, now=now)

    expected = {
        Rating.AGAIN: (0.0, 0, CardState.NEW),
        Rating.HARD: (1.0, 1, CardState.LEARNING),
        Rating.GOOD: (1.0, 1, CardState.LEARNING),
        Rating.EASY: (3.0, 1, CardState.LEARNING),
    }[rating]
    assert (result.interval, result.repetitions, result.state) == expected


def test_again_resets_progress(make_card, now):
    card = make_card(interval=42.0, ease_factor=2.1, repetitions=6, state=CardState.MASTERED)
    result = calculate_next_review(card, Rating.AGAIN, now=now)

    assert result.interval == 0
    assert result.repetitions == 0
    assert result.state is CardState.NEW
    assert result.ease_factor == pytest.approx(1.9)
    assert result.next_review_date == now


def test_again_ease_floor(make_card, now):
    card = make_card(interval=5.0, ease_factor=1.4, repetitions=3)
    result = calculate_next_review(card, Rating.AGAIN, now=now)
    assert result.ease_factor == MIN_EASE_FACTOR


def test_hard_from_zero_interval_is_one_day(fresh_card, now):
    result = calculate_next_review(fresh_card, Rating.HARD, now=now)
    assert result.interval == 1
    assert result.ease_factor == pytest.approx(2.35)
    assert result.next_review_date == now + MS_PER_DAY


def test_hard_grows_interval(make_card, now):
    card = make_card(interval=10.0, ease_factor=2.0, repetitions=4)
    result = calculate_next_review(card, Rating.HARD, now=now)

    assert result.interval == 12.0
    assert result.ease_factor == pytest.approx(1.85)
    assert result.repetitions == 5
    assert result.state is CardState.REVIEW


def test_hard_ease_floor(make_card, now):
    card = make_card(interval=2.0, ease_factor=1.3, repetitions=2)
    result = calculate_next_review(card, Rating.HARD, now=now)
    assert result.ease_factor == MIN_EASE_FACTOR
    assert result.interval == 2.4


def test_good_first_review(fresh_card, now):
    result = calculate_next_review(fresh_card, Rating.GOOD, now=now)
    assert result.interval == 1
    assert result.repetitions == 1
    assert result.state is CardState.LEARNING
    assert result.ease_factor == 2.5
    assert result.next_review_date == now + MS_PER_DAY


def test_good_second_review(make_card, now):
    card = make_card(interval=1.0, ease_factor=2.5, repetitions=1)
    result = calculate_next_review(card, Rating.GOOD, now=now)
    assert result.interval == 3
    assert result.repetitions == 2
    assert result.state is CardState.LEARNING


def test_good_multiplies_by_ease(make_card, now):
    card = make_card(interval=12.0, ease_factor=2.5, repetitions=2)
    result = calculate_next_review(card, Rating.GOOD, now=now)
    assert result.interval == 30.0
    assert result.state is CardState.MASTERED


def test_good_fixed_steps_ignore_previous_interval(make_card, now):
    # e.g. a long-lived card that was just reset by "again"
    card = make_card(interval=50.0, ease_factor=2.0, repetitions=0)
    assert calculate_next_review(card, Rating.GOOD, now=now).interval == 1

    card = make_card(interval=50.0, ease_factor=2.0, repetitions=1)
    assert calculate_next_review(card, Rating.GOOD, now=now).interval == 3


def test_easy_steps(make_card, now):
    card = make_card(interval=0.0, ease_factor=2.0, repetitions=1)
    result = calculate_next_review(card, Rating.EASY, now=now)
    assert result.interval == 7
    assert result.state is CardState.REVIEW
    assert result.ease_factor == pytest.approx(2.15)


def test_easy_mature_card_rounds_up(make_card, now):
    card = make_card(interval=3.0, ease_factor=2.5, repetitions=2)
    result = calculate_next_review(card, Rating.EASY, now=now)

    # 3 * 2.5 * 1.3 = 9.75
    assert result.interval == 9.8
    assert result.ease_factor == MAX_EASE_FACTOR
    assert result.repetitions == 3
    assert result.state is CardState.REVIEW


# ---------- Ease clamping ----------


def test_ease_above_ceiling_clamped_before_use(make_card, now):
    card = make_card(interval=10.0, ease_factor=3.0, repetitions=2)
    result = calculate_next_review(card, Rating.GOOD, now=now)
    assert result.interval == 25.0
    assert result.ease_factor == MAX_EASE_FACTOR


def test_ease_below_floor_clamped_before_use(make_card, now):
    card = make_card(interval=10.0, ease_factor=1.0, repetitions=2)
    result = calculate_next_review(card, Rating.GOOD, now=now)
    assert result.interval == 13.0
    assert result.ease_factor == MIN_EASE_FACTOR


def test_clamp_ease():
    assert clamp_ease(0.1) == 1.3
    assert clamp_ease(2.0) == 2.0
    assert clamp_ease(9.0) == 2.5


def test_random_sequences_keep_invariants(make_card, now):
    rng = random.Random(1234)
    for _ in range(200):
        card = make_card(
            interval=round_interval(rng.uniform(1, 100)),
            ease_factor=rng.uniform(0.5, 4.0),
            repetitions=rng.randint(0, 10),
        )
        for _ in range(25):
            rating = rng.choice(list(Rating))
            result = calculate_next_review(card, rating, now=now)

            assert MIN_EASE_FACTOR <= result.ease_factor <= MAX_EASE_FACTOR
            assert result.interval >= 0
            assert round_interval(result.interval) == result.interval
            if rating is Rating.AGAIN:
                assert result.interval == 0
                assert result.repetitions == 0
                assert result.state is CardState.NEW
            else:
                assert result.repetitions == card.repetitions + 1
                assert result.interval >= 1

            card = result.apply_to(card, reviewed_at=now)


# ---------- Rounding ----------


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0.25, 0.3),
        (9.75, 9.8),
        (1.04, 1.0),
        (2.449, 2.4),
        (7.5, 7.5),
        (0.0, 0.0),
    ],
)
def test_round_interval_half_up(raw, expected):
    assert round_interval(raw) == expected


def test_round_interval_is_stable():
    for tenths in range(0, 5000, 7):
        once = round_interval(tenths / 10 + 0.04)
        assert round_interval(once) == once


# ---------- State classification ----------


@pytest.mark.parametrize(
    "rating, reps, interval, expected",
    [
        (Rating.AGAIN, 5, 40.0, CardState.NEW),
        (Rating.GOOD, 0, 1.0, CardState.NEW),
        (Rating.GOOD, 1, 6.9, CardState.LEARNING),
        (Rating.GOOD, 3, 7.0, CardState.REVIEW),
        (Rating.HARD, 3, 29.9, CardState.REVIEW),
        (Rating.EASY, 4, 30.0, CardState.MASTERED),
    ],
)
def test_classify_state(rating, reps, interval, expected):
    assert classify_state(rating, reps, interval) is expected


# ---------- End to end ----------


def test_good_good_good_from_new_card(fresh_card, now):
    card = fresh_card
    intervals = []
    states = []
    for _ in range(3):
        result = calculate_next_review(card, Rating.GOOD, now=now)
        intervals.append(result.interval)
        states.append(result.state)
        card = result.apply_to(card, reviewed_at=now)

    assert intervals == [1, 3, 7.5]
    assert states == [CardState.LEARNING, CardState.LEARNING, CardState.REVIEW]


def test_input_card_not_mutated(make_card, now):
    card = make_card(interval=3.0, ease_factor=2.2, repetitions=2)
    snapshot = (card.interval, card.ease_factor, card.repetitions, card.state)
    calculate_next_review(card, Rating.EASY, now=now)
    assert (card.interval, card.ease_factor, card.repetitions, card.state) == snapshot


def test_string_rating_accepted(fresh_card, now):
    assert calculate_next_review(fresh_card, "good", now=now).interval == 1


def test_unknown_rating_rejected(fresh_card, now):
    with pytest.raises(ValueError):
        calculate_next_review(fresh_card, "perfect", now=now)


def test_defaults_to_system_clock(fresh_card):
    before = time.time_ns() // 1_000_000
    result = calculate_next_review(fresh_card, Rating.AGAIN)
    after = time.time_ns() // 1_000_000
    assert before <= result.next_review_date <= after


def test_next_review_date_is_integer_ms(make_card, now):
    card = make_card(interval=1.0, ease_factor=2.5, repetitions=2)
    result = calculate_next_review(card, Rating.GOOD, now=now)
    assert result.interval == 2.5
    assert isinstance(result.next_review_date, int)
    assert result.next_review_date == now + 216_000_000


# ---------- Corrupted input ----------


@pytest.mark.parametrize(
    "fields, bad_field",
    [
        ({"interval": -1.0}, "interval"),
        ({"interval": float("nan")}, "interval"),
        ({"interval": float("inf")}, "interval"),
        ({"interval": 1e300}, "interval"),
        ({"ease_factor": float("nan")}, "ease_factor"),
        ({"ease_factor": float("-inf")}, "ease_factor"),
        ({"repetitions": -2}, "repetitions"),
        ({"repetitions": 1.5}, "repetitions"),
    ],
)
def test_corrupted_fields_rejected(make_card, now, fields, bad_field):
    card = make_card(**fields)
    with pytest.raises(InvalidCardError) as exc:
        calculate_next_review(card, Rating.GOOD, now=now)
    assert exc.value.field == bad_field


def test_out_of_range_ease_is_not_an_error(make_card):
    validate_card(make_card(ease_factor=7.0))
    validate_card(make_card(ease_factor=0.0))


def test_sanitize_card_repairs_fields(make_card):
    card = make_card(interval=float("nan"), ease_factor=float("inf"), repetitions=-3)
    repaired, fields = sanitize_card(card)

    assert fields == ["ease_factor", "interval", "repetitions"]
    assert repaired.interval == 0.0
    assert repaired.ease_factor == 2.5
    assert repaired.repetitions == 0
    validate_card(repaired)


def test_sanitize_card_leaves_valid_card_alone(make_card):
    card = make_card(interval=4.0, ease_factor=1.9, repetitions=2)
    repaired, fields = sanitize_card(card)
    assert repaired is card
    assert fields == []


def test_huge_but_schedulable_interval(make_card, now):
    card = make_card(interval=1e290, ease_factor=2.5, repetitions=5)
    result = calculate_next_review(card, Rating.EASY, now=now)
    assert result.interval > card.interval
    assert isinstance(result.next_review_date, int)


def test_endless_easy_chain_stops_with_invalid_card(make_card, now):
    card = make_card(interval=3.0, ease_factor=2.5, repetitions=2)
    with pytest.raises(InvalidCardError) as exc:
        for _ in range(1000):
            card = calculate_next_review(card, Rating.EASY, now=now).apply_to(card)
    assert exc.value.field == "interval"


def test_sanitize_card_resets_unschedulable_interval(make_card):
    repaired, fields = sanitize_card(make_card(interval=1e300, repetitions=5))
    assert fields == ["interval"]
    assert repaired.interval == 0.0


def test_sanitize_card_does_not_log(make_card, caplog):
    with caplog.at_level(logging.DEBUG):
        sanitize_card(make_card(interval=-1.0, repetitions=-1))
    assert caplog.records == []
