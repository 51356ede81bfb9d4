import numpy as np
import pandas as pd
import pytest

from lucskdd.discretization.bucket import Bucket, WHOLE_LINE, round_half_up, span


def bucket_with(counts, interval=WHOLE_LINE):
    b = Bucket(interval)
    for label, n in counts.items():
        for _ in range(n):
            b.add(label)
    return b


def test_add_counts():
    b = bucket_with({'A': 2, 'B': 1})
    assert b.count == 3
    assert b.frequency('A') == 2
    assert b.frequency('B') == 1
    assert b.frequency('C') == 0
    assert sum(b.class_frequency.values()) == b.count


def test_empty_bucket_has_no_dominant_class():
    b = Bucket(WHOLE_LINE)
    assert not b.has_dominant_class()
    b.determine_dominant_class()
    assert b.dominant_class is None
    assert b.determine_dominant_class_prob() == 0.0


def test_tied_bucket_has_no_dominant_class():
    b = bucket_with({'A': 3, 'B': 3})
    assert not b.has_dominant_class()
    b.determine_dominant_class()
    assert b.dominant_class is None
    assert b.determine_dominant_class_prob() == 0.0


def test_dominant_class_and_probability():
    b = bucket_with({'A': 5, 'B': 3})
    assert b.has_dominant_class()
    b.determine_dominant_class()
    assert b.dominant_class == 'A'
    assert b.determine_dominant_class_prob() == pytest.approx(5 / 8)


def test_probability_determines_class_when_not_cached():
    b = bucket_with({'A': 1, 'B': 3})
    assert b.dominant_class is None
    assert b.determine_dominant_class_prob() == pytest.approx(0.75)
    assert b.dominant_class == 'B'


def test_single_class_is_dominant():
    b = bucket_with({'A': 1})
    assert b.has_dominant_class()
    assert b.determine_dominant_class_prob() == 1.0


def test_multiway_ties():
    # tie at the maximum
    assert not bucket_with({'A': 5, 'B': 5, 'C': 1}).has_dominant_class()
    # ties below a unique maximum do not matter
    assert bucket_with({'A': 5, 'B': 3, 'C': 3}).has_dominant_class()


def test_merge_keeps_receiving_label():
    first = bucket_with({'A': 1}, pd.Interval(0.0, 1.0, closed='right'))
    first.determine_dominant_class()
    second = bucket_with({'B': 5, 'A': 1}, pd.Interval(1.0, 2.0, closed='right'))
    first.merge(second)

    assert first.count == 7
    assert first.frequency('A') == 2
    assert first.frequency('B') == 5
    assert first.range == pd.Interval(0.0, 2.0, closed='right')
    # not recomputed to B
    assert first.dominant_class == 'A'
    assert first.determine_dominant_class_prob() == pytest.approx(2 / 7)


def test_merge_with_unlabelled_bucket_stays_unlabelled():
    first = bucket_with({'A': 1})
    first.merge(bucket_with({'A': 4}))
    assert first.dominant_class is None


def test_contains_respects_bounds():
    b = Bucket(pd.Interval(1.0, 2.0, closed='right'))
    assert not b.contains(1.0)
    assert b.contains(1.5)
    assert b.contains(2.0)
    assert not b.contains(2.01)
    assert not b.contains(np.nan)


def test_unbounded_ranges():
    lowest = Bucket(pd.Interval(-np.inf, 0.5, closed='both'))
    highest = Bucket(pd.Interval(0.5, np.inf, closed='right'))
    assert lowest.contains(-1e300)
    assert lowest.contains(0.5)
    assert not highest.contains(0.5)
    assert highest.contains(1e300)
    assert Bucket(WHOLE_LINE).contains(0.0)


def test_span():
    assert span(pd.Interval(-np.inf, 1.0, closed='both'),
                pd.Interval(1.0, 2.0, closed='right')) == pd.Interval(-np.inf, 2.0, closed='both')
    assert span(pd.Interval(1.0, 2.0, closed='right'),
                pd.Interval(2.0, np.inf, closed='right')) == pd.Interval(1.0, np.inf, closed='right')
    # order does not matter
    assert span(pd.Interval(2.0, 3.0, closed='right'),
                pd.Interval(0.0, 1.0, closed='right')) == pd.Interval(0.0, 3.0, closed='right')


def test_round_half_up():
    assert round_half_up(0.125) == 0.13
    assert round_half_up(2.5) == 2.5
    assert round_half_up(-0.125) == -0.12
    assert round_half_up(1.004) == 1.0
