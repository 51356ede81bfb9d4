import math

import numpy as np
import pandas as pd

WHOLE_LINE = pd.Interval(-np.inf, np.inf, closed='both')

_CLOSED = {(True, True): 'both',
           (True, False): 'left',
           (False, True): 'right',
           (False, False): 'neither'}


def round_half_up(a):
    """Round to two decimal places, with halves rounded up.
    """
    return math.floor(a * 100.0 + 0.5) / 100.0


def span(first, second):
    """Smallest single interval enclosing both intervals.

    Parameters
    ----------
    first, second : pandas.Interval

    Returns
    -------
    pandas.Interval
        Each bound is taken from the interval reaching furthest in that
        direction; on equal bounds the result is closed if either is.
    """
    if first.left < second.left:
        left, closed_left = first.left, first.closed_left
    elif second.left < first.left:
        left, closed_left = second.left, second.closed_left
    else:
        left, closed_left = first.left, first.closed_left or second.closed_left

    if first.right > second.right:
        right, closed_right = first.right, first.closed_right
    elif second.right > first.right:
        right, closed_right = second.right, second.closed_right
    else:
        right, closed_right = first.right, first.closed_right or second.closed_right

    return pd.Interval(left, right, closed=_CLOSED[(closed_left, closed_right)])


class Bucket:
    """A contiguous interval of a feature's range with a tally of the
    class labels observed inside it.

    Params
    ------
    interval : pandas.Interval
        Range of feature values covered by the bucket. Infinite bounds
        are allowed.

    Attributes
    ----------
    count : int
        Total number of observations added.

    class_frequency : dict
        Maps class label -> number of observations with that label.
        Labels never seen are absent; use `frequency` to read it.

    dominant_class : object or None
        Cached result of `determine_dominant_class`. It is not recomputed
        by `merge`: a bucket keeps its own label after absorbing another.
    """

    def __init__(self, interval):
        self.range = interval
        self.count = 0
        self.class_frequency = {}
        self.dominant_class = None

    def frequency(self, label):
        """Number of observations of class `label`, 0 if never seen.
        """
        return self.class_frequency.get(label, 0)

    def add(self, label):
        """Add one observation of class `label`.
        """
        self.count += 1
        self.class_frequency[label] = self.frequency(label) + 1

    def has_dominant_class(self):
        """True if a single class has a strictly larger count than any other.
        """
        if self.count == 0:
            return False
        if len(self.class_frequency) == 1:
            return True

        # only the two largest counts matter
        values = sorted(self.class_frequency.values())
        return values[-1] != values[-2]

    def determine_dominant_class(self):
        if not self.has_dominant_class():
            self.dominant_class = None
            return
        self.dominant_class = max(self.class_frequency, key=self.class_frequency.get)

    def determine_dominant_class_prob(self):
        """Proportion of the bucket's observations in its dominant class.

        Returns 0.0 if the bucket has no unambiguous dominant class. A
        previously cached `dominant_class` is used as is.
        """
        if not self.has_dominant_class():
            return 0.0
        if self.dominant_class is None:
            self.determine_dominant_class()
        return self.frequency(self.dominant_class) / self.count

    def merge(self, other):
        """Absorb the observations and range of `other`.

        `dominant_class` is left untouched.
        """
        self.count += other.count
        for label, n in other.class_frequency.items():
            self.class_frequency[label] = self.frequency(label) + n
        self.range = span(self.range, other.range)

    def contains(self, value):
        return value in self.range

    def __repr__(self):
        return 'Bucket({}, count={}, dominant_class={!r})'.format(
            self.range, self.count, self.dominant_class)
