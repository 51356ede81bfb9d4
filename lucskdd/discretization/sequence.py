'''
# LUCS-KDD DN discretization

Supervised discretization of a single continuous feature. The feature's
range is cut into equal-width buckets, every bucket is labelled with its
dominant class (imputed from the nearest labelled buckets where there is
none), neighbouring buckets with the same label are merged into divisions,
and divisions are then merged greedily by dominant-class purity until at
most `max_divisions` remain.

**Reference:**
Coenen, F. "The LUCS-KDD Discretised/normalised ARM and CARM Data Library." (2003).
'''
import logging
import math
import numbers
from collections import namedtuple

import numpy as np
import pandas as pd

from lucskdd.discretization.bucket import Bucket, WHOLE_LINE, round_half_up

LOGGER = logging.getLogger(__name__)

MAX_BINS = 100

Division = namedtuple('Division', 'range dominant_class count')


def bin_count(low, upp, integer_range=False):
    """Number of initial buckets for a feature ranging over [low, upp].

    Integer features spanning fewer than `MAX_BINS` units get one bucket
    per unit, everything else gets `MAX_BINS` buckets.
    """
    if integer_range:
        r = int(math.ceil(upp - low))
        if r < MAX_BINS:
            return r
    return MAX_BINS


def check_max_divisions(max_divisions):
    if isinstance(max_divisions, bool) or not isinstance(max_divisions, numbers.Integral):
        raise ValueError("max_divisions must be an int. Got max_divisions={!r} instead."
                         .format(max_divisions))
    if max_divisions < 1:
        raise ValueError("max_divisions must be at least 1. Got max_divisions={!r} instead."
                         .format(max_divisions))


def trial_merge_probability(first, second):
    """Dominant class probability of the bucket that merging `first` and
    `second` would produce. Neither bucket is modified.
    """
    scratch = Bucket(first.range)
    scratch.merge(first)
    scratch.merge(second)
    return scratch.determine_dominant_class_prob()


def _is_missing(value):
    return value is None or (np.ndim(value) == 0 and pd.isna(value))


class DiscretizationSequence:
    """Ordered buckets covering the whole real line for one feature.

    Params
    ------
    feature : str
        Name of the feature being discretized.

    class_attribute : str
        Name of the class column.

    Attributes
    ----------
    buckets : list of Bucket
        Buckets in ascending order of range. After `fill` they are
        contiguous and jointly cover (-inf, +inf); every later step keeps
        that true.
    """

    def __init__(self, feature=None, class_attribute=None):
        self.feature = feature
        self.class_attribute = class_attribute
        self.buckets = []

    def __len__(self):
        return len(self.buckets)

    def __getitem__(self, index):
        return self.buckets[index]

    def fill(self, rows, low, upp, integer_range=False):
        """Create the initial equal-width buckets and count rows into them.

        Parameters
        ----------
        rows : iterable of (value, label)
            Feature value and class label of every row. Rows where
            either is missing (None or NaN) are skipped.

        low, upp : float
            Smallest and largest finite feature value in the data. Values
            outside [low, upp], infinities included, go to the first or last
            bucket.

        integer_range : bool
            Whether the feature is integer typed.

        Returns
        -------
        self
        """
        self.buckets = []
        if upp == low:
            # zero variance
            n_bins = 1
            self.buckets.append(Bucket(WHOLE_LINE))
        else:
            n_bins = bin_count(low, upp, integer_range)
            self.buckets = self._equal_width_buckets(low, upp, n_bins)

        for value, label in rows:
            if _is_missing(value) or _is_missing(label):
                continue
            if n_bins == 1:
                b = 0
            else:
                z = (value - low) / (upp - low)
                if z <= 0:
                    b = 0
                elif z >= 1:
                    b = n_bins - 1
                else:
                    b = int(math.ceil(n_bins * z - 1))
            self.buckets[b].add(label)
        return self

    @staticmethod
    def _equal_width_buckets(low, upp, n_bins):
        if n_bins == 1:
            return [Bucket(WHOLE_LINE)]

        width = (upp - low) / n_bins
        buckets = []
        lower = low
        for i in range(n_bins):
            if i == 0:
                interval = pd.Interval(-np.inf, round_half_up(lower + width), closed='both')
            elif i == n_bins - 1:
                interval = pd.Interval(round_half_up(lower), np.inf, closed='right')
            else:
                interval = pd.Interval(round_half_up(lower), round_half_up(lower + width),
                                       closed='right')
            buckets.append(Bucket(interval))
            lower += width
        return buckets

    def determine_dominant_classes(self, fallback_class=None):
        """Give every bucket a dominant class.

        Buckets without one of their own take the class of the nearest
        bucket that has one. A gap between two labelled buckets is split
        in half; the middle bucket of an odd-length gap takes the class of
        the later bucket.

        Parameters
        ----------
        fallback_class : object
            Label given to every bucket if no bucket has a dominant class.
        """
        anchor = -1
        at_start = True
        for i, bucket in enumerate(self.buckets):
            if not bucket.has_dominant_class():
                continue
            bucket.determine_dominant_class()
            if anchor != i - 1:
                if at_start:
                    for j in range(i):
                        self.buckets[j].dominant_class = bucket.dominant_class
                else:
                    self._split_gap(anchor, i)
            at_start = False
            anchor = i

        if anchor == -1:
            for bucket in self.buckets:
                bucket.dominant_class = fallback_class
        elif anchor != len(self.buckets) - 1:
            label = self.buckets[anchor].dominant_class
            for bucket in self.buckets[anchor + 1:]:
                bucket.dominant_class = label

    def _split_gap(self, lo, hi):
        old_class = self.buckets[lo].dominant_class
        new_class = self.buckets[hi].dominant_class
        left, right = lo + 1, hi - 1
        while left <= right:
            self.buckets[left].dominant_class = old_class
            self.buckets[right].dominant_class = new_class
            left += 1
            right -= 1

    def form_divisions(self):
        """Merge runs of neighbouring buckets sharing a dominant class.
        """
        i = 0
        while i < len(self.buckets):
            current = self.buckets[i]
            while (i + 1 < len(self.buckets)
                   and self.buckets[i + 1].dominant_class == current.dominant_class):
                current.merge(self.buckets.pop(i + 1))
            i += 1

    def select_best_merge(self):
        """Positions of the neighbouring pair whose merge has the highest
        dominant class probability. The earliest pair wins ties, and
        (0, 1) is returned if no merge has a dominant class at all.
        """
        best_merge = (0, 1)
        max_prob = 0.0
        for i in range(len(self.buckets) - 1):
            prob = trial_merge_probability(self.buckets[i], self.buckets[i + 1])
            if prob > max_prob:
                best_merge = (i, i + 1)
                max_prob = prob
        return best_merge

    def merge_divisions(self):
        """Merge the best pair of divisions, then fold in a neighbour on
        either side that carries the same label.
        """
        if len(self.buckets) < 2:
            raise ValueError("Cannot merge divisions of a sequence with {} bucket(s)."
                             .format(len(self.buckets)))

        current, following = self.select_best_merge()
        # the survivor keeps its own label
        self.buckets[current].merge(self.buckets.pop(following))

        nxt = current + 1
        if nxt < len(self.buckets) and self._same_label(nxt, current):
            self.buckets[current].merge(self.buckets.pop(nxt))

        prev = current - 1
        if prev >= 0 and self._same_label(prev, current):
            self.buckets[prev].merge(self.buckets.pop(current))

    def _same_label(self, i, j):
        return str(self.buckets[i].dominant_class) == str(self.buckets[j].dominant_class)

    def get_category(self, value):
        """Category of `value`, "Interval_<k>" for the k-th bucket containing
        it, or "Interval_-1" if none does.
        """
        for i, bucket in enumerate(self.buckets):
            if bucket.contains(value):
                return 'Interval_{}'.format(i)
        return 'Interval_-1'

    def divisions(self):
        return [Division(b.range, b.dominant_class, b.count) for b in self.buckets]


def build_sequence(feature, class_attribute, rows, low, upp, integer_range=False,
                   max_divisions=5, fallback_class=None):
    """Run the full discretization pipeline for one feature.

    Parameters
    ----------
    feature, class_attribute : str
        Names of the feature and class columns.

    rows : iterable of (value, label)
        See `DiscretizationSequence.fill`.

    low, upp : float
        Smallest and largest feature value.

    integer_range : bool
        Whether the feature is integer typed.

    max_divisions : int
        Largest number of divisions to keep; at least 1.

    fallback_class : object
        Label used when no bucket has a dominant class.

    Returns
    -------
    sequence : DiscretizationSequence
    """
    check_max_divisions(max_divisions)

    sequence = DiscretizationSequence(feature, class_attribute)
    sequence.fill(rows, low, upp, integer_range=integer_range)
    n_buckets = len(sequence)

    sequence.determine_dominant_classes(fallback_class=fallback_class)
    sequence.form_divisions()
    n_formed = len(sequence)

    while len(sequence) > max_divisions:
        sequence.merge_divisions()

    LOGGER.debug("%s: %d buckets, %d divisions formed, %d kept",
                 feature, n_buckets, n_formed, len(sequence))
    return sequence
