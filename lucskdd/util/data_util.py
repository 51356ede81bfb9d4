import math

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_integer_dtype

from lucskdd.discretization.sequence import MAX_BINS


def feature_range(x):
    """Range metadata for a numeric column.

    Parameters
    ----------
    x : array-like of shape (n_samples,)

    Returns
    -------
    low, upp : float
        Minimum and maximum over the finite values (both 0.0 when there
        are none). Infinite values fall into the first or last bucket.

    is_small_integer_range : bool
        True for integer (or boolean) columns spanning fewer than
        `MAX_BINS` units.
    """
    x = pd.Series(x)
    values = x.dropna().astype(float)
    values = values[np.isfinite(values)]
    if values.empty:
        return 0.0, 0.0, False
    low, upp = float(values.min()), float(values.max())
    is_integer = is_integer_dtype(x.dtype) or is_bool_dtype(x.dtype)
    return low, upp, bool(is_integer and math.ceil(upp - low) < MAX_BINS)


def class_domain_values(y):
    """Known values of the class column: the categories of a categorical,
    otherwise the non-missing values in order of first appearance.
    """
    y = pd.Series(y)
    if isinstance(y.dtype, pd.CategoricalDtype):
        return list(y.cat.categories)
    return list(pd.unique(y.dropna()))


def iter_rows(x, y):
    """Yield (value, label) pairs, with None in place of missing entries.
    """
    for value, label in zip(np.asarray(pd.Series(x).astype(float)), pd.Series(y)):
        yield (None if np.isnan(value) else float(value),
               None if pd.isna(label) else label)
