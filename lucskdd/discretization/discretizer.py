import logging
import warnings

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from pandas.api.types import is_numeric_dtype
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.preprocessing import OneHotEncoder
from sklearn.utils.validation import check_is_fitted
from tqdm import tqdm

from lucskdd.discretization.sequence import build_sequence, check_max_divisions
from lucskdd.util.data_util import class_domain_values, feature_range, iter_rows

LOGGER = logging.getLogger(__name__)


def _fit_feature(feature, x, y, class_attribute, max_divisions, fallback_class):
    low, upp, integer_range = feature_range(x)
    return build_sequence(feature, class_attribute, iter_rows(x, y), low, upp,
                          integer_range=integer_range,
                          max_divisions=max_divisions,
                          fallback_class=fallback_class)


class LucsKddDiscretizer(TransformerMixin, BaseEstimator):
    """
    Supervised discretization of numeric columns with the LUCS-KDD DN
    algorithm. Each column is cut into at most `max_divisions`
    intervals, each labelled with a dominant class, and replaced by the
    name of the interval ("Interval_<k>") every value falls in.

    Params
    ------
    max_divisions : int, default=5
        Largest number of intervals per column. Must be at least 1.

    dcols : list of strings
        The names of the columns to be discretized; by default,
        discretize all numeric columns in X.

    encode : {'label', 'onehot'}, default='label'
        Method used to encode the transformed result.

        label
            Replace each column by its interval names, in place.
            Missing values stay missing.
        onehot
            One-hot encode the interval names of each column and
            return a dense data frame. Missing values encode as all
            zeros.

    fallback_class : object, default=None
        Class assigned to every interval of a column in which no interval
        has a dominant class. By default, the first known value of y (its
        first category if y is categorical).

    n_jobs : int, default=None
        Number of columns fitted in parallel; passed to joblib.

    verbose : bool, default=False
        Show a progress bar over the columns while fitting.

    Attributes
    ----------
    dcols_ : list of strings
        Columns that were discretized.

    classes_ : list
        Known values of the class column.

    sequences_ : dict
        Maps column name -> fitted DiscretizationSequence.

    divisions_ : dict
        Maps column name -> list of Division(range, dominant_class, count)
        in ascending order.

    onehot_ : object of class OneHotEncoder()
        One hot encoding fit. Ignored if encode != 'onehot'
    """

    def __init__(self, max_divisions=5, dcols=[], encode='label',
                 fallback_class=None, n_jobs=None, verbose=False):
        self.max_divisions = max_divisions
        self.dcols = dcols
        self.encode = encode
        self.fallback_class = fallback_class
        self.n_jobs = n_jobs
        self.verbose = verbose

    def _validate_args(self):
        """
        Check if max_divisions, encode arguments are valid.
        """
        check_max_divisions(self.max_divisions)

        valid_encode = ('label', 'onehot')
        if self.encode not in valid_encode:
            raise ValueError("Valid options for 'encode' are {}. Got encode={!r} instead."
                             .format(valid_encode, self.encode))

    def _validate_X(self, X):
        if not isinstance(X, pd.DataFrame):
            raise ValueError("X should be a pandas data frame. Got {} instead."
                             .format(type(X).__name__))

    def _validate_dcols(self, X):
        """
        Check if dcols argument is valid.
        """
        for col in self.dcols_:
            if col not in X.columns:
                raise ValueError("{} is not a column in X.".format(col))
            if not is_numeric_dtype(X[col].dtype):
                raise ValueError("Cannot discretize non-numeric columns.")

    def _fit_preprocessing(self, X, y):
        """
        Initial checks before fitting the estimator.
        """
        self._validate_X(X)
        if y is None:
            raise ValueError("LucsKddDiscretizer is supervised; y must be provided.")
        if len(y) != len(X):
            raise ValueError("X and y have inconsistent lengths: {} and {}."
                             .format(len(X), len(y)))

        # by default, discretize all numeric columns
        if len(self.dcols) == 0:
            self.dcols_ = [col for col in X.columns if is_numeric_dtype(X[col].dtype)]
        else:
            self.dcols_ = list(self.dcols)

        self._validate_args()
        self._validate_dcols(X)

    def fit(self, X, y):
        """
        Fit the estimator.

        Parameters
        ----------
        X : data frame of shape (n_samples, n_features)
            (Training) data to be discretized.

        y : array-like of shape (n_samples,)
            Class label of every row. Rows with a missing label are
            ignored.

        Returns
        -------
        self
        """
        self._fit_preprocessing(X, y)

        if isinstance(y, pd.Series):
            class_attribute = y.name if y.name is not None else 'y'
            y = y.reset_index(drop=True)
        else:
            class_attribute = 'y'
            y = pd.Series(y)

        self.classes_ = class_domain_values(y)
        if self.fallback_class is not None:
            fallback_class = self.fallback_class
        elif len(self.classes_) > 0:
            fallback_class = self.classes_[0]
        else:
            fallback_class = None

        LOGGER.info("Discretizing %d column(s) against %s into at most %d divisions",
                    len(self.dcols_), class_attribute, self.max_divisions)

        for col in self.dcols_:
            if X[col].isna().all():
                warnings.warn("Column {} has no non-missing values; all of it is mapped "
                              "to a single interval.".format(col))

        sequences = Parallel(n_jobs=self.n_jobs)(
            delayed(_fit_feature)(col, X[col].reset_index(drop=True), y, class_attribute,
                                  self.max_divisions, fallback_class)
            for col in tqdm(self.dcols_, disable=not self.verbose)
        )
        self.sequences_ = dict(zip(self.dcols_, sequences))
        self.divisions_ = {col: seq.divisions() for col, seq in self.sequences_.items()}

        for col in self.dcols_:
            self._log_divisions(col)

        # fit onehot encoded X if specified
        if self.encode == 'onehot':
            categories = [['Interval_{}'.format(i) for i in range(len(self.sequences_[col]))]
                          for col in self.dcols_]
            onehot = OneHotEncoder(categories=categories, handle_unknown='ignore',
                                   sparse_output=False)
            onehot.fit(self._categorize(X).to_numpy(dtype=object))
            self.onehot_ = onehot

        return self

    def _log_divisions(self, col):
        LOGGER.debug("%s:", col)
        LOGGER.debug("%8s%20s%20s", "Category", "Class", "Range")
        for i, division in enumerate(self.divisions_[col]):
            LOGGER.debug("%8s%20s%20s", i, division.dominant_class, division.range)

    def _categorize(self, X):
        """Interval names of the dcols_ columns of X; missing values stay NaN.
        """
        categorized = {}
        for col in self.dcols_:
            sequence = self.sequences_[col]
            categorized[col] = pd.Series(
                [np.nan if pd.isna(v) else sequence.get_category(float(v)) for v in X[col]],
                index=X.index, dtype=object)
        return pd.DataFrame(categorized, index=X.index, columns=self.dcols_)

    def category_of(self, feature, value):
        """Interval name of a single value of a fitted column.
        """
        check_is_fitted(self)
        return self.sequences_[feature].get_category(value)

    def transform(self, X):
        """
        Discretize the data.

        Parameters
        ----------
        X : data frame of shape (n_samples, n_features)
            Data to be discretized.

        Returns
        -------
        X_discretized : data frame
            Data with features in dcols transformed to interval names
            (or their one-hot encoding). All other features remain
            unchanged.
        """
        check_is_fitted(self)
        self._validate_X(X)
        self._validate_dcols(X)

        discretized_df = self._categorize(X)

        if self.encode == 'label':
            X_discretized = X.copy()
            for col in self.dcols_:
                X_discretized[col] = discretized_df[col]
            return X_discretized

        colnames = [str(col) for col in self.dcols_]
        onehot_df = pd.DataFrame(self.onehot_.transform(discretized_df.to_numpy(dtype=object)),
                                 columns=self.onehot_.get_feature_names_out(colnames),
                                 index=X.index).astype(int)

        # join discretized columns with rest of X
        cols = [col for col in X.columns if col not in self.dcols_]
        return pd.concat([onehot_df, X[cols]], axis=1)
