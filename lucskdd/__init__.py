"""
.. include:: ../readme.md
"""
# Python `lucskdd` package for supervised LUCS-KDD DN discretization compatible with scikit-learn.

from .discretization.bucket import Bucket
from .discretization.discretizer import LucsKddDiscretizer
from .discretization.sequence import DiscretizationSequence, Division, build_sequence, \
    trial_merge_probability
from .util.viz import plot_divisions

DISCRETIZERS = [LucsKddDiscretizer]
