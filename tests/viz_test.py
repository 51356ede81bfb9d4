import matplotlib

matplotlib.use('Agg')

import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from lucskdd import LucsKddDiscretizer, plot_divisions
from lucskdd.discretization.sequence import build_sequence


def test_plot_divisions():
    x = np.linspace(0, 10, 101)
    y = np.where(x < 5, 'A', 'B')
    seq = build_sequence('x', 'y', zip(x, y), 0.0, 10.0, max_divisions=5)

    ax = plot_divisions(seq)
    assert len(ax.patches) == 2
    assert [p.get_height() for p in ax.patches] == [d.count for d in seq.divisions()]
    assert ax.get_title() == 'Divisions of x'
    assert [t.get_text() for t in ax.texts] == ['A', 'B']
    plt.close('all')


def test_plot_fitted_divisions_on_axes():
    X = pd.DataFrame({'x': np.arange(20.0)})
    y = ['lo'] * 10 + ['hi'] * 10
    disc = LucsKddDiscretizer().fit(X, y)

    _, ax = plt.subplots(1, 1)
    assert plot_divisions(disc.divisions_['x'], ax=ax) is ax
    assert ax.get_title() == 'Divisions'
    assert len(ax.patches) == len(disc.divisions_['x'])
    plt.close('all')
