import numpy as np
from matplotlib import pyplot as plt


def plot_divisions(sequence, ax=None):
    """Bar chart of the number of observations in each division, with the
    division's range as tick label and its dominant class above the bar.

    Parameters
    ----------
    sequence : DiscretizationSequence or list of Division

    ax : matplotlib Axes, optional
    """
    if ax is None:
        _, ax = plt.subplots(1, 1)
    divisions = sequence.divisions() if hasattr(sequence, 'divisions') else list(sequence)

    positions = np.arange(len(divisions))
    counts = [d.count for d in divisions]
    ax.bar(positions, counts)
    for x, d in zip(positions, divisions):
        ax.annotate(str(d.dominant_class), (x, d.count), ha='center', va='bottom')

    ax.set_xticks(positions)
    ax.set_xticklabels([str(d.range) for d in divisions], rotation=45, ha='right')
    ax.set_xlabel("Division")
    ax.set_ylabel("Count")
    feature = getattr(sequence, 'feature', None)
    ax.set_title("Divisions of {}".format(feature) if feature is not None else "Divisions")
    return ax
