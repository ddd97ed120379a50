"""
Time point handling.

The estimator accepts any time point type whose difference is a number of
seconds, a ``datetime.timedelta`` or a ``numpy.timedelta64``.
"""

import datetime

import numpy as np


def elapsed_seconds(later, earlier):
    """
    Seconds elapsed from ``earlier`` to ``later``.

    Negative when ``later`` precedes ``earlier``.

    Examples
    --------
    >>> elapsed_seconds(2.5, 1.0)
    1.5
    >>> elapsed_seconds(np.datetime64('2024-01-01T00:00:01'),
    ...                 np.datetime64('2024-01-01T00:00:00'))
    1.0
    """
    duration = later - earlier
    if isinstance(duration, datetime.timedelta):
        return duration.total_seconds()
    if isinstance(duration, np.timedelta64):
        return float(duration / np.timedelta64(1, 's'))
    return float(duration)
