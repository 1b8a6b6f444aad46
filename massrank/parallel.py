
import os
import numpy as np
import pandas as pd
from joblib import delayed, Parallel

from massrank.ansi import error


def get_n_jobs(n_jobs):
    ''' Number of workers, counted from the cpu count when negative. None and 0 run serially. '''

    ncpu = os.cpu_count() or 1
    if n_jobs is None or n_jobs == 0 or ncpu + 1 + n_jobs <= 0: return 1
    elif n_jobs > ncpu: return ncpu
    elif n_jobs < 0: return ncpu + 1 + n_jobs
    else: return n_jobs


def partition(frame, n_split):
    ''' Split a frame row-wise into at most ``n_split`` non-empty chunks. '''

    if n_split is None or n_split <= 1 or len(frame) <= 1: return [frame]
    n_split = min(n_split, len(frame))
    ixs = np.array_split(np.arange(len(frame)), n_split)
    return [frame.iloc[ix] for ix in ixs if len(ix) > 0]


def check_merge(merge):
    if not isinstance(merge, np.ufunc) or merge.nin != 2:
        error(
            f'the merge function must be a binary numpy ufunc (e.g. `numpy.add`), got `{merge!r}`.',
            kind = TypeError
        )


def reduce_by_key(keys, values, merge = np.add):
    '''
    Reduce ``values`` sharing the same key with the binary ufunc ``merge``.

    Parameters
    ----------
    keys : array-like
        One key per value. Keys need not be sorted.

    values : array-like
        The values to reduce, aligned with ``keys``.

    merge : numpy.ufunc
        An associative and commutative reducer. Its ``reduceat`` is applied 
        over runs of equal keys after a stable sort.

    Returns
    -------
    pandas.Series
        Reduced value indexed by the unique keys, in ascending order.
    '''

    keys = np.asarray(keys)
    values = np.asarray(values)
    if len(keys) != len(values):
        error(f'got {len(keys)} keys but {len(values)} values.', kind = ValueError)
    if len(keys) == 0: return pd.Series(values[:0], index = keys[:0])

    order = np.argsort(keys, kind = 'stable')
    keys, values = keys[order], values[order]
    unique, starts = np.unique(keys, return_index = True)
    return pd.Series(merge.reduceat(values, starts), index = unique)


def parallel_reduce_by_key(
    callback,
    frame,
    merge = np.add,
    n_jobs = None,
    n_split = None,
    backend: str = 'threading'
):
    '''
    Apply ``callback`` to each row partition of ``frame`` and combine the
    partial results.

    ``callback`` must return a :class:`pandas.Series` keyed like the output of
    :func:`reduce_by_key`. Partial results are merged with the same reducer, so
    the outcome only depends on the partitioning through floating point 
    rounding. With a single partition, the callback runs in the calling thread.
    '''

    n_jobs = get_n_jobs(n_jobs)
    if n_split is None: n_split = n_jobs
    chunks = partition(frame, n_split)

    if len(chunks) == 1: return callback(chunks[0])

    partials = Parallel(n_jobs = n_jobs, backend = backend)(
        delayed(callback)(chunk) for chunk in chunks
    )

    combined = pd.concat(partials)
    return reduce_by_key(combined.index.values, combined.values, merge)
