
# reading edge lists and preparing them into graphs the engine accepts.

import numpy as np
import pandas as pd

from massrank.ansi import error, warning, info
from massrank.graph import Graph


def read_edges(fname, sep = None, weighted = None, encoding = 'utf-8') -> pd.DataFrame:
    '''
    Read an edge list with one ``src dst [weight]`` edge per line.

    Fields are separated by whitespace unless ``sep`` is given. Lines starting
    with ``#`` and blank lines are ignored, and gzipped files (``.gz``) are
    read transparently. Without a weight column (or with ``weighted = False``)
    every edge weighs 1.
    '''

    try:
        table = pd.read_csv(
            fname, sep = r'\s+' if sep is None else sep,
            header = None, comment = '#', skip_blank_lines = True,
            encoding = encoding, compression = 'infer'
        )
    except pd.errors.EmptyDataError:
        table = pd.DataFrame(columns = [0, 1])

    ncols = table.shape[1]
    if ncols not in (2, 3):
        error(f'expected 2 or 3 columns in {fname}, got {ncols}.', kind = ValueError)

    if weighted is None: weighted = ncols == 3
    if weighted and ncols < 3:
        error(f'{fname} has no weight column.', kind = ValueError)

    return pd.DataFrame({
        'src': table[0].astype(np.int64).values,
        'dst': table[1].astype(np.int64).values,
        'weight': table[2].astype(np.float64).values if weighted else np.ones(len(table))
    })


def drop_self_references(edges: pd.DataFrame) -> pd.DataFrame:

    self_ref = edges['src'] == edges['dst']
    if self_ref.any():
        warning(f'removed {int(self_ref.sum())} self-referencing edge(s).')
    return edges.loc[~ self_ref].reset_index(drop = True)


def normalize_out_weights(edges: pd.DataFrame) -> pd.DataFrame:
    '''
    Rescale the weights so that the outgoing weights of each source sum to 1.
    The rounding residual of each source is folded into its largest weight.
    '''

    if len(edges) == 0: return edges.copy()
    if (edges['weight'] < 0).any():
        error('edge weights must not be negative.', kind = ValueError)

    totals = edges.groupby('src')['weight'].transform('sum')
    if (totals <= 0).any():
        error('outgoing weights of some vertex sum to zero.', kind = ValueError)

    edges = edges.assign(weight = edges['weight'] / totals).reset_index(drop = True)

    residual = 1.0 - edges.groupby('src')['weight'].sum()
    largest = edges.groupby('src')['weight'].idxmax()
    weights = edges['weight'].values.copy()
    weights[largest.values] += residual.loc[largest.index].values
    return edges.assign(weight = weights)


def uniform_prior(vertex_ids) -> pd.Series:
    '''
    The uniform distribution over the vertices, as a series named ``value``
    indexed by vertex id. The first entry absorbs the rounding residual.
    '''

    vertex_ids = np.asarray(list(vertex_ids), dtype = np.int64)
    if len(vertex_ids) == 0: error('cannot build a prior over no vertices.', kind = ValueError)

    values = np.full(len(vertex_ids), 1.0 / len(vertex_ids))
    values[0] += 1.0 - np.sum(values)
    return pd.Series(values, index = pd.Index(vertex_ids, name = 'id'), name = 'value')


def load_graph(fname, sep = None, weighted = None, vertex_ids = None) -> Graph:
    '''
    Read an edge list into a graph ready for :func:`massrank.run`.

    Self-referencing edges are removed, outgoing weights normalized, and a
    uniform prior put over every vertex named in the file plus the optional
    extra (isolated) ``vertex_ids``.
    '''

    edges = read_edges(fname, sep = sep, weighted = weighted)
    ids = np.union1d(edges['src'].values, edges['dst'].values)
    if vertex_ids is not None:
        ids = np.union1d(ids, np.asarray(list(vertex_ids), dtype = np.int64))

    edges = normalize_out_weights(drop_self_references(edges))
    info(f'loaded {len(ids)} vertices and {len(edges)} edges from {fname}.')
    return Graph(uniform_prior(ids).to_frame('value'), edges)
