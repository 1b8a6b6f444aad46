"""
A small in-memory graph computation substrate.

The pagerank engine is written against a handful of bulk primitives (message
aggregation along edges, outer join of an auxiliary vertex table, elementwise
vertex transform, join of vertex tables). This module implements them over
pandas tables with vectorised numpy operations. A :class:`Graph` is an
immutable snapshot: every primitive returns a new graph that shares the
(read-only) edge table and owns a fresh vertex table.
"""

import numpy as np
import pandas as pd

from massrank.ansi import error, warning
from massrank.configuration import default as cfg
from massrank.parallel import check_merge, reduce_by_key, parallel_reduce_by_key


EDGE_COLUMNS = ['src', 'dst', 'weight']


class Graph:

    def __init__(self, vertices, edges, check: bool = True):
        '''
        Parameters
        ----------
        vertices : pandas.DataFrame or pandas.Series
            Vertex attributes indexed by integer vertex id. A series is taken
            as the ``value`` column.

        edges : pandas.DataFrame
            Edge table with columns ``src``, ``dst`` and ``weight``.

        check : bool
            Verify the vertex ids are unique and every edge endpoint is a
            known vertex. Derived snapshots skip this.
        '''

        if isinstance(vertices, pd.Series): vertices = vertices.to_frame('value')

        if check:
            missing = [x for x in EDGE_COLUMNS if x not in edges.columns]
            if len(missing) > 0:
                error(f'the edge table lacks column(s) {missing}.', kind = ValueError)
            if not vertices.index.is_unique:
                error('vertex ids must be unique.', kind = ValueError)

            edges = edges[EDGE_COLUMNS].astype({
                'src': np.int64, 'dst': np.int64, 'weight': np.float64
            }).reset_index(drop = True)

            known = edges['src'].isin(vertices.index) & edges['dst'].isin(vertices.index)
            if not known.all():
                error(f'{int((~ known).sum())} edge(s) refer to unknown vertices.', kind = ValueError)

        self._vertices = vertices
        self._edges = edges


    @classmethod
    def from_arrays(cls, vertex_ids, values, src, dst, weight = None):

        vertex_ids = np.asarray(vertex_ids, dtype = np.int64)
        src = np.asarray(src, dtype = np.int64)
        dst = np.asarray(dst, dtype = np.int64)
        if weight is None: weight = np.ones(len(src))

        vertices = pd.DataFrame(
            { 'value': np.asarray(values, dtype = np.float64) },
            index = pd.Index(vertex_ids, name = 'id')
        )

        edges = pd.DataFrame({
            'src': src, 'dst': dst,
            'weight': np.asarray(weight, dtype = np.float64)
        })

        return cls(vertices, edges)


    @classmethod
    def from_dict(cls, values, edges = ()):
        '''
        Build a graph from ``{vertex id: prior value}`` and an iterable of
        ``(src, dst, weight)`` tuples.
        '''
        edges = list(edges)
        return cls.from_arrays(
            list(values.keys()), list(values.values()),
            [e[0] for e in edges], [e[1] for e in edges], [e[2] for e in edges]
        )


    @property
    def vertices(self) -> pd.DataFrame:
        return self._vertices

    @property
    def edges(self) -> pd.DataFrame:
        return self._edges

    @property
    def num_vertices(self) -> int:
        return len(self._vertices)

    @property
    def num_edges(self) -> int:
        return len(self._edges)


    def __repr__(self):
        return f'<Graph with {self.num_vertices} vertices and {self.num_edges} edges>'


    def _derive(self, vertices):

        if not isinstance(vertices, pd.DataFrame):
            error('vertex transforms must return a data frame.', kind = TypeError)
        if not vertices.index.equals(self._vertices.index):
            error('vertex transforms must preserve the vertex ids.', kind = ValueError)
        return Graph(vertices, self._edges, check = False)


    def _triplets(self, edges):
        return edges.join(self._vertices.add_prefix('src.'), on = 'src') \
                    .join(self._vertices.add_prefix('dst.'), on = 'dst')


    def triplets(self) -> pd.DataFrame:
        ''' The edge table joined with source (``src.*``) and destination (``dst.*``) attributes. '''
        return self._triplets(self._edges)


    def out_degrees(self) -> pd.Series:
        ''' Out-degree of every vertex with at least one outgoing edge. '''
        return self._edges.groupby('src').size().rename('degree')


    def out_weight_sums(self) -> pd.Series:
        return self._edges.groupby('src')['weight'].sum()


    def aggregate_messages(
        self, send, merge = np.add,
        n_jobs = None, n_partitions = None
    ) -> pd.Series:
        '''
        Send one message along every edge and reduce the messages per
        destination vertex.

        Parameters
        ----------
        send : callable
            Maps a triplet frame (see :meth:`triplets`) to an array holding one
            message per row.

        merge : numpy.ufunc
            Associative and commutative reducer of the messages.

        n_jobs, n_partitions : int
            Number of workers, and of edge partitions. Default to the
            ``parallel.jobs`` and ``parallel.partitions`` configuration.

        Returns
        -------
        pandas.Series
            The reduced message of every vertex that received at least one.
        '''

        check_merge(merge)
        if n_jobs is None: n_jobs = cfg['parallel.jobs']
        if n_partitions is None: n_partitions = cfg['parallel.partitions']

        def reduce_partition(edges):
            triplets = self._triplets(edges)
            messages = np.asarray(send(triplets))
            if messages.shape != (len(triplets),):
                error(f'expected {len(triplets)} messages, got shape {messages.shape}.', kind = ValueError)
            return reduce_by_key(triplets['dst'].values, messages, merge)

        return parallel_reduce_by_key(
            reduce_partition, self._edges, merge,
            n_jobs = n_jobs, n_split = n_partitions,
            backend = cfg['parallel.backend']
        )


    def outer_join_vertices(self, other: pd.Series, combine) -> 'Graph':
        '''
        Left join ``other`` (keyed by vertex id) onto the vertices. Vertices
        absent from ``other`` see ``NaN``. ``combine(vertices, joined)`` returns
        the vertex table of the new snapshot.
        '''
        joined = other.reindex(self._vertices.index)
        return self._derive(combine(self._vertices.copy(), joined))


    def map_vertices(self, fn) -> 'Graph':
        return self._derive(fn(self._vertices.copy()))


    def adjacency(self):
        ''' Sparse weight matrix with rows as sources, in vertex table order. '''

        import scipy.sparse as sp
        index = self._vertices.index
        rows = index.get_indexer(self._edges['src'])
        cols = index.get_indexer(self._edges['dst'])
        return sp.csr_matrix(
            (self._edges['weight'].values, (rows, cols)),
            shape = (self.num_vertices, self.num_vertices)
        )


    def to_networkx(self):

        import networkx as nx
        G = nx.DiGraph()
        for vid, attrs in zip(self._vertices.index, self._vertices.to_dict('records')):
            G.add_node(int(vid), **attrs)

        G.add_weighted_edges_from(zip(
            self._edges['src'].tolist(),
            self._edges['dst'].tolist(),
            self._edges['weight'].tolist()
        ))

        return G


def as_frame(table):
    if isinstance(table, Graph): return table.vertices
    if isinstance(table, pd.Series):
        return table.to_frame('value' if table.name is None else table.name)
    return table


def join(left, right, lsuffix = '.left', rsuffix = '.right') -> pd.DataFrame:
    ''' Inner join of two vertex tables (graphs, frames or series) on the vertex id. '''
    return as_frame(left).join(as_frame(right), how = 'inner', lsuffix = lsuffix, rsuffix = rsuffix)


def from_networkx(G, weight = 'weight', value = 'value', prior = None) -> Graph:
    '''
    Convert a networkx graph with integer nodes.

    Vertex values are taken from ``prior`` (a mapping of node to value) when
    given, otherwise from the ``value`` node attribute when every node has one,
    otherwise a uniform prior is used. Missing edge weights default to 1.
    '''

    if not G.is_directed():
        warning('undirected graph is converted with one edge in each direction.')
        G = G.to_directed()

    nodes = list(G.nodes())
    if not all(isinstance(x, (int, np.integer)) and not isinstance(x, bool) for x in nodes):
        error('vertex ids must be integers.', kind = TypeError)

    if prior is not None: values = [prior.get(x, 0.0) for x in nodes]
    elif len(nodes) > 0 and all(value in G.nodes[x] for x in nodes):
        values = [G.nodes[x][value] for x in nodes]
    else:
        from massrank.io import uniform_prior
        values = uniform_prior(nodes).values

    edges = list(G.edges(data = True))
    return Graph.from_arrays(
        nodes, values,
        [u for u, _, _ in edges], [v for _, v, _ in edges],
        [d.get(weight, 1.0) for _, _, d in edges]
    )
