
import numpy as np

from massrank.ansi import error
from massrank.configuration import default as cfg
from massrank.errors import (
    SelfReferencingEdges,
    NonNormalizedEdges,
    UnnormalizedPriorVector,
    TeleportProbabilityOutOfRange,
    MaxIterationsNotPositive,
    ConvergenceThresholdOutOfRange,
    TooFewVertices
)


def num_self_references(graph) -> int:
    ''' Number of distinct vertices having an edge to themselves. '''
    edges = graph.edges
    return int(edges.loc[edges['src'] == edges['dst'], 'src'].nunique())


def num_non_normalized_edges(graph, eps = None) -> int:
    ''' Number of vertices whose outgoing weights do not sum to 1. '''
    if eps is None: eps = cfg['pagerank.eps']
    sums = graph.out_weight_sums()
    return int((np.abs(1.0 - sums.values) > eps).sum())


def is_vector_normalized(vector, eps = None) -> bool:
    if eps is None: eps = cfg['pagerank.eps']
    return bool(abs(1.0 - float(np.sum(np.asarray(vector, dtype = np.float64)))) <= eps)


def validate(
    graph,
    teleport_prob: float,
    max_iterations: int,
    convergence_threshold = None,
    eps = None
) -> None:
    '''
    Check the input graph and the run parameters. Raises the
    :class:`massrank.errors.ValidationError` subclass of the first failed
    invariant, and returns nothing otherwise.
    '''

    nself = num_self_references(graph)
    if nself != 0:
        error(
            f'number of vertices with self-referencing edges must be 0, got {nself}.',
            kind = SelfReferencingEdges
        )

    nonnorm = num_non_normalized_edges(graph, eps)
    if nonnorm != 0:
        error(
            f'number of vertices with non-normalized outgoing edges must be 0, got {nonnorm}.',
            kind = NonNormalizedEdges
        )

    if not is_vector_normalized(graph.vertices['value'], eps):
        error(
            f'the prior vector must sum to 1.0, got {float(graph.vertices["value"].sum())!r}.',
            kind = UnnormalizedPriorVector
        )

    # the dangling correction spreads a vertex's mass over the n - 1 others.
    if graph.num_vertices < 2:
        error(
            f'the graph must have at least 2 vertices, got {graph.num_vertices}.',
            kind = TooFewVertices
        )

    if not (0.0 <= teleport_prob < 1.0):
        error(
            f'teleport probability must be in [0.0, 1.0), got {teleport_prob!r}.',
            kind = TeleportProbabilityOutOfRange
        )

    integral = isinstance(max_iterations, (int, np.integer)) and not isinstance(max_iterations, bool)
    if not (integral and max_iterations > 0):
        error(
            f'max iterations must be an integer greater than 0, got {max_iterations!r}.',
            kind = MaxIterationsNotPositive
        )

    if convergence_threshold is not None and not (0.0 < convergence_threshold < 1.0):
        error(
            f'convergence threshold must be in (0.0, 1.0), got {convergence_threshold!r}.',
            kind = ConvergenceThresholdOutOfRange
        )
