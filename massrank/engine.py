"""
PageRank by power iteration over a weighted directed graph.

Vertices without outgoing edges ("dangling" vertices) cannot pass their mass
along edges. Rather than giving them a self loop, each round removes the share
a dangling vertex would have kept for itself and spreads the total dangling
mass uniformly over all vertices, so that the result stays a probability
distribution without the dangling vertices ranking themselves.

One round maps the values ``v`` to::

    v'(x) = (1 - t) * in(x) + t / n
            - [x dangling] * (1 - t) / (n - 1) * v(x)
            + (1 - t) / (n - 1) * sum(v(d) for d dangling)

where ``in(x)`` is the weighted sum of the values of the in-neighbours of
``x`` and ``t`` the teleport probability.
"""

from collections import namedtuple

import numpy as np
import pandas as pd

from massrank.ansi import info, format_probability
from massrank.configuration import default as cfg
from massrank.graph import Graph, join
from massrank.validation import validate


RUNNING = 'Running'
CONVERGED = 'Converged'
MAX_ITERATIONS_REACHED = 'MaxIterationsReached'

IterationState = namedtuple('IterationState', ['iteration', 'values', 'delta', 'status'])

# default of the run parameters: look the value up in the configuration.
UNSET = object()


def vertex_update(incoming_sum, teleport_prob, n):
    ''' The new value of a vertex from its incoming mass plus the teleport mass. '''
    return ((1 - teleport_prob) * incoming_sum) + (teleport_prob / n)


def dangling_vertex_update(starting_value, teleport_prob, n):
    '''
    The share of a dangling vertex's mass given to each other vertex. The
    ``n - 1`` excludes the vertex itself.
    '''
    return (1 - teleport_prob) * (1.0 / (n - 1)) * starting_value


def build_working_graph(graph: Graph) -> Graph:
    ''' Attach a ``dangling`` flag (no outgoing edges) to every vertex. '''

    def attach(vertices, degrees):
        return pd.DataFrame({
            'value': vertices['value'].astype(np.float64),
            'dangling': degrees.isna() | (degrees == 0)
        }, index = vertices.index)

    return graph.outer_join_vertices(graph.out_degrees(), attach)


def iterate(
    graph: Graph, teleport_prob: float, n: int,
    n_jobs = None, n_partitions = None
) -> Graph:
    ''' A single round over the working graph, returning the next snapshot. '''

    def update(vertices, incoming):
        incoming = incoming.fillna(0.0).values
        dangling = vertices['dangling'].values
        updated = vertex_update(incoming, teleport_prob, n)
        correction = np.where(
            dangling,
            dangling_vertex_update(vertices['value'].values, teleport_prob, n),
            0.0
        )

        return vertices.assign(value = updated - correction)

    messages = graph.aggregate_messages(
        lambda t: t['src.value'].values * t['weight'].values, np.add,
        n_jobs = n_jobs, n_partitions = n_partitions
    )

    # taken before the update below discards the old dangling values.
    vertices = graph.vertices
    dangling_mass = float(vertices.loc[vertices['dangling'], 'value'].sum())

    intermediate = graph.outer_join_vertices(messages, update)

    missing_mass = dangling_vertex_update(dangling_mass, teleport_prob, n)
    return intermediate.map_vertices(
        lambda v: v.assign(value = v['value'] + missing_mass)
    )


def delta(left: Graph, right: Graph) -> float:
    ''' L1 distance between the value vectors of two snapshots. '''
    joined = join(left.vertices['value'], right.vertices['value'])
    return float(np.abs(joined['value.left'] - joined['value.right']).sum())


def resolve_parameters(teleport_prob, max_iterations, convergence_threshold):
    '''
    Fill unset parameters from the configuration. An explicit ``None``
    threshold is kept: it means no threshold, not the configured one.
    '''

    if teleport_prob is UNSET or teleport_prob is None: teleport_prob = cfg['pagerank.teleport']
    if max_iterations is UNSET or max_iterations is None: max_iterations = cfg['pagerank.max.iterations']
    if convergence_threshold is UNSET: convergence_threshold = cfg['pagerank.convergence']
    return teleport_prob, max_iterations, convergence_threshold


def iterations(
    graph: Graph,
    teleport_prob = UNSET,
    max_iterations = UNSET,
    convergence_threshold = UNSET,
    n_jobs = None,
    n_partitions = None
):
    '''
    Validate the input and return a generator over the rounds of the power
    iteration.

    Validation happens immediately, not on the first ``next()``. Each round
    yields an :class:`IterationState` holding the round number (from 1), the
    values as a series named ``pagerank``, the L1 change from the previous
    round (``None`` without a convergence threshold) and the loop status:
    ``'Running'``, ``'Converged'`` or ``'MaxIterationsReached'``. The caller
    may stop consuming between rounds.
    '''

    teleport_prob, max_iterations, convergence_threshold = resolve_parameters(
        teleport_prob, max_iterations, convergence_threshold
    )

    validate(graph, teleport_prob, max_iterations, convergence_threshold)

    working = build_working_graph(graph)
    n = graph.num_vertices
    ndangling = int(working.vertices['dangling'].sum())
    info(f'{n} vertices ({ndangling} dangling) and {graph.num_edges} edges.')

    return _rounds(
        working, teleport_prob, max_iterations, convergence_threshold,
        n, n_jobs, n_partitions
    )


def _rounds(
    graph, teleport_prob, max_iterations, convergence_threshold,
    n, n_jobs, n_partitions
):

    has_converged = False
    num_iterations = 0

    while not has_converged and num_iterations < max_iterations:

        previous = graph
        graph = iterate(previous, teleport_prob, n, n_jobs, n_partitions)
        num_iterations += 1

        change = None
        if convergence_threshold is not None:
            change = delta(previous, graph)
            has_converged = change < convergence_threshold

        if has_converged: status = CONVERGED
        elif num_iterations >= max_iterations: status = MAX_ITERATIONS_REACHED
        else: status = RUNNING

        yield IterationState(
            num_iterations,
            graph.vertices['value'].rename('pagerank').copy(),
            change, status
        )


def run(
    graph: Graph,
    teleport_prob = UNSET,
    max_iterations = UNSET,
    convergence_threshold = UNSET,
    n_jobs = None,
    n_partitions = None,
    show_progress = None
) -> pd.Series:
    '''
    Compute the PageRank vector of a graph.

    The graph must be free of self-referencing edges, the outgoing edge
    weights of every vertex must sum to 1, and the ``value`` column (the prior
    vector) must sum to 1. These are checked before iterating and violations
    raise a :class:`massrank.errors.ValidationError`.

    Parameters
    ----------
    graph : massrank.Graph
        The input graph, with prior values in the ``value`` vertex column.

    teleport_prob : float
        Probability of a random jump, in ``[0, 1)``. Defaults to the
        ``pagerank.teleport`` configuration (0.15).

    max_iterations : int
        Upper bound of rounds, irrespective of convergence. Defaults to the
        ``pagerank.max.iterations`` configuration (100).

    convergence_threshold : float or None
        Stop as soon as the L1 change between two rounds drops below this
        value, in ``(0, 1)``. Without a threshold, exactly ``max_iterations``
        rounds are run. Left unset, the ``pagerank.convergence``
        configuration is used; an explicit ``None`` always means no threshold.

    n_jobs, n_partitions : int
        Workers and edge partitions of the message aggregation.

    show_progress : bool
        Display a progress bar of the rounds. Defaults to the ``progress``
        configuration.

    Returns
    -------
    pandas.Series
        PageRank value indexed by vertex id.
    '''

    teleport_prob, max_iterations, convergence_threshold = resolve_parameters(
        teleport_prob, max_iterations, convergence_threshold
    )

    if show_progress is None: show_progress = cfg['progress']
    info(
        f'pagerank with teleport probability {format_probability(teleport_prob)}, '
        f'at most {max_iterations} iterations, '
        f'convergence threshold {format_probability(convergence_threshold)}.'
    )

    rounds = iterations(
        graph, teleport_prob, max_iterations, convergence_threshold,
        n_jobs = n_jobs, n_partitions = n_partitions
    )

    state = None
    if show_progress:

        from rich.progress import Progress, TextColumn, BarColumn, TimeElapsedColumn
        with Progress(
            TextColumn('[progress.description]{task.description}'),
            BarColumn(),
            TextColumn('{task.completed}/{task.total}'),
            TimeElapsedColumn()
        ) as pbar:

            task = pbar.add_task(description = 'pagerank', total = max_iterations)
            for state in rounds:
                pbar.update(
                    task, advance = 1,
                    description = f'pagerank (delta {format_probability(state.delta)})'
                )

    else:
        for state in rounds: pass

    if state.status == CONVERGED:
        info(f'converged after {state.iteration} iterations (delta {format_probability(state.delta)}).')
    else: info(f'stopped after reaching {state.iteration} iterations.')

    return state.values
