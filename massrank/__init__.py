import os
import pathlib
import importlib.metadata

from massrank.configuration import default as config
from massrank.ansi import warning, info, error


# load configuration
default_finders = [
    'massrank.config',
    '.massrank.config',
    '.massrankrc',
    os.path.join(str(pathlib.Path.home()), 'massrank.config'),
    os.path.join(str(pathlib.Path.home()), '.massrank.config'),
    os.path.join(str(pathlib.Path.home()), '.massrankrc')
]

for finder in default_finders:
    if os.path.exists(finder):
        info(f'load configuration from {finder}')
        config.load(finder)
        break


# core method exports
from massrank.errors import (
    ValidationError,
    SelfReferencingEdges,
    NonNormalizedEdges,
    UnnormalizedPriorVector,
    TeleportProbabilityOutOfRange,
    MaxIterationsNotPositive,
    ConvergenceThresholdOutOfRange,
    TooFewVertices
)

from massrank.graph import Graph, join, from_networkx
from massrank.engine import run, iterations, IterationState
from massrank.io import read_edges, load_graph, normalize_out_weights, uniform_prior


def version(): 
    ver_string = importlib.metadata.version('massrank')
    info(f'massrank {ver_string}')
    if config['rc'] is not None: info(f'configuration loaded from {config["rc"]}')
    return ver_string


__all__ = [
    'Graph',
    'join',
    'from_networkx',
    'run',
    'iterations',
    'IterationState',
    'read_edges',
    'load_graph',
    'normalize_out_weights',
    'uniform_prior',
    'ValidationError',
    'SelfReferencingEdges',
    'NonNormalizedEdges',
    'UnnormalizedPriorVector',
    'TeleportProbabilityOutOfRange',
    'MaxIterationsNotPositive',
    'ConvergenceThresholdOutOfRange',
    'TooFewVertices',
    'version'
]
