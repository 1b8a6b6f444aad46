import gzip

import numpy as np
import pandas as pd
import pytest

from massrank import run, load_graph, read_edges, normalize_out_weights, uniform_prior
from massrank.io import drop_self_references
from massrank.validation import num_non_normalized_edges, is_vector_normalized


EDGE_LIST = """\
# a small web graph
0 1
0 2

1 2
2 0
3 3
"""


@pytest.fixture
def edge_file(tmp_path):
    path = tmp_path / 'edges.txt'
    path.write_text(EDGE_LIST)
    return str(path)


class TestReadEdges:

    def test_unweighted(self, edge_file):
        edges = read_edges(edge_file)
        assert edges['src'].tolist() == [0, 0, 1, 2, 3]
        assert edges['dst'].tolist() == [1, 2, 2, 0, 3]
        assert edges['weight'].tolist() == [1.0] * 5

    def test_weighted_csv(self, tmp_path):
        path = tmp_path / 'edges.csv'
        path.write_text('0,1,0.25\n0,2,0.75\n')
        edges = read_edges(str(path), sep = ',')
        assert edges['weight'].tolist() == [0.25, 0.75]

    def test_ignore_weights(self, tmp_path):
        path = tmp_path / 'edges.txt'
        path.write_text('0 1 3.0\n')
        assert read_edges(str(path), weighted = False)['weight'].tolist() == [1.0]

    def test_gzipped(self, tmp_path):
        path = tmp_path / 'edges.txt.gz'
        with gzip.open(path, 'wt') as f: f.write(EDGE_LIST)
        assert len(read_edges(str(path))) == 5

    def test_missing_weight_column(self, edge_file):
        with pytest.raises(ValueError):
            read_edges(edge_file, weighted = True)

    def test_only_comments(self, tmp_path):
        path = tmp_path / 'empty.txt'
        path.write_text('# nothing here\n')
        assert len(read_edges(str(path))) == 0


class TestPreparation:

    def test_drop_self_references(self):
        edges = pd.DataFrame({ 'src': [0, 1, 1], 'dst': [0, 0, 2], 'weight': [1.0, 1.0, 1.0] })
        kept = drop_self_references(edges)
        assert kept['src'].tolist() == [1, 1]
        assert kept.index.tolist() == [0, 1]

    def test_normalize_out_weights(self):
        edges = pd.DataFrame({
            'src': [0, 0, 0, 1, 2, 2],
            'dst': [1, 2, 3, 0, 0, 1],
            'weight': [1.0, 1.0, 1.0, 5.0, 0.1, 0.7]
        })

        normalized = normalize_out_weights(edges)
        sums = normalized.groupby('src')['weight'].sum()
        assert sums.tolist() == pytest.approx([1.0, 1.0, 1.0], abs = 1e-15)
        assert normalized['weight'].iloc[3] == 1.0
        assert normalized['weight'].iloc[5] == pytest.approx(0.875)

    def test_normalize_rejects_negative(self):
        edges = pd.DataFrame({ 'src': [0], 'dst': [1], 'weight': [-1.0] })
        with pytest.raises(ValueError):
            normalize_out_weights(edges)

    def test_normalize_rejects_zero_sum(self):
        edges = pd.DataFrame({ 'src': [0], 'dst': [1], 'weight': [0.0] })
        with pytest.raises(ValueError):
            normalize_out_weights(edges)

    @pytest.mark.parametrize('n', [2, 3, 5, 7, 10, 49])
    def test_uniform_prior_is_normalized(self, n):
        prior = uniform_prior(range(n))
        assert is_vector_normalized(prior)
        assert prior.name == 'value'
        assert prior.index.tolist() == list(range(n))

    def test_uniform_prior_needs_vertices(self):
        with pytest.raises(ValueError):
            uniform_prior([])


class TestLoadGraph:

    def test_load_and_run(self, edge_file):
        graph = load_graph(edge_file)
        assert graph.num_vertices == 4
        assert graph.num_edges == 4
        assert num_non_normalized_edges(graph) == 0

        result = run(graph, convergence_threshold = 1e-9)
        assert result.sum() == pytest.approx(1.0, abs = 1e-12)
        assert result.index.tolist() == [0, 1, 2, 3]
        assert np.argmax(result.values) in (0, 2)

    def test_extra_isolated_vertices(self, edge_file):
        graph = load_graph(edge_file, vertex_ids = [9])
        assert graph.vertices.index.tolist() == [0, 1, 2, 3, 9]
