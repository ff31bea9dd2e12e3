import random

import pytest

from atspnet.graph import AdjacencyMatrix


def make_graph(n, edges):
    g = AdjacencyMatrix()
    g.resize(n)
    for u, v in edges:
        g.add_edge(u, v)
    return g


def test_new_graph_is_empty():
    g = AdjacencyMatrix()
    assert g.vertex_count() == 0
    assert g.edge_count() == 0
    assert list(g.edges()) == []


def test_add_edge_is_symmetric():
    g = make_graph(5, [(1, 3)])
    assert g.adjacent(1, 3)
    assert g.adjacent(3, 1)
    assert not g.adjacent(1, 2)
    assert g.edge_count() == 1


def test_vertex_not_adjacent_to_itself():
    g = make_graph(3, [(0, 1), (1, 2)])
    assert all(not g.adjacent(v, v) for v in g.vertices())


def test_self_loop_rejected():
    g = make_graph(3, [])
    with pytest.raises(ValueError):
        g.add_edge(2, 2)


def test_out_of_range_vertex_rejected():
    g = make_graph(3, [])
    with pytest.raises(IndexError):
        g.add_edge(0, 3)
    with pytest.raises(IndexError):
        g.adjacent(-1, 0)


def test_remove_edge():
    g = make_graph(4, [(0, 1), (2, 3)])
    g.remove_edge(1, 0)
    assert not g.adjacent(0, 1)
    assert g.adjacent(2, 3)
    assert g.edge_count() == 1


def test_edges_are_ordered_pairs_with_larger_first():
    added = [(0, 1), (4, 2), (3, 1), (2, 0)]
    g = make_graph(5, added)
    edges = list(g.edges())
    assert all(u > v for u, v in edges)
    assert set(edges) == {(max(a, b), min(a, b)) for a, b in added}
    assert edges == sorted(edges)


def test_neighbors_and_degree():
    g = make_graph(5, [(2, 0), (2, 4), (1, 2)])
    assert list(g.neighbors(2)) == [0, 1, 4]
    assert g.degree(2) == len(list(g.neighbors(2)))
    assert list(g.neighbors(3)) == []
    assert sum(g.degree(v) for v in g.vertices()) == 2 * g.edge_count()


def test_add_vertex_returns_index_and_keeps_edges():
    g = make_graph(3, [(0, 2), (1, 2)])
    index = g.add_vertex()
    assert index == 3
    assert g.vertex_count() == 4
    assert set(g.edges()) == {(2, 0), (2, 1)}
    g.add_edge(3, 0)
    assert g.adjacent(0, 3)


def test_add_vertex_from_empty():
    g = AdjacencyMatrix()
    assert g.add_vertex() == 0
    assert g.vertex_count() == 1
    assert g.edge_count() == 0


def test_resize_grow_preserves_edges():
    g = make_graph(3, [(0, 1), (1, 2)])
    g.resize(6)
    assert g.vertex_count() == 6
    assert set(g.edges()) == {(1, 0), (2, 1)}


def test_resize_shrink_drops_edges_of_removed_vertices():
    g = make_graph(5, [(0, 1), (3, 4), (1, 2)])
    g.resize(3)
    assert set(g.edges()) == {(1, 0), (2, 1)}


def test_clear():
    g = make_graph(4, [(0, 1), (2, 3)])
    g.clear()
    assert g.vertex_count() == 0
    assert g.edge_count() == 0


def test_merge_is_disjoint_union():
    a = make_graph(3, [(0, 1), (1, 2)])
    b = make_graph(4, [(0, 3), (1, 2)])
    a.merge(b)
    assert a.vertex_count() == 3 + 4
    assert set(a.edges()) == {(1, 0), (2, 1), (6, 3), (5, 4)}
    assert all(not a.adjacent(u, v) for u in range(3) for v in range(3, 7))


def test_dimacs_round_trip(tmp_path):
    g = make_graph(6, [(0, 5), (1, 2), (3, 4), (2, 5)])
    path = tmp_path / "graph.txt"
    g.write_dimacs(path)
    loaded = AdjacencyMatrix()
    loaded.read_dimacs(path)
    assert loaded.vertex_count() == g.vertex_count()
    assert list(loaded.edges()) == list(g.edges())


def test_write_dimacs_format(tmp_path):
    g = make_graph(3, [(0, 2)])
    path = tmp_path / "out.txt"
    g.write_dimacs(str(path))
    assert path.read_text(encoding="utf-8") == "3\t1\n2\t0\n"


def test_read_dimacs_replaces_existing_graph(tmp_path):
    path = tmp_path / "in.txt"
    path.write_text("4 2\n0 1\n3 2\n", encoding="utf-8")
    g = make_graph(8, [(6, 7)])
    g.read_dimacs(path)
    assert g.vertex_count() == 4
    assert set(g.edges()) == {(1, 0), (3, 2)}


def test_read_dimacs_bad_value(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("3 1\n0 x\n", encoding="utf-8")
    with pytest.raises(ValueError, match="line 2"):
        AdjacencyMatrix().read_dimacs(path)


def test_read_dimacs_missing_field(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("3 2\n0 1\n2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Not enough fields on line 3"):
        AdjacencyMatrix().read_dimacs(path)


def test_read_dimacs_bad_header(tmp_path):
    path = tmp_path / "header.txt"
    path.write_text("3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        AdjacencyMatrix().read_dimacs(path)


def test_random_full_density_is_complete():
    g = AdjacencyMatrix()
    g.random(7, 1.0, random.Random(1))
    assert all(g.adjacent(u, v) for u in range(7) for v in range(7) if u != v)


def test_random_zero_density_is_empty():
    g = AdjacencyMatrix()
    g.random(7, 0.0, random.Random(1))
    assert g.vertex_count() == 7
    assert g.edge_count() == 0


def test_random_is_reproducible_with_seed():
    a = AdjacencyMatrix()
    b = AdjacencyMatrix()
    a.random(10, 0.4, random.Random(42))
    b.random(10, 0.4, random.Random(42))
    assert list(a.edges()) == list(b.edges())
    assert 0 < a.edge_count() < 45


@pytest.mark.parametrize("density", [-0.1, 1.5])
def test_random_rejects_bad_density(density):
    with pytest.raises(ValueError):
        AdjacencyMatrix().random(5, density)


def test_random_regularish_minimum_degree():
    g = AdjacencyMatrix()
    g.random_regularish(12, 3, random.Random(7))
    assert g.vertex_count() == 12
    assert all(g.degree(v) >= 3 for v in g.vertices())


def test_format_matrix_matches_adjacency():
    g = make_graph(4, [(1, 0), (3, 2), (3, 0)])
    rows = g.format_matrix().splitlines()
    assert len(rows) == g.vertex_count()
    for u, row in enumerate(rows):
        assert len(row) == u
        assert [c == "1" for c in row] == [g.adjacent(u, v) for v in range(u)]


def test_format_matrix_pinned():
    g = make_graph(3, [(2, 0)])
    assert g.format_matrix() == "\n0\n10\n"