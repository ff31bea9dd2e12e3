# atspnet

Approximate traveling-salesman tours for points in the plane. The tour comes
from a hierarchy of nets. Each net is a subset of the points, and each level
uses a smaller radius than the one before it. For every net point the package
searches for the thinnest bounding cylinder of its neighbourhood. That
cylinder decides how the edges of one level carry over to the next. A
depth-first walk of the final graph gives the visiting order.

The package also provides `AdjacencyMatrix`, a small undirected simple graph.
It stores its edges as a packed lower-triangular matrix and can read and write
graphs in a DIMACS-style text format.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run pytest:

```
pip install ".[test]"
pytest
```

## Command line

```
atspnet
atspnet 8
```

The command places `COUNT` points on the x-axis, at (0, 0), (1, 0), and so
on. `COUNT` defaults to 5. It prints the list of points, then prints the
points in the order the walk visits them. If `COUNT` is below 1, the command
stops with a usage error. If the tour cannot be built, for example with a
single point, it prints the reason to standard error and exits with status 1.

## Library use

```python
from atspnet.atsp import atsp

points = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0), (4.0, 0.0)]
order = atsp(points)
```

`atsp` returns the depth-first walk of the final graph, starting and ending
at vertex 0. Each vertex appears when the walk enters it and again every time
the walk returns to it. The walk covers only the vertices that can be reached
from vertex 0. `atsp` raises `ValueError` in these cases:

- the point list is empty;
- no remaining point lies away from the current net, for example with a
  single point or with duplicated points.

Progress messages go to the `atspnet.atsp` logger at DEBUG level.

The building blocks are public functions in `atspnet.atsp`:

- `compute_r0`
- `next_n_k`
- `next_net`
- `get_points_in_ball`
- `max_distance_from_line`
- `find_thinnest_cylinder` and `get_bounding_cylinders`, which return
  `Cylinder` values
- `flatness`
- `component`
- `find_reps`
- `connect`
- `contains_edge`
- `non_flat`
- `euler_tour`

`atsp` itself does not call `non_flat`.

### The graph type

```python
import random
from atspnet.graph import AdjacencyMatrix

g = AdjacencyMatrix()
g.resize(4)
g.add_edge(0, 1)
g.add_edge(2, 3)
print(g.edge_count(), list(g.edges()), list(g.neighbors(1)))

g.write_dimacs("graph.txt")
h = AdjacencyMatrix()
h.read_dimacs("graph.txt")

r = AdjacencyMatrix()
r.random(10, 0.3, random.Random(1))
print(r.format_matrix())
```

- `edges()` yields each edge once as `(u, v)` with `u > v`.
- `merge(other)` appends another graph as a disjoint component.
- `random_regularish(n, degree, rng)` builds a random graph in which every
  vertex has at least `degree` neighbours.
- Adding a self-loop raises `ValueError`.
- Using a vertex index that is out of range raises `IndexError`.
- A malformed DIMACS file raises `ValueError`.

## Limitations

The command can only run on evenly spaced points along the x-axis. It does
not read points from a file or from standard input. To tour your own points,
call `atsp` from Python.