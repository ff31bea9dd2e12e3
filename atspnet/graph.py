"""A simple undirected graph stored as a packed lower-triangular adjacency matrix."""

from __future__ import annotations

import math
import os
import random as _random
from collections.abc import Iterator
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def _slot(u: int, v: int) -> int:
    """Index of the unordered pair ``{u, v}`` (``u != v``) in the packed matrix."""
    if u < v:
        u, v = v, u
    return u * (u - 1) // 2 + v


def _pair_count(vertex_count: int) -> int:
    return vertex_count * (vertex_count - 1) // 2 if vertex_count > 0 else 0


class AdjacencyMatrix:
    """Simple undirected graph without self loops.

    Only the strict lower triangle of the matrix is stored, so growing the
    graph keeps every existing edge in place.
    """

    def __init__(self) -> None:
        self._cells = bytearray()
        self._vertex_count = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vertices={self._vertex_count}, "
            f"edges={self.edge_count()})"
        )

    # -- size -------------------------------------------------------------

    def vertex_count(self) -> int:
        """Number of vertices."""
        return self._vertex_count

    def edge_count(self) -> int:
        """Number of edges."""
        return sum(self._cells)

    def resize(self, vertex_count: int) -> None:
        """Set the number of vertices, keeping edges among the surviving ones."""
        if vertex_count < 0:
            raise ValueError("vertex count must not be negative")
        size = _pair_count(vertex_count)
        if size <= len(self._cells):
            del self._cells[size:]
        else:
            self._cells.extend(bytes(size - len(self._cells)))
        self._vertex_count = vertex_count

    def clear(self) -> None:
        """Remove every vertex and edge."""
        self._cells = bytearray()
        self._vertex_count = 0

    # -- queries ----------------------------------------------------------

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self._vertex_count:
            raise IndexError(f"vertex {v} out of range for {self._vertex_count} vertices")

    def adjacent(self, u: int, v: int) -> bool:
        """Whether ``u`` and ``v`` are joined by an edge."""
        self._check_vertex(u)
        self._check_vertex(v)
        if u == v:
            return False
        return self._cells[_slot(u, v)] == 1

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yield each edge once as ``(u, v)`` with ``u > v``, in row order."""
        for u in range(self._vertex_count):
            base = u * (u - 1) // 2
            for v in range(u):
                if self._cells[base + v]:
                    yield (u, v)

    def vertices(self) -> range:
        """All vertex indices."""
        return range(self._vertex_count)

    def neighbors(self, v: int) -> Iterator[int]:
        """Yield the neighbours of ``v`` in ascending order."""
        self._check_vertex(v)
        return (u for u in range(self._vertex_count) if self.adjacent(u, v))

    def degree(self, v: int) -> int:
        """Number of neighbours of ``v``."""
        return sum(1 for _ in self.neighbors(v))

    # -- mutation ---------------------------------------------------------

    def add_vertex(self) -> int:
        """Append an isolated vertex and return its index."""
        self.resize(self._vertex_count + 1)
        return self._vertex_count - 1

    def _set_edge(self, u: int, v: int, present: bool) -> None:
        self._check_vertex(u)
        self._check_vertex(v)
        if u == v:
            raise ValueError("Can't add self loops in simple graph.")
        self._cells[_slot(u, v)] = 1 if present else 0

    def add_edge(self, u: int, v: int) -> None:
        """Join ``u`` and ``v``."""
        self._set_edge(u, v, True)

    def remove_edge(self, u: int, v: int) -> None:
        """Remove the edge between ``u`` and ``v`` if there is one."""
        self._set_edge(u, v, False)

    def merge(self, other: AdjacencyMatrix) -> None:
        """Append ``other`` as a disjoint component; its vertex ``v`` becomes ``n + v``."""
        offset = self._vertex_count
        other_edges = list(other.edges())
        self.resize(offset + other.vertex_count())
        for u, v in other_edges:
            self.add_edge(offset + u, offset + v)

    # -- generators -------------------------------------------------------

    def random(
        self,
        vertex_count: int,
        density: float,
        rng: _random.Random | None = None,
    ) -> None:
        """Replace the graph with a random one having ``ceil(density * n(n-1)/2)`` edges."""
        if not 0.0 <= density <= 1.0:
            raise ValueError("density must lie between 0 and 1")
        rng = rng if rng is not None else _random.Random()
        target = math.ceil(_pair_count(vertex_count) * density)
        self.clear()
        self.resize(vertex_count)

        added = 0
        while added < target:
            u = rng.randrange(vertex_count)
            v = rng.randrange(vertex_count)
            if u != v and not self.adjacent(u, v):
                self.add_edge(u, v)
                added += 1

    def random_regularish(
        self,
        vertex_count: int,
        degree: int,
        rng: _random.Random | None = None,
    ) -> None:
        """Replace the graph with a random one where every vertex has at least ``degree`` neighbours."""
        rng = rng if rng is not None else _random.Random()
        self.clear()
        self.resize(vertex_count)

        for v in range(vertex_count):
            while self.degree(v) < degree:
                u = rng.randrange(vertex_count)
                while u == v or self.degree(u) > degree:
                    u = rng.randrange(vertex_count)
                self.add_edge(u, v)

    # -- input / output ---------------------------------------------------

    def read_dimacs(self, filename: PathLike) -> None:
        """Load the graph from a file of ``vertices edges`` then one ``u v`` per line."""
        with open(filename, encoding="utf-8") as handle:
            header = handle.readline().split()
            if len(header) < 2:
                raise ValueError("Could not parse vertex and edge counts.")
            try:
                vertex_count = int(header[0])
                int(header[1])
            except ValueError as exc:
                raise ValueError("Could not parse vertex and edge counts.") from exc

            self.clear()
            self.resize(vertex_count)

            for line_number, line in enumerate(handle, start=2):
                fields = line.split()
                try:
                    values = [int(field) for field in fields]
                except ValueError as exc:
                    raise ValueError(f"Could not parse value on line {line_number}") from exc
                if len(values) < 2:
                    raise ValueError(f"Not enough fields on line {line_number}")
                self.add_edge(values[0], values[1])

    def write_dimacs(self, filename: PathLike) -> None:
        """Write the graph in the format read by :meth:`read_dimacs`."""
        with open(filename, "w", encoding="utf-8") as handle:
            handle.write(f"{self._vertex_count}\t{self.edge_count()}\n")
            for u, v in self.edges():
                handle.write(f"{u}\t{v}\n")

    def format_matrix(self) -> str:
        """Render the lower triangle as rows of ``0``/``1``, one line per vertex."""
        rows = (
            "".join("1" if self.adjacent(u, v) else "0" for v in range(u))
            for u in range(self._vertex_count)
        )
        return "".join(row + "\n" for row in rows)