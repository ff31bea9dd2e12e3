"""Net-based construction of a short tour through a set of planar points.

A sequence of ever finer nets of the point set is built.  For each net point
the thinnest cylinder covering the nearby points of the next net is found,
and the edges of the next graph are derived from the edges and flat
neighbourhoods of the previous one.  The final graph is walked depth first to
produce a closed traversal.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from atspnet.graph import AdjacencyMatrix

logger = logging.getLogger(__name__)

C0 = 0.2
FLAT_THRESHOLD = 1.0 / 16.0

Vector = tuple[float, float]
Points = Sequence[Sequence[float]]


def _sub(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (a[0] - b[0], a[1] - b[1])


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _norm(v: Sequence[float]) -> float:
    return math.hypot(v[0], v[1])


def _norm_sq(v: Sequence[float]) -> float:
    return v[0] * v[0] + v[1] * v[1]


def _distance(points: Points, a: int, b: int) -> float:
    return _norm(_sub(points[a], points[b]))


@dataclass(frozen=True)
class Cylinder:
    """A strip of the given width around the line through ``x0`` and ``x1``."""

    x0: Vector = (0.0, 0.0)
    x1: Vector = (0.0, 0.0)
    width: float = 0.0

    @property
    def direction(self) -> Vector:
        """Vector from ``x0`` to ``x1``."""
        return _sub(self.x1, self.x0)


def compute_r0(points: Points) -> float:
    """Initial radius: five times the largest distance of a point from the origin."""
    if not points:
        raise ValueError("Point list empty")
    return 5.0 * max(_norm(point) for point in points)


def next_n_k(
    points: Points,
    original_net: Iterable[int],
    remaining_points: Iterable[int],
    r0: float,
) -> int:
    """Smallest ``k`` with ``r0 * 2**-k`` below the largest gap between the net and the rest."""
    net = list(original_net)
    d = 0.0
    for new_point in remaining_points:
        gap = min((_distance(points, og, new_point) for og in net), default=math.inf)
        d = max(d, gap)
    if d <= 0.0 or math.isinf(d):
        raise ValueError("no remaining point lies away from the net")
    return math.ceil(-math.log2(d / r0))


def next_net(
    points: Points,
    original_net: Sequence[int],
    remaining_points: set[int],
    r0: float,
    n: int,
) -> list[int]:
    """Extend the net with points at least ``r0 * 2**-n`` apart.

    Points taken into the net are removed from ``remaining_points``.
    """
    new_net = list(original_net)
    r = math.ldexp(r0, -n)
    r2 = r * r
    outside = [
        candidate
        for candidate in sorted(remaining_points)
        if all(
            _norm_sq(_sub(points[og], points[candidate])) >= r2 for og in original_net
        )
    ]
    while outside:
        chosen = outside.pop()
        new_net.append(chosen)
        remaining_points.discard(chosen)
        outside = [
            i for i in outside if _norm_sq(_sub(points[i], points[chosen])) >= r2
        ]
    return new_net


def max_distance_from_line(
    points: Points,
    x0: Sequence[float],
    x1: Sequence[float],
    in_ball: Iterable[int],
) -> float:
    """Largest distance from the line through ``x0`` and ``x1`` to the given points."""
    d = _sub(x1, x0)
    dd = _norm_sq(d)
    if dd == 0.0:
        raise ValueError("line endpoints coincide")
    best = 0.0
    for index in in_ball:
        w = _sub(points[index], x0)
        t = _dot(w, d) / dd
        best = max(best, math.hypot(w[0] - t * d[0], w[1] - t * d[1]))
    return best


def get_points_in_ball(
    points: Points, net: Iterable[int], center: int, radius: float
) -> set[int]:
    """Net points strictly closer than ``radius`` to point ``center``."""
    r2 = radius * radius
    origin = points[center]
    return {index for index in net if _norm_sq(_sub(points[index], origin)) < r2}


def _anchors(side: Vector, radius: float, steps: range, scale: int) -> list[Vector]:
    perp = (side[1], -side[0])
    return [
        (
            side[0] + perp[0] * radius * (i / scale),
            side[1] + perp[1] * radius * (i / scale),
        )
        for i in steps
    ]


def find_thinnest_cylinder(
    points: Points, net: Iterable[int], center: int, radius: float
) -> Cylinder:
    """Search lines between sides of a square of half-width ``radius`` for the thinnest cover."""
    sides: list[Vector] = [(radius, 0.0), (0.0, radius), (-radius, 0.0), (0.0, -radius)]
    l = math.ceil(40.0 * C0)
    steps = range(-2 * l + 1, 2 * l)
    in_ball = get_points_in_ball(points, net, center, radius)

    def corner(side: Vector) -> Vector:
        return (side[0] + side[1] * radius, side[1] - side[0] * radius)

    cylinder = Cylinder(corner(sides[0]), corner(sides[2]), 0.0)
    best = math.inf
    anchors = [_anchors(side, radius, steps, 2 * l) for side in sides]
    for s1, far_anchors in enumerate(anchors):
        for near_anchors in anchors[:s1]:
            for x0 in far_anchors:
                for x1 in near_anchors:
                    if x0 == x1:
                        continue
                    distance = max_distance_from_line(points, x0, x1, in_ball)
                    if distance < best:
                        best = distance
                        cylinder = Cylinder(x0, x1, distance)
    return cylinder


def get_bounding_cylinders(
    points: Points, net: Iterable[int], next_net: Sequence[int], radius: float
) -> dict[int, Cylinder]:
    """Thinnest cylinder around each net point, covering nearby points of ``next_net``."""
    return {
        index: find_thinnest_cylinder(points, next_net, index, radius) for index in net
    }


def flatness(cylinder: Cylinder, radius: float) -> float:
    """Width of the cylinder relative to ``radius``."""
    return cylinder.width / radius


def component(v: Sequence[float], along: Sequence[float]) -> float:
    """Signed length of the projection of ``v`` onto ``along``."""
    length = _norm(along)
    if length == 0.0:
        raise ValueError("cannot project onto a zero vector")
    return _dot(v, along) / length


def _bfs(
    start: int,
    visited: set[int],
    reps: list[int],
    graph: AdjacencyMatrix,
    used: AdjacencyMatrix,
    vertex_set: set[int],
    origin: int,
) -> None:
    queue = deque([start])
    members = sorted(vertex_set)
    while queue:
        node = queue.popleft()
        if node in visited:
            continue
        # The origin's own component must not be joined to the origin.
        if node == origin and reps:
            reps.pop()
        visited.add(node)
        for other in members:
            if other in visited or not graph.adjacent(node, other):
                continue
            if used.adjacent(node, other):
                graph.remove_edge(node, other)
            else:
                used.add_edge(node, other)
                queue.append(other)


def find_reps(
    edges: AdjacencyMatrix,
    used: AdjacencyMatrix,
    vertex_set: set[int],
    origin: int,
) -> list[int]:
    """One representative of every component of ``vertex_set`` not holding ``origin``.

    Edges found already in ``used`` are removed from ``edges``; the others are
    recorded in ``used``.
    """
    reps: list[int] = []
    visited: set[int] = set()
    for vertex in sorted(vertex_set):
        if vertex in visited:
            continue
        reps.append(vertex)
        _bfs(vertex, visited, reps, edges, used, vertex_set, origin)
    return reps


def connect(
    origin: int,
    reps: Iterable[int],
    edges: AdjacencyMatrix,
    used: AdjacencyMatrix,
) -> None:
    """Join ``origin`` to every representative in both graphs."""
    for rep in reps:
        edges.add_edge(origin, rep)
        used.add_edge(origin, rep)


def _has_edge(graph: AdjacencyMatrix, v: int) -> bool:
    return any(graph.adjacent(u, v) for u in graph.vertices())


def contains_edge(graph: AdjacencyMatrix, verts: Iterable[int]) -> set[int]:
    """The vertices among ``verts`` that have at least one edge."""
    return {v for v in verts if _has_edge(graph, v)}


def _add_flat_pairs(
    graph: AdjacencyMatrix,
    points: Points,
    net1: Iterable[int],
    net2: Iterable[int],
    verts: set[int],
    epsilon: float,
    k: int,
) -> None:
    net2 = list(net2)
    reach = C0 * 2.0 ** (-k - 1) * epsilon
    for p in net1:
        in_ball = sorted(get_points_in_ball(points, net2, p, epsilon))
        cyl = find_thinnest_cylinder(points, in_ball, p, epsilon)
        alpha = 2.0**k * cyl.width / epsilon
        if alpha >= FLAT_THRESHOLD:
            continue

        best = math.inf
        next_point = p
        for q in in_ball:
            distance = _distance(points, p, q)
            if distance < epsilon or distance >= reach:
                continue
            along = component(_sub(points[q], points[p]), cyl.direction)
            if along < best:
                best = along
                next_point = q

        distance = _distance(points, next_point, p)
        if epsilon < distance < 2.0 * epsilon:
            graph.add_edge(p, next_point)
            verts.add(p)
            verts.add(next_point)


def non_flat(
    points: Points,
    graph: AdjacencyMatrix,
    net_k: Sequence[int],
    net_k_plus_1: Sequence[int],
    not_flat_k: Iterable[int],
    n_k_plus_1: int,
    r0: float,
) -> None:
    """Connect the components around each non-flat point ``u`` to ``u`` in ``graph``."""
    radius = C0 * 2.0 ** (-n_k_plus_1) * r0
    for u in not_flat_k:
        vp = get_points_in_ball(points, net_k_plus_1, u, radius)
        lonely = vp - contains_edge(graph, vp)
        if not lonely:
            continue

        local = AdjacencyMatrix()
        local.resize(len(net_k_plus_1))
        in_flat_pair: set[int] = set()
        for _ in lonely:
            _add_flat_pairs(
                local, points, net_k, net_k_plus_1, in_flat_pair, r0, n_k_plus_1
            )

        reps = find_reps(local, graph, vp | in_flat_pair, u)
        connect(u, reps, local, graph)


def _ordered_by_component(
    points: Points, indices: Iterable[int], base: int, along: Vector
) -> list[tuple[int, float]]:
    ordered = [
        (index, component(_sub(points[index], points[base]), along))
        for index in sorted(indices)
    ]
    ordered.sort(key=lambda item: item[1])
    return ordered


def _refine(
    points: Points,
    graph: AdjacencyMatrix,
    net_k: Sequence[int],
    net_k_plus_1: Sequence[int],
    flatness_map_k: Mapping[int, Cylinder],
    n_k: int,
    n_k_plus_1: int,
    r0: float,
) -> AdjacencyMatrix:
    """Build the graph on ``net_k_plus_1`` from the graph on ``net_k``."""
    next_graph = AdjacencyMatrix()
    next_graph.resize(len(net_k_plus_1))
    labels = {point: label for label, point in enumerate(net_k_plus_1)}
    r_k = r0 * 2.0 ** (-n_k)

    # Edges coming from the previous graph.
    max_edge_length = 300.0 * 2.0 ** (-n_k_plus_1 - 1) * r0
    for u, v in list(graph.edges()):
        flat_u = flatness(flatness_map_k[net_k[u]], r_k)
        flat_v = flatness(flatness_map_k[net_k[v]], r_k)
        if _distance(points, net_k[u], net_k[v]) >= max_edge_length or (
            flat_u >= FLAT_THRESHOLD and flat_v >= FLAT_THRESHOLD
        ):
            logger.debug("keeping edge %d %d", labels[net_k[u]], labels[net_k[v]])
            next_graph.add_edge(labels[net_k[u]], labels[net_k[v]])
            continue

        if flat_u < FLAT_THRESHOLD:
            u, v = v, u
        nearby = get_points_in_ball(points, net_k_plus_1, u, r_k) | get_points_in_ball(
            points, net_k_plus_1, v, r_k
        )
        along_edge = _ordered_by_component(
            points, nearby, net_k[u], _sub(points[net_k[v]], points[net_k[u]])
        )
        start = bisect_left([comp for _, comp in along_edge], 0.0)
        for (index, _), (following, _) in zip(along_edge[start:], along_edge[start + 1 :]):
            logger.debug("replacing edge %d %d", u, v)
            next_graph.add_edge(labels[index], labels[following])
            if index == v:
                break

    # Edges coming from flat neighbourhoods.
    for u, cyl in flatness_map_k.items():
        if flatness(cyl, r_k) >= FLAT_THRESHOLD:
            continue
        in_ball = get_points_in_ball(points, net_k_plus_1, u, r_k)
        to_left = True
        to_right = True
        for other in (point for point in in_ball if point in net_k):
            along = component(_sub(points[other], points[u]), cyl.direction)
            if along < 0.0:
                to_left = False
            elif along > 0.0:
                to_right = False
        if not (to_left or to_right):
            continue

        ordered = _ordered_by_component(points, in_ball, u, cyl.direction)
        u_index = bisect_left([comp for _, comp in ordered], 0.0)
        pairs = list(zip(ordered, ordered[1:]))
        chosen = []
        if to_left:
            chosen.extend(pairs[:u_index])
        if to_right:
            chosen.extend(pairs[u_index:])
        for (a, _), (b, _) in chosen:
            logger.debug("adding flat edge %d %d", labels[a], labels[b])
            next_graph.add_edge(labels[a], labels[b])

    return next_graph


def euler_tour(graph: AdjacencyMatrix, start: int) -> list[int]:
    """Depth-first walk from ``start`` listing each vertex on entry and on every return."""
    visited = [False] * graph.vertex_count()
    visited[start] = True
    traversal = [start]
    stack = [(start, graph.neighbors(start))]
    while stack:
        _, pending = stack[-1]
        for u in pending:
            if not visited[u]:
                visited[u] = True
                traversal.append(u)
                stack.append((u, graph.neighbors(u)))
                break
        else:
            stack.pop()
            if stack:
                traversal.append(stack[-1][0])
    return traversal


def atsp(points: Points) -> list[int]:
    """Closed traversal of the final net graph, starting and ending at vertex 0."""
    points = [(float(p[0]), float(p[1])) for p in points]
    r0 = compute_r0(points)
    n_k = 1
    net_k = [0]
    remaining = set(range(1, len(points)))
    graph = AdjacencyMatrix()
    graph.add_vertex()

    n_k_plus_1 = next_n_k(points, net_k, remaining, r0)
    net_k_plus_1 = next_net(points, net_k, remaining, r0, n_k_plus_1)
    flat_map = get_bounding_cylinders(
        points, net_k, net_k_plus_1, r0 * 2.0 ** (-n_k_plus_1)
    )

    while True:
        graph = _refine(
            points, graph, net_k, net_k_plus_1, flat_map, n_k, n_k_plus_1, r0
        )
        if not remaining:
            break
        n_next = next_n_k(points, net_k_plus_1, remaining, r0)
        net_next = next_net(points, net_k_plus_1, remaining, r0, n_next)
        flat_map = get_bounding_cylinders(
            points, net_k_plus_1, net_next, r0 * 2.0 ** (-n_k_plus_1)
        )
        net_k, net_k_plus_1 = net_k_plus_1, net_next
        n_k, n_k_plus_1 = n_k_plus_1, n_next

    return euler_tour(graph, 0)