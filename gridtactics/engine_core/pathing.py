"""
Path Planner - reachable sets and shortest paths over weighted terrain.

Every search is Dijkstra on a heapq frontier keyed by cumulative cost.
Heap entries carry an insertion counter, so equal-cost ties resolve in
neighbour-link order and results are stable across runs.

The planner keeps no copy of the board: it reads tiles from the TileGraph
and occupancy through a lookup callable owned by GameModel.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from itertools import count
from typing import TYPE_CHECKING, Callable
import heapq

from .board import Coord, TileGraph
from ..config import ReachabilityMode

if TYPE_CHECKING:
    from .units import Unit

OccupantLookup = Callable[[Coord], "Unit | None"]


@dataclass(frozen=True)
class PathResult:
    """Cheapest known route to one vertex."""
    vertex: Coord
    cost: int
    path: tuple[Coord, ...]
    order: int  # Position in which Dijkstra settled this vertex

    def __lt__(self, other: PathResult) -> bool:
        return (self.cost, self.order) < (other.cost, other.order)


class WeightedGraph:
    """
    Graph whose vertices are board positions with an entry cost each.

    Edges join vertices that are tile neighbours; moving onto a vertex
    costs that vertex's weight.
    """

    def __init__(self, costs: dict[Coord, int], tiles: TileGraph):
        self.costs = dict(costs)
        self.tiles = tiles

    def neighbors(self, vertex: Coord) -> list[Coord]:
        return [n for n in self.tiles.neighbor_coords(vertex) if n in self.costs]

    def shortest_distances_from(self, start: Coord) -> dict[Coord, PathResult]:
        """Single-source Dijkstra. Unreachable vertices are absent."""
        start = Coord(*start)
        if start not in self.costs:
            return {}

        tie = count()
        frontier = [(0, next(tie), start)]
        best = {start: 0}
        previous: dict[Coord, Coord] = {}
        settled: dict[Coord, PathResult] = {}

        while frontier:
            cost, _, vertex = heapq.heappop(frontier)
            if vertex in settled or cost > best[vertex]:
                continue
            settled[vertex] = PathResult(
                vertex=vertex,
                cost=cost,
                path=self._walk_back(previous, start, vertex),
                order=len(settled),
            )
            for neighbor in self.neighbors(vertex):
                candidate = cost + self.costs[neighbor]
                if candidate < best.get(neighbor, candidate + 1):
                    best[neighbor] = candidate
                    previous[neighbor] = vertex
                    heapq.heappush(frontier, (candidate, next(tie), neighbor))

        return settled

    @staticmethod
    def _walk_back(previous: dict[Coord, Coord], start: Coord, end: Coord) -> tuple[Coord, ...]:
        path = [end]
        while path[-1] != start:
            path.append(previous[path[-1]])
        path.reverse()
        return tuple(path)


class PathPlanner:
    """
    Movement queries for a unit on the current board.

    Ally-occupied tiles can be passed through; enemy-occupied tiles block.
    """

    def __init__(
        self,
        tiles: TileGraph,
        occupant_at: OccupantLookup,
        mode: ReachabilityMode = ReachabilityMode.DIJKSTRA,
    ):
        self.tiles = tiles
        self.occupant_at = occupant_at
        self.mode = mode

    def _enemy_at(self, unit: Unit, coord: Coord) -> bool:
        other = self.occupant_at(coord)
        return other is not None and other.is_alive and other.player_id != unit.player_id

    def _occupied(self, coord: Coord) -> bool:
        other = self.occupant_at(coord)
        return other is not None and other.is_alive

    # ------------------------------------------------------------------
    # Reachability
    # ------------------------------------------------------------------

    def reachable_costs(self, unit: Unit) -> dict[Coord, int]:
        """Minimum movement cost to every tile within the unit's budget."""
        if unit.position is None:
            return {}
        if self.mode == ReachabilityMode.LEGACY_FIFO:
            return self._legacy_fifo_costs(unit)

        origin = unit.position
        budget = unit.movement
        tie = count()
        frontier = [(0, next(tie), origin)]
        distances = {origin: 0}
        done: set[Coord] = set()

        while frontier:
            cost, _, coord = heapq.heappop(frontier)
            if coord in done:
                continue
            done.add(coord)
            for neighbor in self.tiles.get_tile(coord).neighbors:
                position = neighbor.position
                if position in done:
                    continue
                if not unit.can_move(neighbor) or self._enemy_at(unit, position):
                    continue
                candidate = cost + unit.move_cost(neighbor)
                if candidate <= budget and candidate < distances.get(position, budget + 1):
                    distances[position] = candidate
                    heapq.heappush(frontier, (candidate, next(tie), position))

        return distances

    def _legacy_fifo_costs(self, unit: Unit) -> dict[Coord, int]:
        """
        The legacy client's same-speed queue search.

        A tile's distance is fixed by whichever path reaches it first, so on
        weighted terrain some tiles within budget are missed.
        """
        origin = unit.position
        budget = unit.movement
        distance = {origin: 0}
        queue = deque([self.tiles.get_tile(origin)])
        found = {origin: 0}

        while queue:
            current = queue.popleft()
            here = current.position
            if not unit.can_move(current) or self._enemy_at(unit, here):
                continue
            for neighbor in current.neighbors:
                there = neighbor.position
                if distance.get(there, budget + 1) > budget:
                    distance[there] = unit.move_cost(neighbor) + distance[here]
                    if distance[there] <= budget:
                        queue.append(neighbor)
            if 0 < distance[here] <= budget:
                found[here] = distance[here]

        return found

    def reachable(self, unit: Unit) -> set[Coord]:
        """Tiles the unit could stand on this turn, ignoring ally occupancy."""
        return set(self.reachable_costs(unit))

    def possible_moves(self, unit: Unit) -> set[Coord]:
        """Reachable tiles that are free, plus the unit's own tile."""
        return {
            coord for coord in self.reachable(unit)
            if coord == unit.position or not self._occupied(coord)
        }

    def move_cost_map(self, unit: Unit) -> dict[Coord, int]:
        """Per-tile move cost of each reachable tile (not the path cost)."""
        return {
            coord: unit.move_cost(self.tiles.get_tile(coord))
            for coord in self.reachable(unit)
        }

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def shortest_path(self, unit: Unit, start: Coord, end: Coord) -> list[Coord] | None:
        """Cheapest route from start to end through the unit's reachable tiles."""
        graph = WeightedGraph(self.move_cost_map(unit), self.tiles)
        result = graph.shortest_distances_from(Coord(*start)).get(Coord(*end))
        return list(result.path) if result else None

    def shortest_path_to_engage(
        self, unit: Unit, start: Coord, target: Coord, range_: int
    ) -> list[Coord] | None:
        """
        Cheapest route to any free tile within range_ of target.

        Equal-cost candidates resolve to the one Dijkstra settled first.
        """
        candidates = self.tiles.range_disk(target, range_) & self.possible_moves(unit)
        if not candidates:
            return None

        graph = WeightedGraph(self.move_cost_map(unit), self.tiles)
        distances = graph.shortest_distances_from(Coord(*start))
        options = [distances[c] for c in candidates if c in distances]
        if not options:
            return None
        return list(min(options).path)
