"""
Tests for movement reachability and shortest paths.

Tests:
- Dijkstra reachable costs against a brute-force relaxation
- Occupancy rules (allies pass, enemies block)
- Unit-type movement rules
- The legacy FIFO search only when selected
- Engage paths
"""

import pytest

from ..config import RulesConfig, ReachabilityMode, get_legacy_config
from ..engine_core.board import Coord, TileType
from ..engine_core.pathing import PathResult, WeightedGraph
from ..engine_core.units import UnitType
from .conftest import build_model, make_unit


def brute_force_costs(model, unit):
    """Bellman-Ford style relaxation, independent of the planner."""
    origin = unit.position
    best = {origin: 0}
    changed = True
    while changed:
        changed = False
        for coord, cost in list(best.items()):
            for neighbor in model.tiles.get_tile(coord).neighbors:
                if not unit.can_move(neighbor):
                    continue
                other = model.get_unit_at(neighbor.position)
                if other is not None and other.player_id != unit.player_id:
                    continue
                candidate = cost + unit.move_cost(neighbor)
                if candidate <= unit.movement and candidate < best.get(neighbor.position, candidate + 1):
                    best[neighbor.position] = candidate
                    changed = True
    return best


def cheapest_simple_path(costs, start, end):
    """Minimum entry cost over every simple path on a rectangular grid."""
    rows, columns = len(costs), len(costs[0])
    best = None

    def walk(cell, seen, spent):
        nonlocal best
        if cell == end:
            best = spent if best is None else min(best, spent)
            return
        col, row = cell
        for step in ((col + 1, row), (col - 1, row), (col, row + 1), (col, row - 1)):
            c, r = step
            if 0 <= c < columns and 0 <= r < rows and step not in seen:
                walk(step, seen | {step}, spent + costs[r][c])

    walk(start, {start}, 0)
    return best



class TestReachableCosts:
    """Dijkstra reachability on weighted terrain."""

    def test_cost_grid_from_corner(self, cost_grid):
        unit = make_unit("walker", "p1", movement=4)
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 3, [(unit, (0, 0)), (enemy, (2, 2))], costs=cost_grid)

        costs = model.planner.reachable_costs(unit)

        assert costs == {
            (0, 0): 0,
            (1, 0): 1,
            (0, 1): 1,
            (2, 0): 3,
            (0, 2): 3,
            (1, 1): 4,
            (2, 1): 4,
            (1, 2): 4,
        }

    @pytest.mark.parametrize("movement", [0, 1, 2, 3, 4, 5, 6])
    def test_matches_brute_force(self, cost_grid, movement):
        unit = make_unit("walker", "p1", movement=movement)
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 3, [(unit, (0, 0)), (enemy, (1, 2))], costs=cost_grid)

        assert model.planner.reachable_costs(unit) == brute_force_costs(model, unit)

    def test_zero_movement_reaches_only_own_tile(self):
        unit = make_unit("rooted", "p1", movement=0)
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(unit, (0, 0)), (enemy, (2, 0))])

        assert model.query_move_locations(unit) == {(0, 0)}

    def test_enemy_blocks_path(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(unit, (0, 0)), (enemy, (1, 0))])

        assert model.planner.reachable(unit) == {(0, 0)}

    def test_ally_can_be_passed_but_not_ended_on(self):
        unit = make_unit("walker", "p1")
        ally = make_unit("ally", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 1, [(unit, (0, 0)), (ally, (1, 0)), (enemy, (3, 0))])

        assert (1, 0) in model.planner.reachable(unit)
        assert (2, 0) in model.query_move_locations(unit)
        assert (1, 0) not in model.query_move_locations(unit)
        assert (0, 0) in model.query_move_locations(unit)

    def test_budget_is_respected(self):
        unit = make_unit("walker", "p1", movement=2)
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(unit, (0, 0)), (enemy, (4, 0))])

        assert model.query_move_locations(unit) == {(0, 0), (1, 0), (2, 0)}


class TestMovementRules:
    """Per unit type movement permission and cost."""

    def obstacle_strip(self, unit):
        enemy = make_unit("enemy", "p2")
        return build_model(
            3, 1,
            [(unit, (0, 0)), (enemy, (2, 0))],
            costs=[[1, 3, 1]],
            tile_types={(1, 0): TileType.OBSTACLE},
        )

    def test_infantry_pays_obstacle_cost(self):
        unit = make_unit("foot", "p1", movement=3)
        model = self.obstacle_strip(unit)

        assert model.planner.reachable_costs(unit)[(1, 0)] == 3

    def test_cavalry_cannot_enter_obstacle(self):
        unit = make_unit("rider", "p1", unit_type=UnitType.CAVALRY, movement=7)
        model = self.obstacle_strip(unit)

        assert (1, 0) not in model.planner.reachable(unit)

    def test_flier_pays_one_everywhere(self):
        unit = make_unit("wing", "p1", unit_type=UnitType.FLIER, movement=1)
        model = self.obstacle_strip(unit)

        assert model.planner.reachable_costs(unit)[(1, 0)] == 1

    def test_boundary_blocks_everyone(self):
        for unit_type in UnitType:
            unit = make_unit("mover", "p1", unit_type=unit_type, movement=9)
            enemy = make_unit("enemy", "p2")
            model = build_model(
                3, 2,
                [(unit, (0, 0)), (enemy, (2, 1))],
                tile_types={(1, 0): TileType.BOUNDARY},
            )

            assert (1, 0) not in model.planner.reachable(unit)


class TestLegacyFifo:
    """The legacy queue search is opt-in only."""

    # Row-major: the cost-4 tile at (1, 0) is found first, which freezes
    # (1, 1) and (2, 0) at too high a cost and hides (2, 1).
    COSTS = [
        [1, 4, 1],
        [1, 1, 1],
    ]

    def build(self, config):
        unit = make_unit("walker", "p1", movement=5)
        enemy = make_unit("enemy", "p2")
        model = build_model(
            4, 2,
            [(unit, (0, 0)), (enemy, (3, 1))],
            costs=[row + [1] for row in self.COSTS],
            missing={(3, 0)},
            config=config,
        )
        return model, unit

    def test_default_is_dijkstra(self):
        assert RulesConfig().reachability_mode == ReachabilityMode.DIJKSTRA

    def test_dijkstra_finds_cheap_detour(self):
        model, unit = self.build(None)

        costs = model.planner.reachable_costs(unit)

        assert costs[(1, 1)] == 2
        assert costs[(2, 1)] == 3
        assert costs[(2, 0)] == 4

    def test_legacy_under_reports(self):
        model, unit = self.build(get_legacy_config())

        costs = model.planner.reachable_costs(unit)

        assert costs == {(0, 0): 0, (1, 0): 4, (0, 1): 1, (2, 0): 5, (1, 1): 5}
        assert (2, 1) not in model.query_move_locations(unit)


class TestWeightedGraph:
    """Tests for the standalone Dijkstra."""

    def test_unreachable_vertices_absent(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(unit, (0, 0)), (enemy, (2, 0))], missing={(1, 0)})
        graph = WeightedGraph({(0, 0): 1, (2, 0): 1}, model.tiles)

        assert set(graph.shortest_distances_from((0, 0))) == {(0, 0)}

    def test_unknown_start_gives_nothing(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(2, 1, [(unit, (0, 0)), (enemy, (1, 0))])

        assert WeightedGraph({}, model.tiles).shortest_distances_from((0, 0)) == {}

    def test_results_order_by_cost_then_settle_order(self):
        cheap = PathResult(vertex=Coord(0, 0), cost=1, path=(), order=5)
        tied = PathResult(vertex=Coord(1, 0), cost=1, path=(), order=2)
        dear = PathResult(vertex=Coord(2, 0), cost=2, path=(), order=0)

        assert min([cheap, tied, dear]) is tied


class TestShortestPaths:
    """Tests for shortest_path and shortest_path_to_engage."""

    def test_shortest_path_cost(self, cost_grid):
        unit = make_unit("walker", "p1", movement=5)
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 3, [(unit, (0, 0)), (enemy, (3, 0))], costs=[r + [1] for r in cost_grid])

        path = model.shortest_path(unit, (0, 0), (2, 2))

        assert path[0] == (0, 0)
        assert path[-1] == (2, 2)
        for a, b in zip(path, path[1:]):
            assert b in model.tiles.neighbor_coords(a)
        assert sum(model.get_tile_at(c).move_cost for c in path[1:]) == 5

    @pytest.mark.parametrize("start", [(c, r) for r in range(3) for c in range(3)])
    def test_shortest_path_matches_exhaustive_search(self, start, cost_grid):
        unit = make_unit("walker", "p1", movement=20)
        model = build_model(3, 3, [(unit, start)], costs=cost_grid, start=False)

        for end in [(c, r) for r in range(3) for c in range(3)]:
            path = model.shortest_path(unit, start, end)

            assert path[0] == start and path[-1] == end
            for a, b in zip(path, path[1:]):
                assert b in model.tiles.neighbor_coords(a)
            cost = sum(cost_grid[r][c] for c, r in path[1:])
            assert cost == cheapest_simple_path(cost_grid, start, end), end

    def test_shortest_path_out_of_reach(self):
        unit = make_unit("walker", "p1", movement=1)
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(unit, (0, 0)), (enemy, (4, 0))])

        assert model.shortest_path(unit, (0, 0), (3, 0)) is None

    def test_engage_stops_in_weapon_range(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(unit, (0, 0)), (enemy, (4, 0))])

        assert model.shortest_path_to_engage(unit, (0, 0), (4, 0), 1) == [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert model.shortest_path_to_engage(unit, (0, 0), (4, 0), 2) == [(0, 0), (1, 0), (2, 0)]

    def test_engage_from_current_tile(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(unit, (0, 0)), (enemy, (2, 0))])

        assert model.shortest_path_to_engage(unit, (0, 0), (2, 0), 2) == [(0, 0)]

    def test_engage_out_of_reach(self):
        unit = make_unit("walker", "p1", movement=1)
        enemy = make_unit("enemy", "p2")
        model = build_model(6, 1, [(unit, (0, 0)), (enemy, (5, 0))])

        assert model.shortest_path_to_engage(unit, (0, 0), (5, 0), 1) is None
