#!/usr/bin/env python3
"""
Test Script for the Workspace Grid

Covers bounds derived from the link lengths, floor bucketing including the
maximum edges, out-of-range tolerance, and the append-only visited map.
"""

import math

import numpy as np
import pytest

from twolink_explorer import (
    ConfigurationBoundsError, RobotConfig, RobotDef, TwoLinkArm, WorkspaceGrid, forward,
)
from twolink_explorer import config as cfg


def reference_def():
    return RobotDef(l1=20, l2=20, q1_min=0.0, q1_max=math.pi,
                    q2_min=-math.pi / 2, q2_max=math.pi / 2)


def test_bounds_from_robot_def():
    """Test that bounds come from l1 + l2 and the tick size from the resolution."""
    print("=" * 60)
    print("Test 1: Grid Bounds")
    print("=" * 60)

    grid = WorkspaceGrid.from_robot_def(reference_def(), cols=40, rows=20,
                                        allow_negative_reach=False)
    print(f"✓ {grid}")
    assert grid.bounds == (-40.0, 40.0, 0.0, 40.0)
    assert grid.tick_x == 2.0
    assert grid.tick_y == 2.0
    assert grid.visited.shape == (20, 40)
    assert grid.visited_count == 0

    both_ways = WorkspaceGrid.from_robot_def(reference_def(), allow_negative_reach=True)
    assert both_ways.bounds == (-40.0, 40.0, -40.0, 40.0)
    assert both_ways.tick_y == 4.0

    # The reference limits let link 2 point downward, so the default grid extends below
    assert WorkspaceGrid.from_robot_def(reference_def()).bounds == both_ways.bounds

    upward = RobotDef(l1=20, l2=20, q1_min=0.0, q1_max=math.pi / 2, q2_min=0.0, q2_max=math.pi / 2)
    assert WorkspaceGrid.from_robot_def(upward).bounds == (-40.0, 40.0, 0.0, 40.0)

    shifted = WorkspaceGrid.from_robot_def(reference_def(), base=(10.0, 5.0),
                                           allow_negative_reach=False)
    assert shifted.bounds == (-30.0, 50.0, 5.0, 45.0)
    assert WorkspaceGrid.from_robot_def(reference_def(), base=(10.0, 5.0)).bounds == \
        (-30.0, 50.0, -35.0, 45.0)


def test_bucketing_edges():
    """Test floor bucketing and the last-cell rule at the maximum edges."""
    print("\n" + "=" * 60)
    print("Test 2: Bucketing")
    print("=" * 60)

    grid = WorkspaceGrid(-40, 40, 0, 40, cols=40, rows=20)

    assert grid.bucket((40.0, 40.0)) == (19, 39)
    assert grid.bucket((-40.0, 0.0)) == (0, 0)
    assert grid.bucket((0.0, 0.0)) == (0, 20)
    assert grid.bucket((-0.001, 1.999)) == (0, 19)
    assert grid.bucket((3.0, 5.0)) == (2, 21)
    assert grid.bucket((40.0, 10.0)) == (5, 39)
    print("✓ (40, 40) buckets to row=19, col=39")

    for outside in [(40.001, 10.0), (-40.5, 10.0), (0.0, -0.01), (0.0, 41.0), (math.nan, 1.0)]:
        assert grid.bucket(outside) is None
    print("✓ Points outside the bounds have no cell")


def test_mark_visited_is_idempotent_and_tolerant():
    grid = WorkspaceGrid(-40, 40, 0, 40, cols=40, rows=20)

    assert grid.mark_visited((40.0, 40.0)) is True
    snapshot = grid.visited.copy()
    assert grid.mark_visited((40.0, 40.0)) is False
    assert grid.mark_visited((39.5, 38.5)) is False
    np.testing.assert_array_equal(grid.visited, snapshot)
    assert grid.is_visited(19, 39)
    assert grid.visited_count == 1

    assert grid.mark_visited((100.0, 100.0)) is False
    assert grid.mark_visited((0.0, -5.0)) is False
    np.testing.assert_array_equal(grid.visited, snapshot)
    print("✓ Marking is idempotent and ignores out-of-range points")


def test_visited_map_is_append_only():
    """Test that visited cells survive many updates and the map is read-only."""
    d = reference_def()
    grid = WorkspaceGrid.from_robot_def(d)
    seen = set()

    for q1 in np.linspace(d.q1_min, d.q1_max, 60):
        seg2 = forward(d, RobotConfig(q1, 0.3)).seg2
        grid.mark_visited(seg2)
        seen.add(grid.bucket(seg2))
        for cell in seen:
            assert grid.is_visited(*cell)

    assert set(grid.visited_cells()) == seen
    assert grid.coverage() == pytest.approx(len(seen) / 800)

    with pytest.raises(ValueError):
        grid.visited[0, 0] = True
    assert len(seen) > 10
    print(f"✓ {len(seen)} cells stayed visited across 60 updates")


def test_cell_bounds():
    grid = WorkspaceGrid(-40, 40, 0, 40, cols=40, rows=20)
    assert grid.cell_bounds(0, 0) == (-40.0, 0.0, -38.0, 2.0)
    assert grid.cell_bounds(19, 39) == (38.0, 38.0, 40.0, 40.0)
    with pytest.raises(IndexError):
        grid.cell_bounds(20, 0)


def test_mark_sweep_covers_reachable_cells():
    d = reference_def()
    arm = TwoLinkArm(d)
    grid = WorkspaceGrid.from_robot_def(d)

    newly = grid.mark_sweep(arm, resolution=60)
    assert newly == grid.visited_count > 0
    assert grid.mark_sweep(arm, resolution=60) == 0

    # The stretched-out pose reaches the far right edge
    assert grid.is_visited(*grid.bucket((40.0, 0.0)))
    # Nothing outside the outer reach circle is ever marked
    for row, col in grid.visited_cells():
        x0, y0, x1, y1 = grid.cell_bounds(row, col)
        nearest_x = min(max(0.0, x0), x1)
        nearest_y = min(max(0.0, y0), y1)
        assert math.hypot(nearest_x, nearest_y) <= d.reach + 1e-9
    print(f"✓ Sweep coverage {100 * grid.coverage():.1f}%")


def test_default_grid_holds_every_reachable_point():
    """Test that no end-effector position of the default arm falls off the grid."""
    d = cfg.default_robot_def()
    arm = TwoLinkArm(d)
    grid = WorkspaceGrid.from_robot_def(d)

    # Folded straight down from the stretched pose
    low = arm.forward(arm.clamp(0.0, -math.pi / 2)).seg2
    assert low == pytest.approx((20.0, -20.0))
    assert grid.bucket(low) is not None

    expected = set()
    (q1_min, q1_max), (q2_min, q2_max) = arm.get_joint_limits()
    for q1 in np.linspace(q1_min, q1_max, 45):
        for q2 in np.linspace(q2_min, q2_max, 45):
            seg2 = arm.forward(RobotConfig(float(q1), float(q2))).seg2
            cell = grid.bucket(seg2)
            assert cell is not None, f"{seg2} outside {grid.bounds}"
            expected.add(cell)

    grid.mark_sweep(arm, resolution=45)
    assert set(grid.visited_cells()) == expected
    assert grid.is_visited(*grid.bucket(low))
    print(f"✓ All {45 * 45} sampled poses landed in {len(expected)} cells")


def test_invalid_grid_rejected():
    with pytest.raises(ConfigurationBoundsError):
        WorkspaceGrid(-1, 1, 0, 1, cols=0, rows=10)
    with pytest.raises(ConfigurationBoundsError):
        WorkspaceGrid(1, 1, 0, 1)


if __name__ == "__main__":
    test_bounds_from_robot_def()
    test_bucketing_edges()
    test_mark_visited_is_idempotent_and_tolerant()
    test_visited_map_is_append_only()
    test_cell_bounds()
    test_mark_sweep_covers_reachable_cells()
    test_default_grid_holds_every_reachable_point()
    test_invalid_grid_rejected()
    print("\n✅ All workspace grid tests passed!")
