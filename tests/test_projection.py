# tests/test_projection.py
import math

import numpy as np
import pytest

from lorentzsim.visualization.camera import CameraState
from lorentzsim.visualization.projection import project, project_many, clip_label_position
from lorentzsim.physics.vector import Vector3

W, H = 800.0, 600.0
CX, CY = W / 2 - 100, H / 2


@pytest.fixture
def front():
    return CameraState(pitch=0.0, yaw=0.0, zoom=1.0)


class TestProject:

    def test_origin_maps_to_offset_center(self, front):
        p = project((0, 0, 0), front, W, H)
        assert p.x == pytest.approx(CX)
        assert p.y == pytest.approx(CY)
        assert p.scale == pytest.approx(600 / 400)

    def test_z_up_is_screen_up(self, front):
        p = project((0, 0, 10), front, W, H)
        assert p.y < CY
        assert p.x == pytest.approx(CX)

    def test_deterministic(self):
        cam = CameraState(pitch=0.3, yaw=-math.pi / 2, zoom=1.2)
        pt = Vector3(12.5, -3.25, 7.0)
        assert project(pt, cam, W, H) == project(pt, cam, W, H)

    def test_zoom_scales_offsets(self):
        pt = (40.0, 25.0, -30.0)
        offsets = []
        for zoom in (0.5, 1.0, 2.0, 4.0):
            p = project(pt, CameraState(pitch=0.3, yaw=0.7, zoom=zoom), W, H)
            offsets.append((p.x - CX, p.y - CY))
        for (x0, y0), (x1, y1) in zip(offsets, offsets[1:]):
            assert abs(x1) > abs(x0) and abs(y1) > abs(y0)
        assert offsets[2][0] == pytest.approx(2 * offsets[1][0])
        assert offsets[2][1] == pytest.approx(2 * offsets[1][1])

    def test_depth_clamped_behind_camera(self, front):
        # view y = -1000 -> depth -600, floored to 1
        p = project((0, -1000, 0), front, W, H)
        assert p.scale == pytest.approx(600.0)
        assert math.isfinite(p.x) and math.isfinite(p.y)

    def test_yaw_quarter_turn(self):
        cam = CameraState(pitch=0.0, yaw=math.pi / 2, zoom=1.0)
        # x1 = -y, y1 = x: a point on +y appears on the left
        p = project((0, 10, 0), cam, W, H)
        assert p.x < CX

    def test_project_many_matches_project(self):
        cam = CameraState(pitch=-0.4, yaw=2.1, zoom=0.8)
        pts = np.array([[0, 0, 0], [100, -50, 20], [-300, 200, 310], [0, -2000, 0]], dtype=float)
        out = project_many(pts, cam, W, H)
        for row, pt in zip(out, pts):
            ref = project(pt, cam, W, H)
            assert tuple(row) == pytest.approx(tuple(ref))


class TestClipLabel:

    def test_x_axis_pinned_to_right_edge(self, front):
        pos = clip_label_position((0, 0, 0), (100000, 0, 0), front, W, H)
        assert pos == pytest.approx((W - 25, CY))

    def test_z_axis_pinned_to_top_edge(self, front):
        pos = clip_label_position((0, 0, 0), (0, 0, 100000), front, W, H)
        assert pos == pytest.approx((CX, 25))

    def test_parallel_line_outside_returns_none(self, front):
        # in a 100x100 view the origin lands at x=-50, left of the inset box,
        # and the z axis runs straight up from there
        assert clip_label_position((0, 0, 0), (0, 0, 100000), front, 100, 100) is None

    def test_line_entering_from_outside(self, front):
        pos = clip_label_position((0, 0, 0), (100000, 0, 0), front, 100, 100)
        assert pos == pytest.approx((75, 50))

    def test_segment_ending_before_box_returns_none(self, front):
        # tip still left of the box: t0 > t1
        assert clip_label_position((0, 0, 0), (1, 0, 0), front, 100, 100) is None
