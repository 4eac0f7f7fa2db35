# tests/test_canvas.py
import matplotlib.pyplot as plt
import numpy as np
import pytest

from lorentzsim.physics.solver import reset, step
from lorentzsim.physics.vector import Vector3
from lorentzsim.visualization.camera import CameraState
from lorentzsim.visualization.canvas import FrameCanvas, radial_gradient, render_to_file, viewport_size
from lorentzsim.visualization.scene import compose_frame


@pytest.fixture
def fig():
    f = plt.figure(figsize=(8, 6), dpi=100)
    yield f
    plt.close(f)


def played(params, n=30):
    state = reset(params)
    for _ in range(n):
        state = step(state, params)
    return state


class TestRadialGradient:

    def test_range_and_center(self):
        g = radial_gradient(80, 60, (30, 30))
        assert g.shape == (60, 80)
        assert g[30, 30] == 0.0
        assert 0.0 <= g.min() and g.max() <= 1.0


class TestFrameCanvas:

    def test_viewport_size(self, fig):
        assert viewport_size(fig) == pytest.approx((800.0, 600.0))

    def test_draw_full_frame(self, fig, params):
        canvas = FrameCanvas(fig)
        w, h = viewport_size(fig)
        frame = compose_frame(played(params), params, CameraState(), w, h)
        artists = canvas.draw(frame)
        assert canvas.particle.get_visible()
        assert canvas.hud.get_text() == frame.hud
        assert len(canvas.trail.get_xdata()) == 30
        assert len(canvas.field_shafts.get_segments()) == len(frame.field_arrows)
        assert canvas.ax.get_xlim() == (0.0, w)
        assert canvas.ax.get_ylim() == (h, 0.0)
        fig.canvas.draw()
        assert canvas.particle in artists

    def test_draw_empty_layers(self, fig, params):
        p = params.with_changes(velocity=Vector3(0, 0, 0), b_field=Vector3(0, 0, 0))
        canvas = FrameCanvas(fig)
        frame = compose_frame(reset(p), p, CameraState(), 800, 600)
        canvas.draw(frame)
        assert len(canvas.field_shafts.get_segments()) == 0
        assert len(canvas.velocity_shaft.get_segments()) == 0
        assert len(canvas.trail.get_xdata()) == 0
        fig.canvas.draw()

    def test_resize_updates_limits(self, fig, params):
        canvas = FrameCanvas(fig)
        canvas.draw(compose_frame(reset(params), params, CameraState(), 800, 600))
        canvas.draw(compose_frame(reset(params), params, CameraState(), 1024, 768))
        assert canvas.ax.get_xlim() == (0.0, 1024.0)
        assert np.asarray(canvas.background.get_array()).shape == (768, 1024)


def test_render_to_file(tmp_path, params):
    frame = compose_frame(played(params), params, CameraState(), 320, 240)
    out = render_to_file(frame, tmp_path / "frame.png")
    assert (tmp_path / "frame.png").exists()
    assert out.endswith("frame.png")
