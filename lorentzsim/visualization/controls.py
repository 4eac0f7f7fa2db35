# lorentzsim/visualization/controls.py
import logging

from matplotlib.widgets import Slider, Button

from lorentzsim.physics.params import InvalidParameterError
from lorentzsim.physics.vector import Vector3
from lorentzsim.config.settings import (
    CHARGE_RANGE,
    MASS_RANGE,
    VELOCITY_RANGE,
    B_FIELD_RANGE,
)

log = logging.getLogger(__name__)

PANEL_COLOR = "#0f172a"
SLIDER_COLOR = "#06b6d4"
TEXT_COLOR = "#e2e8f0"

# figure-fraction geometry of the panel on the right-hand side
_LEFT = 0.80
_WIDTH = 0.15
_ROW = 0.045
_TOP = 0.88


def _direction(v: Vector3) -> str:
    mag = v.magnitude()
    if mag < 0.001:
        return "(0, 0, 0)"
    return f"({v.x / mag:.2f}, {v.y / mag:.2f}, {v.z / mag:.2f})"


class ControlPanel:
    """
    Sliders for charge, mass, velocity and field plus Play/Pause, Reset and
    Explain buttons. Every change goes through loop.set_params(); invalid
    values are logged and ignored.
    """
    def __init__(self, fig, loop, on_explain=None):
        self.fig = fig
        self.loop = loop
        self.on_explain = on_explain
        self.sliders = {}

        p = loop.params
        rows = [
            ("charge", "q", CHARGE_RANGE, p.charge),
            ("mass", "m", MASS_RANGE, p.mass),
            ("vx", "v x", VELOCITY_RANGE, p.velocity.x),
            ("vy", "v y", VELOCITY_RANGE, p.velocity.y),
            ("vz", "v z", VELOCITY_RANGE, p.velocity.z),
            ("bx", "B x", B_FIELD_RANGE, p.b_field.x),
            ("by", "B y", B_FIELD_RANGE, p.b_field.y),
            ("bz", "B z", B_FIELD_RANGE, p.b_field.z),
        ]
        y = _TOP
        self.info = {}
        for key, label, (lo, hi, step), init in rows:
            if key in ("vx", "bx"):
                # gap above each vector group, holding its |v| / |B| read-out
                y -= _ROW * 0.6
                self.info[key[0]] = fig.text(_LEFT, y + _ROW * 0.6, "", fontsize=7,
                                             color=TEXT_COLOR, family="monospace")
            ax = fig.add_axes([_LEFT, y, _WIDTH, _ROW * 0.5], facecolor=PANEL_COLOR)
            s = Slider(ax, label, lo, hi, valinit=init, valstep=step, color=SLIDER_COLOR)
            s.label.set_color(TEXT_COLOR)
            s.valtext.set_color(TEXT_COLOR)
            s.on_changed(self._on_slider)
            self.sliders[key] = s
            y -= _ROW

        y -= _ROW
        self.play_button = Button(fig.add_axes([_LEFT, y, _WIDTH * 0.45, _ROW]), "Play",
                                  color="#14532d", hovercolor="#166534")
        self.reset_button = Button(fig.add_axes([_LEFT + _WIDTH * 0.55, y, _WIDTH * 0.45, _ROW]), "Reset",
                                   color="#334155", hovercolor="#475569")
        y -= _ROW * 1.3
        self.explain_button = Button(fig.add_axes([_LEFT, y, _WIDTH, _ROW]), "Explain",
                                     color="#1e3a8a", hovercolor="#1d4ed8")
        for b in (self.play_button, self.reset_button, self.explain_button):
            b.label.set_color(TEXT_COLOR)

        self.play_button.on_clicked(self._on_play)
        self.reset_button.on_clicked(self._on_reset)
        self.explain_button.on_clicked(self._on_explain)
        self.refresh()

    def read_params(self):
        s = {k: float(v.val) for k, v in self.sliders.items()}
        return self.loop.params.with_changes(
            charge=s["charge"],
            mass=s["mass"],
            velocity=Vector3(s["vx"], s["vy"], s["vz"]),
            b_field=Vector3(s["bx"], s["by"], s["bz"]),
        )

    def _on_slider(self, _val):
        try:
            params = self.read_params()
        except InvalidParameterError as e:
            log.warning("Ignoring invalid parameter input: %s", e)
            return
        self.loop.set_params(params)
        self.refresh()

    def _on_play(self, _event):
        self.loop.toggle()
        self.refresh()

    def _on_reset(self, _event):
        self.loop.reset()
        self.refresh()

    def _on_explain(self, _event):
        if self.on_explain is not None:
            self.on_explain(self.loop.params)

    def refresh(self):
        """Sync button label and magnitude read-outs with the loop."""
        self.play_button.label.set_text("Pause" if self.loop.playing else "Play")
        p = self.loop.params
        self.info["v"].set_text(f"|v|: {p.velocity.magnitude():.1f}  dir {_direction(p.velocity)}")
        self.info["b"].set_text(f"|B|: {p.b_field.magnitude():.1f}  dir {_direction(p.b_field)}")
