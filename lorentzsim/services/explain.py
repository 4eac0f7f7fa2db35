"""
Plain-language explanation of the configured trajectory, generated by a
hosted text-generation model (Gemini REST API).

Never raises: a missing key, transport failure, HTTP error or unexpected
payload all degrade to a fixed placeholder string.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import requests

from lorentzsim.physics.vector import Vector3
from lorentzsim.physics.diagnostics import decompose_velocity, lorentz_force
from lorentzsim.config.settings import (
    EXPLAIN_API_KEY_ENV,
    EXPLAIN_API_KEY_FALLBACK_ENV,
    EXPLAIN_MODEL,
    EXPLAIN_ENDPOINT,
    EXPLAIN_TIMEOUT_SEC,
)

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Error: API key not found. Make sure the "
    f"{EXPLAIN_API_KEY_ENV} environment variable is set."
)
SERVICE_ERROR_MESSAGE = "Error talking to the AI service. Please try again later."
EMPTY_RESPONSE_MESSAGE = "No explanation received."


def _fmt_vec(v: Vector3) -> str:
    return f"({v.x:.2f}, {v.y:.2f}, {v.z:.2f})"


def get_api_key() -> Optional[str]:
    key = os.environ.get(EXPLAIN_API_KEY_ENV) or os.environ.get(EXPLAIN_API_KEY_FALLBACK_ENV)
    return key.strip() if key and key.strip() else None


def build_prompt(params) -> str:
    """
    Prompt with the raw parameters plus a few derived values (magnitudes,
    v x B) so the model has something to check its own reasoning against.
    """
    v_mag = params.velocity.magnitude()
    b_mag = params.b_field.magnitude()
    force_dir = params.velocity.cross(params.b_field)
    v_par, v_perp = decompose_velocity(params.velocity, params.b_field)

    return f"""
Act as an expert physicist explaining concepts to physics students.
A simulation shows a charged particle in a uniform magnetic field with:

  mass (m): {params.mass} units
  charge (q): {params.charge} units
  velocity (v): {_fmt_vec(params.velocity)} (magnitude: {v_mag:.2f})
  magnetic field (B): {_fmt_vec(params.b_field)} (magnitude: {b_mag:.2f})
  v x B: {_fmt_vec(force_dir)}
  force F = q(v x B): {_fmt_vec(lorentz_force(params))}
  |v_parallel|: {v_par.magnitude():.2f}, |v_perpendicular|: {v_perp.magnitude():.2f}

Analyse the expected motion:
1. Describe the type of trajectory (e.g. circular, helical, straight).
2. If circular or helical, compute the cyclotron radius (R = m v_perp / (|q| B)) and the period.
3. Briefly explain the direction of the magnetic (Lorentz) force relative to the velocity and the field.
4. Give a short, intuitive physical explanation.

Keep the answer concise and clear, formatted as Markdown.
"""


def _extract_text(payload: dict) -> str:
    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list):
        raise TypeError(f"candidates is {type(candidates).__name__}, expected list")
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()


def explain_trajectory(params, session: Optional[requests.Session] = None,
                       timeout: float = EXPLAIN_TIMEOUT_SEC) -> str:
    """
    Return Markdown text describing the motion for `params`, or one of the
    placeholder messages on failure.
    """
    api_key = get_api_key()
    if not api_key:
        logger.warning("Explain service: no API key in %s", EXPLAIN_API_KEY_ENV)
        return MISSING_KEY_MESSAGE

    url = EXPLAIN_ENDPOINT.format(model=EXPLAIN_MODEL)
    body = {
        "contents": [{"parts": [{"text": build_prompt(params)}]}],
        # fast response preferred for UI
        "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
    }
    http = session or requests

    try:
        r = http.post(url, json=body, headers={"x-goog-api-key": api_key}, timeout=timeout)
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Explain service request failed: %s", e)
        return SERVICE_ERROR_MESSAGE

    if not isinstance(payload, dict):
        logger.warning("Explain service returned unexpected payload type %s", type(payload).__name__)
        return SERVICE_ERROR_MESSAGE

    try:
        text = _extract_text(payload)
    except (AttributeError, TypeError, KeyError, IndexError) as e:
        logger.warning("Explain service payload has unexpected shape: %s", e)
        return SERVICE_ERROR_MESSAGE
    return text or EMPTY_RESPONSE_MESSAGE
