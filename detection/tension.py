from __future__ import annotations

import hparams as HP
from .models import Measurement


def distance_to_tension(distance: float) -> float:
    """Actuator tension setpoint for a shot at *distance* (linear fit)."""
    return HP.TENSION_SLOPE * distance + HP.TENSION_INTERCEPT


def apply_tension(target: Measurement) -> Measurement:
    """Fill ``target.tension`` from its vertical distance estimate when valid."""
    if target.valid:
        target.tension = distance_to_tension(target.distance_y)
    return target
