"""Periodic source waveforms used by the transient solvers."""

import math

from .circuit import WaveformType

TWO_PI = 2.0 * math.pi

_WAVEFORMS_BY_NAME = {w.value: w for w in WaveformType}


def generate_waveform(t: float, amplitude: float, frequency: float, phase: float = 0.0,
                      waveform_type=WaveformType.SINE) -> float:
    """
    Instantaneous value of a periodic source at time t.
    phase is in radians; unknown waveform types fall back to sine.
    """
    if isinstance(waveform_type, str):
        waveform_type = _WAVEFORMS_BY_NAME.get(waveform_type, WaveformType.SINE)

    theta = TWO_PI * frequency * t + phase
    p = theta % TWO_PI

    if waveform_type == WaveformType.SQUARE:
        return amplitude if p < math.pi else -amplitude
    if waveform_type == WaveformType.TRIANGLE:
        if p < math.pi:
            return amplitude * (2.0 * p / math.pi - 1.0)
        return amplitude * (3.0 - 2.0 * p / math.pi)
    if waveform_type == WaveformType.SAWTOOTH:
        return amplitude * (p / math.pi - 1.0)
    return amplitude * math.sin(theta)
