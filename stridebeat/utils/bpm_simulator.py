#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Signal Simulator Module (bpm_simulator.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .bpm_sensor_codec import encode_heart_rate_measurement, magnitudes

GRAVITY = 9.81


@dataclass
class WalkProfile:
    spm: float = 110.0
    sample_rate_hz: int = 60
    step_amplitude: float = 4.0  # m/s^2 peak over gravity
    noise: float = 0.25
    seed: Optional[int] = None


def walking_accelerations(profile: WalkProfile, duration_s: float) -> Tuple[np.ndarray, np.ndarray]:
    """
        Synthetic acceleration-including-gravity triples for a steady walk.
        Returns (timestamps_ms, xyz) with xyz of shape (n, 3); each step is one
        positive half-wave on the vertical axis.
    """
    rng = np.random.default_rng(profile.seed)
    n = int(duration_s * profile.sample_rate_hz)
    t = np.arange(n) / profile.sample_rate_hz
    step_hz = profile.spm / 60.0

    vertical = GRAVITY + profile.step_amplitude * np.maximum(np.sin(2.0 * np.pi * step_hz * t), 0.0)
    xyz = np.column_stack((
        rng.normal(0.0, profile.noise, n),
        vertical + rng.normal(0.0, profile.noise, n),
        rng.normal(0.0, profile.noise, n),
    ))
    return np.round(t * 1000.0).astype(np.int64), xyz


def heart_rate_ramp(start_bpm: int, end_bpm: int, duration_s: float, interval_s: float = 1.0,
                    uint16: bool = False) -> List[Tuple[int, bytes]]:
    """ (timestamp_ms, frame) pairs for a linear heart rate ramp, one notification per interval. """
    times = np.arange(0.0, duration_s, interval_s)
    values = np.linspace(start_bpm, end_bpm, num=max(len(times), 1))
    return [(int(round(t * 1000.0)), encode_heart_rate_measurement(int(round(v)), uint16=uint16))
            for t, v in zip(times, values)]


def iter_motion(timestamps_ms: np.ndarray, xyz: np.ndarray) -> Iterator[Tuple[float, float, float, int]]:
    for ts, (x, y, z) in zip(timestamps_ms, xyz):
        yield float(x), float(y), float(z), int(ts)


def walking_samples(profile: WalkProfile, duration_s: float) -> Iterator[Tuple[float, int]]:
    """ (magnitude, timestamp_ms) pairs for a steady walk, norms computed in one pass. """
    timestamps, xyz = walking_accelerations(profile, duration_s)
    for m, ts in zip(magnitudes(xyz), timestamps):
        yield float(m), int(ts)
