#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Vitals Mapper Module (bpm_vitals_mapper.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."

# Common imports
import math
from enum import Enum
from typing import Optional, Tuple

# App imports
from stridebeat import cfg, custom_logger as clog
from stridebeat.utils.bpm_errors import ConfigurationError


class TimbreClass(str, Enum):
    CALM  = "Calm"
    CLEAR = "Clear"
    SHARP = "Sharp"

    @property
    def waveform(self) -> str:
        return TIMBRE_WAVEFORMS[self]


TIMBRE_ORDER = (TimbreClass.CALM, TimbreClass.CLEAR, TimbreClass.SHARP)
TIMBRE_WAVEFORMS = {
    TimbreClass.CALM:  "sine",
    TimbreClass.CLEAR: "triangle",
    TimbreClass.SHARP: "sawtooth",
}


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class VitalsMapper:
    """
        Maps heart rate readings to a normalized intensity, a timbre class and a
        filter brightness. Readings outside the plausible range are clamped, never
        rejected; before the first reading the mapper reports `initial_hr`.
    """

    def __init__(self,
                 hr_low: int = cfg.HR_LOW,
                 hr_high: int = cfg.HR_HIGH,
                 bright_low: float = cfg.BRIGHT_LOW,
                 bright_high: float = cfg.BRIGHT_HIGH,
                 initial_hr: int = cfg.HR_INITIAL,
                 plausible_min: int = cfg.HR_PLAUSIBLE_MIN,
                 plausible_max: int = cfg.HR_PLAUSIBLE_MAX,
                 timbre_bounds: Tuple[int, int] = cfg.TIMBRE_BOUNDS,
                 hysteresis: int = cfg.TIMBRE_HYSTERESIS_BPM):
        if hr_low is None or hr_high is None or not hr_low < hr_high:
            raise ConfigurationError(f"Heart rate band needs HR_LOW < HR_HIGH, got {hr_low!r}..{hr_high!r}.")
        if bright_low is None or bright_high is None or not 0 < bright_low < bright_high:
            raise ConfigurationError(f"Brightness range needs 0 < BRIGHT_LOW < BRIGHT_HIGH, got {bright_low!r}..{bright_high!r}.")
        if plausible_min is None or plausible_max is None or not 0 <= plausible_min < plausible_max:
            raise ConfigurationError(f"Plausible heart rate range is invalid: {plausible_min!r}..{plausible_max!r}.")
        if len(timbre_bounds) != len(TIMBRE_ORDER) - 1 or not timbre_bounds[0] < timbre_bounds[1]:
            raise ConfigurationError(f"Timbre bounds must be two increasing values, got {timbre_bounds!r}.")
        if hysteresis is None or hysteresis < 0:
            raise ConfigurationError(f"Timbre hysteresis must be >= 0, got {hysteresis!r}.")

        self.hr_low = hr_low
        self.hr_high = hr_high
        self.bright_low = float(bright_low)
        self.bright_high = float(bright_high)
        self.plausible_min = plausible_min
        self.plausible_max = plausible_max
        self.timbre_bounds = tuple(timbre_bounds)
        self.hysteresis = hysteresis
        self.initial_hr = int(clamp(initial_hr, plausible_min, plausible_max))

        self.has_reading = False
        self.current_hr = self.initial_hr
        self.last_received_at: Optional[int] = None
        self._timbre = self._classify(self.current_hr)
        clog.debug(f"Vitals mapper ready (band={hr_low}..{hr_high} bpm, brightness={bright_low}..{bright_high} Hz).")

    def on_heart_rate(self, bpm: Optional[int], received_at: Optional[int] = None) -> None:
        if bpm is None or (isinstance(bpm, float) and not math.isfinite(bpm)):
            clog.warning(f"Missing heart rate reading ({bpm!r}), holding {self.current_hr} bpm.")
            return
        clamped = clamp(bpm, self.plausible_min, self.plausible_max)
        if clamped != bpm:
            clog.warning(f"Heart rate {bpm} outside plausible range, clamped to {clamped} bpm.")
        hr = int(round(clamped))

        self.current_hr = hr
        self.has_reading = True
        self.last_received_at = received_at
        self._timbre = self._next_timbre(hr)

    def intensity(self) -> float:
        return clamp((self.current_hr - self.hr_low) / (self.hr_high - self.hr_low), 0.0, 1.0)

    def timbre_class(self) -> TimbreClass:
        return self._timbre

    def brightness(self) -> float:
        return self.bright_low + self.intensity() * (self.bright_high - self.bright_low)

    def reset(self) -> None:
        self.has_reading = False
        self.current_hr = self.initial_hr
        self.last_received_at = None
        self._timbre = self._classify(self.current_hr)

    def _classify(self, hr: int) -> TimbreClass:
        calm_below, sharp_from = self.timbre_bounds
        if hr < calm_below:
            return TimbreClass.CALM
        if hr < sharp_from:
            return TimbreClass.CLEAR
        return TimbreClass.SHARP

    def _next_timbre(self, hr: int) -> TimbreClass:
        # Hysteresis: walk band by band from the current one and stop at the first
        # boundary the reading is not `hysteresis` bpm past.
        if not self.hysteresis:
            return self._classify(hr)
        bounds, h = self.timbre_bounds, self.hysteresis
        index = TIMBRE_ORDER.index(self._timbre)
        while index < len(bounds) and hr >= bounds[index] + h:
            index += 1
        while index > 0 and hr < bounds[index - 1] - h:
            index -= 1
        return TIMBRE_ORDER[index]
