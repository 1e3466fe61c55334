#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Control Signal Module (bpm_control_signal.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."

# Common imports
from dataclasses import dataclass
from typing import Callable, List, Optional

# App imports
from stridebeat import cfg, custom_logger as clog
from stridebeat.modules.bpm_cadence_estimator import CadenceEstimator
from stridebeat.modules.bpm_vitals_mapper import TimbreClass, VitalsMapper
from stridebeat.utils.bpm_errors import ConfigurationError


@dataclass(frozen=True)
class ControlSignal:
    """ Snapshot read by the audio engine and the display. """
    tempo_bpm: float
    timbre_class: TimbreClass
    brightness_hz: float
    waveform: str
    intensity: float
    heart_rate: int
    has_heart_rate: bool
    tempo_source: str
    ramp_seconds: float

    @property
    def label(self) -> str:
        hr = f"{self.heart_rate} bpm" if self.has_heart_rate else "no heart rate yet"
        return f"{self.tempo_bpm:.0f} BPM | {self.timbre_class.value} ({self.waveform}) | {self.brightness_hz:.0f} Hz | {hr}"


SignalCallback = Callable[[ControlSignal], None]


class ControlSignalEmitter:
    """
        Aggregates the cadence and vitals outputs into one immutable ControlSignal per
        tick. Tick rate does not feed back into the components. Subscribers are only
        called when a tick produced a snapshot that differs from the previous one.
    """

    def __init__(self, cadence: CadenceEstimator, vitals: VitalsMapper, ramp_seconds: float = cfg.TEMPO_RAMP_S):
        if ramp_seconds is None or ramp_seconds < 0:
            raise ConfigurationError(f"Tempo ramp must be >= 0 s, got {ramp_seconds!r}.")
        self.cadence = cadence
        self.vitals = vitals
        self.ramp_seconds = float(ramp_seconds)
        self.previous: Optional[ControlSignal] = None
        self.last_changed = False
        self._subscribers: List[SignalCallback] = []

    def subscribe(self, callback: SignalCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: SignalCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def tick(self) -> ControlSignal:
        timbre = self.vitals.timbre_class()
        signal = ControlSignal(
            tempo_bpm=self.cadence.current_tempo(),
            timbre_class=timbre,
            brightness_hz=self.vitals.brightness(),
            waveform=timbre.waveform,
            intensity=self.vitals.intensity(),
            heart_rate=self.vitals.current_hr,
            has_heart_rate=self.vitals.has_reading,
            tempo_source=self.cadence.source,
            ramp_seconds=self.ramp_seconds,
        )
        self.last_changed = signal != self.previous
        self.previous = signal
        if self.last_changed:
            self._notify(signal)
        return signal

    def reset(self) -> None:
        self.previous = None
        self.last_changed = False

    def _notify(self, signal: ControlSignal) -> None:
        for callback in list(self._subscribers):
            try:
                callback(signal)
            except Exception as e:
                clog.error(f"Subscriber {getattr(callback, '__name__', callback)!r} failed: {e}")
