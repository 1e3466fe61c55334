#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Session Module (bpm_session.py)

    One Session owns one instance of every signal component for the lifetime of a
    walking session. Motion samples and heart rate readings are ingested
    independently, in any interleaving; `tick` reads the latest values of both.
    Input anomalies are logged and skipped, they never raise.
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."

# Common imports
import math
import threading
from typing import Optional

# App imports
from stridebeat import custom_logger as clog
from stridebeat.config import SignalSettings
from stridebeat.modules.bpm_cadence_estimator import CadenceEstimator
from stridebeat.modules.bpm_control_signal import ControlSignal, ControlSignalEmitter
from stridebeat.modules.bpm_step_detector import Sample, StepDetector, StepEvent
from stridebeat.modules.bpm_vitals_mapper import VitalsMapper
from stridebeat.utils.bpm_errors import FrameDecodeError
from stridebeat.utils.bpm_sensor_codec import decode_heart_rate_measurement, magnitude


class Session:

    def __init__(self, settings: Optional[SignalSettings] = None):
        self.settings = settings or SignalSettings()
        s = self.settings
        self.detector = StepDetector(threshold=s.step_threshold, refractory_ms=s.refractory_ms)
        self.cadence = CadenceEstimator(window=s.window, alpha=s.alpha, initial_tempo=s.initial_tempo)
        self.vitals = VitalsMapper(hr_low=s.hr_low, hr_high=s.hr_high,
                                   bright_low=s.bright_low, bright_high=s.bright_high,
                                   initial_hr=s.initial_hr,
                                   plausible_min=s.hr_plausible_min, plausible_max=s.hr_plausible_max,
                                   timbre_bounds=s.timbre_bounds, hysteresis=s.timbre_hysteresis)
        self.emitter = ControlSignalEmitter(self.cadence, self.vitals, ramp_seconds=s.ramp_seconds)

        # One writer lock per input stream, tick takes both briefly.
        self._motion_lock = threading.RLock()
        self._vitals_lock = threading.RLock()
        self.steps = 0
        self.skipped_samples = 0
        self.skipped_frames = 0
        clog.info(f"Session created with settings {s.as_dict()}.")

    # Motion stream

    def on_sample(self, sample: Sample) -> Optional[StepEvent]:
        with self._motion_lock:
            if sample.magnitude is None or not math.isfinite(sample.magnitude):
                self._skip_sample(f"Skipping sample at {sample.timestamp} ms with magnitude {sample.magnitude!r}.")
                return None
            event = self.detector.observe(sample)
            if event is not None:
                self.steps += 1
                self.cadence.on_step(event)
        return event

    def on_motion(self, x: Optional[float], y: Optional[float], z: Optional[float], timestamp: int) -> Optional[StepEvent]:
        m = magnitude(x, y, z)
        if m is None:
            with self._motion_lock:
                self._skip_sample(f"Skipping motion sample at {timestamp} ms with missing or invalid axes ({x!r}, {y!r}, {z!r}).")
            return None
        return self.on_sample(Sample(magnitude=m, timestamp=timestamp))

    def _skip_sample(self, message: str) -> None:
        # Caller holds the motion lock.
        self.skipped_samples += 1
        clog.warning(message)

    def set_manual_cadence(self, spm: float) -> None:
        with self._motion_lock:
            self.cadence.set_tempo(spm)

    # Heart rate stream

    def on_heart_rate(self, bpm: Optional[int], received_at: Optional[int] = None) -> None:
        with self._vitals_lock:
            self.vitals.on_heart_rate(bpm, received_at)

    def on_heart_rate_frame(self, frame: bytes, received_at: Optional[int] = None) -> Optional[int]:
        try:
            bpm = decode_heart_rate_measurement(frame)
        except FrameDecodeError as e:
            with self._vitals_lock:
                self.skipped_frames += 1
            clog.warning(f"Skipping heart rate frame {bytes(frame).hex()!r}: {e}")
            return None
        self.on_heart_rate(bpm, received_at)
        return bpm

    # Output

    def tick(self) -> ControlSignal:
        with self._motion_lock, self._vitals_lock:
            return self.emitter.tick()

    def reset(self) -> None:
        """ Discard all accumulated state, settings and subscribers are kept. """
        with self._motion_lock, self._vitals_lock:
            self.detector.reset()
            self.cadence.reset()
            self.vitals.reset()
            self.emitter.reset()
            self.steps = 0
            self.skipped_samples = 0
            self.skipped_frames = 0
        clog.info("Session state discarded.")
