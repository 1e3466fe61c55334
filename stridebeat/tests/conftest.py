"""Common test fixtures for stridebeat tests."""

import pytest

from stridebeat.config import SignalSettings
from stridebeat.modules.bpm_cadence_estimator import CadenceEstimator
from stridebeat.modules.bpm_control_signal import ControlSignalEmitter
from stridebeat.modules.bpm_session import Session
from stridebeat.modules.bpm_step_detector import StepDetector
from stridebeat.modules.bpm_vitals_mapper import VitalsMapper


@pytest.fixture
def settings():
    """Settings pinned to the documented defaults, independent of the environment."""
    return SignalSettings(
        step_threshold=12.0,
        refractory_ms=300,
        window=5,
        alpha=0.7,
        initial_tempo=80.0,
        hr_low=60,
        hr_high=160,
        initial_hr=70,
        hr_plausible_min=20,
        hr_plausible_max=300,
        timbre_bounds=(90, 130),
        timbre_hysteresis=0,
        bright_low=200.0,
        bright_high=5000.0,
        ramp_seconds=0.5,
        tick_interval_ms=250,
    )


@pytest.fixture
def detector():
    return StepDetector(threshold=12.0, refractory_ms=300)


@pytest.fixture
def cadence():
    return CadenceEstimator(window=5, alpha=0.7, initial_tempo=80.0)


@pytest.fixture
def vitals():
    return VitalsMapper(hr_low=60, hr_high=160, bright_low=200.0, bright_high=5000.0, initial_hr=70,
                        plausible_min=20, plausible_max=300, timbre_bounds=(90, 130), hysteresis=0)


@pytest.fixture
def emitter(cadence, vitals):
    return ControlSignalEmitter(cadence, vitals, ramp_seconds=0.5)


@pytest.fixture
def session(settings):
    return Session(settings)
