"""Tests for session wiring, input routing and graceful degradation."""

import threading

import pytest

from stridebeat.config import SignalSettings
from stridebeat.modules.bpm_cadence_estimator import CadenceEstimator
from stridebeat.modules.bpm_session import Session
from stridebeat.modules.bpm_step_detector import Sample, StepEvent
from stridebeat.modules.bpm_vitals_mapper import TimbreClass
from stridebeat.utils.bpm_errors import ConfigurationError
from stridebeat.utils.bpm_sensor_codec import encode_heart_rate_measurement
from stridebeat.utils.bpm_simulator import (
    WalkProfile,
    heart_rate_ramp,
    iter_motion,
    walking_accelerations,
    walking_samples,
)


def walk(session, timestamps, low=9.8, high=13.0):
    """One step per timestamp: a high sample followed 100 ms later by a low one."""
    session.on_sample(Sample(low, timestamps[0] - 100))
    for ts in timestamps:
        session.on_sample(Sample(high, ts))
        session.on_sample(Sample(low, ts + 100))


class TestMotionStream:
    """Test motion sample ingestion."""

    def test_steps_drive_tempo(self, session):
        walk(session, [1000, 1500])
        signal = session.tick()
        assert session.steps == 2
        assert signal.tempo_bpm == pytest.approx(92.0)

    def test_on_motion_computes_magnitude(self, session):
        assert session.on_motion(0.0, 9.0, 0.0, 0) is None
        assert session.on_motion(3.0, 12.0, 4.0, 100) == StepEvent(timestamp=100)  # |v| = 13

    @pytest.mark.parametrize("axes", [(None, 9.8, 0.0), (0.0, None, 0.0), (0.0, 0.0, None), (float("nan"), 1.0, 1.0)])
    def test_missing_axis_is_skipped(self, session, axes):
        assert session.on_motion(*axes, 100) is None
        assert session.skipped_samples == 1
        assert session.detector.last_magnitude == 0.0

    def test_non_finite_magnitude_is_skipped(self, session):
        assert session.on_sample(Sample(float("inf"), 100)) is None
        assert session.skipped_samples == 1

    def test_skipped_sample_count_waits_for_motion_lock(self, session):
        """Anomaly counting goes through the same writer lock as reset."""
        with session._motion_lock:
            worker = threading.Thread(target=session.on_motion, args=(None, 9.8, 0.0, 100))
            worker.start()
            worker.join(timeout=0.1)
            assert worker.is_alive()
            assert session.skipped_samples == 0
        worker.join(timeout=2)
        assert session.skipped_samples == 1

    def test_skipped_sample_count_is_exact_under_contention(self, session):
        def feed_bad_samples():
            for i in range(100):
                session.on_sample(Sample(float("nan"), i))

        threads = [threading.Thread(target=feed_bad_samples) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        assert session.skipped_samples == 400

    def test_manual_cadence(self, session):
        session.set_manual_cadence(132.0)
        signal = session.tick()
        assert signal.tempo_bpm == 132.0
        assert signal.tempo_source == CadenceEstimator.SOURCE_MANUAL


class TestHeartRateStream:
    """Test heart rate ingestion."""

    def test_uint8_frame(self, session):
        assert session.on_heart_rate_frame(bytes([0x00, 135]), received_at=500) == 135
        signal = session.tick()
        assert signal.heart_rate == 135
        assert signal.timbre_class == TimbreClass.SHARP

    def test_uint16_frame(self, session):
        assert session.on_heart_rate_frame(bytes([0x01, 0x6E, 0x00])) == 110
        assert session.tick().brightness_hz == pytest.approx(2600.0)

    @pytest.mark.parametrize("frame", [b"", b"\x00", b"\x01\x6e"])
    def test_bad_frame_is_skipped(self, session, frame):
        session.on_heart_rate(100)
        assert session.on_heart_rate_frame(frame) is None
        assert session.skipped_frames == 1
        assert session.tick().heart_rate == 100

    def test_skipped_frame_count_waits_for_vitals_lock(self, session):
        with session._vitals_lock:
            worker = threading.Thread(target=session.on_heart_rate_frame, args=(b"",))
            worker.start()
            worker.join(timeout=0.1)
            assert worker.is_alive()
            assert session.skipped_frames == 0
        worker.join(timeout=2)
        assert session.skipped_frames == 1

    def test_manual_heart_rate(self, session):
        session.on_heart_rate(95)
        assert session.tick().timbre_class == TimbreClass.CLEAR


class TestInterleaving:
    """Test independent, unordered input streams."""

    def test_bursts_in_any_order(self, session):
        session.on_heart_rate(80)
        walk(session, [0, 500, 1000, 1500, 2000])
        session.on_heart_rate(120)
        session.on_heart_rate(125)
        walk(session, [2500, 3000])

        signal = session.tick()

        assert session.steps == 7
        assert signal.heart_rate == 125
        assert signal.timbre_class == TimbreClass.CLEAR
        assert signal.tempo_bpm > 80.0

    def test_concurrent_feeders(self, settings):
        session = Session(settings)
        timestamps, xyz = walking_accelerations(WalkProfile(spm=120, seed=3), duration_s=10)

        def feed_motion():
            for x, y, z, ts in iter_motion(timestamps, xyz):
                session.on_motion(x, y, z, ts)

        def feed_heart_rate():
            for ts, frame in heart_rate_ramp(70, 140, duration_s=10):
                session.on_heart_rate_frame(frame, received_at=ts)

        def poll():
            for _ in range(200):
                session.tick()

        threads = [threading.Thread(target=f) for f in (feed_motion, feed_heart_rate, poll)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        signal = session.tick()
        assert session.steps == pytest.approx(20, abs=1)
        assert signal.tempo_bpm == pytest.approx(120.0, abs=5.0)
        assert signal.heart_rate == 140


class TestSimulatedWalk:
    """End to end: synthetic accelerometer stream through the whole chain."""

    @pytest.mark.parametrize("spm", [90.0, 110.0, 140.0])
    def test_tempo_tracks_walking_cadence(self, session, spm):
        timestamps, xyz = walking_accelerations(WalkProfile(spm=spm, seed=7), duration_s=30)
        for x, y, z, ts in iter_motion(timestamps, xyz):
            session.on_motion(x, y, z, ts)
        assert session.tick().tempo_bpm == pytest.approx(spm, abs=4.0)

    def test_precomputed_magnitudes_match_axis_path(self, settings):
        """Feeding array-computed magnitudes gives the same steps and tempo as feeding axes."""
        profile = WalkProfile(spm=120.0, seed=11)
        by_axes = Session(settings)
        for x, y, z, ts in iter_motion(*walking_accelerations(profile, duration_s=20)):
            by_axes.on_motion(x, y, z, ts)
        by_magnitude = Session(settings)
        for m, ts in walking_samples(profile, duration_s=20):
            by_magnitude.on_sample(Sample(m, ts))

        assert by_magnitude.steps == by_axes.steps
        assert by_magnitude.tick().tempo_bpm == pytest.approx(by_axes.tick().tempo_bpm)
        assert by_magnitude.tick().tempo_bpm == pytest.approx(120.0, abs=4.0)


class TestResetAndSettings:
    """Test reset semantics and settings propagation."""

    def test_reset_discards_all_state(self, session):
        walk(session, [0, 500, 1000])
        session.on_heart_rate(150)
        session.on_heart_rate_frame(b"")
        session.tick()

        session.reset()
        signal = session.tick()

        assert session.steps == 0
        assert session.skipped_frames == 0
        assert session.cadence.history() == ()
        assert signal.tempo_bpm == 80.0
        assert signal.has_heart_rate is False

    def test_settings_reach_components(self):
        settings = SignalSettings(step_threshold=1.5, refractory_ms=100, window=8, alpha=0.5,
                                  hr_low=50, hr_high=150, bright_low=100.0, bright_high=1000.0)
        session = Session(settings)
        assert session.detector.threshold == 1.5
        assert session.detector.refractory_ms == 100
        assert session.cadence.window == 8
        assert session.cadence.alpha == 0.5
        assert session.vitals.hr_low == 50
        assert session.vitals.bright_high == 1000.0

    def test_invalid_settings_fail_at_construction(self):
        with pytest.raises(ConfigurationError):
            Session(SignalSettings(hr_low=160, hr_high=60))

    def test_subscriber_may_feed_session(self, session):
        """Callbacks run on the ticking thread and can call back into the session."""
        session.emitter.subscribe(lambda signal: session.on_heart_rate(100))
        session.tick()
        assert session.tick().heart_rate == 100
