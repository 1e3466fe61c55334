"""Unit tests for the rising-edge step detector."""

import pytest

from stridebeat.modules.bpm_step_detector import Sample, StepDetector, StepEvent
from stridebeat.utils.bpm_errors import ConfigurationError


def feed(detector, magnitudes, start=0, step_ms=100):
    """Feed magnitudes at a fixed sample spacing, return emitted events."""
    events = []
    for i, m in enumerate(magnitudes):
        event = detector.observe(Sample(magnitude=m, timestamp=start + i * step_ms))
        if event is not None:
            events.append(event)
    return events


class TestRisingEdge:
    """Test threshold crossing detection."""

    def test_upward_crossing_emits_step(self, detector):
        """A sample above the threshold after one at or below it is a step."""
        assert detector.observe(Sample(10.0, 0)) is None
        assert detector.observe(Sample(13.0, 100)) == StepEvent(timestamp=100)

    def test_staying_above_threshold_emits_once(self, detector):
        """Only the crossing sample fires, not the plateau."""
        events = feed(detector, [10.0, 13.0, 14.0, 15.0, 13.5])
        assert events == [StepEvent(timestamp=100)]

    def test_value_equal_to_threshold_is_not_a_step(self, detector):
        """The comparison is strictly greater than the threshold."""
        assert feed(detector, [10.0, 12.0, 11.0]) == []

    def test_crossing_from_exactly_threshold(self, detector):
        """The previous magnitude may equal the threshold."""
        events = feed(detector, [12.0, 12.5])
        assert events == [StepEvent(timestamp=100)]

    def test_downward_crossing_is_ignored(self, detector):
        """Falling edges never produce steps."""
        detector.observe(Sample(15.0, 0))
        assert detector.observe(Sample(9.0, 400)) is None

    @pytest.mark.parametrize("magnitudes", [
        [9.0, 13.0, 9.0, 13.0],
        [15.0, 15.0, 10.0],
        [12.0, 12.0, 12.1, 11.9],
        [0.0, -3.0, 40.0, 11.0, 12.0],
    ])
    def test_last_magnitude_always_tracks_sample(self, detector, magnitudes):
        """last_magnitude equals the latest sample whether or not a step fired."""
        for i, m in enumerate(magnitudes):
            detector.observe(Sample(m, i * 50))
            assert detector.last_magnitude == m


class TestRefractoryPeriod:
    """Test suppression of crossings close to the previous step."""

    def test_crossing_inside_refractory_window_is_discarded(self, detector):
        """A second crossing 200 ms after a step emits nothing."""
        assert detector.observe(Sample(13.0, 1000)) is not None
        detector.observe(Sample(10.0, 1100))
        assert detector.observe(Sample(13.0, 1200)) is None

    def test_discarded_crossing_still_updates_last_magnitude(self, detector):
        """The refractory check does not skip the magnitude update."""
        detector.observe(Sample(13.0, 1000))
        detector.observe(Sample(10.0, 1100))
        detector.observe(Sample(13.0, 1200))
        assert detector.last_magnitude == 13.0
        # still above threshold, so no new edge once the window has passed
        assert detector.observe(Sample(13.5, 1400)) is None

    def test_crossing_at_window_end_is_accepted(self, detector):
        """Exactly refractory_ms after the last step a crossing fires again."""
        detector.observe(Sample(13.0, 1000))
        detector.observe(Sample(10.0, 1150))
        assert detector.observe(Sample(13.0, 1300)) == StepEvent(timestamp=1300)

    def test_discarded_crossing_does_not_restart_window(self, detector):
        """The window is measured from the last emitted step only."""
        feed(detector, [10.0, 13.0], start=0, step_ms=100)        # step at 100
        detector.observe(Sample(10.0, 200))
        assert detector.observe(Sample(13.0, 250)) is None        # discarded
        detector.observe(Sample(10.0, 300))
        assert detector.observe(Sample(13.0, 400)) == StepEvent(timestamp=400)

    def test_zero_refractory_accepts_every_crossing(self):
        """Without a refractory period each upward crossing is a step."""
        detector = StepDetector(threshold=12.0, refractory_ms=0)
        events = feed(detector, [10.0, 13.0, 10.0, 13.0, 10.0, 13.0], step_ms=10)
        assert [e.timestamp for e in events] == [10, 30, 50]


class TestConfiguration:
    """Test construction-time validation."""

    def test_threshold_is_configurable(self):
        """A lower threshold detects smaller swings."""
        detector = StepDetector(threshold=1.1, refractory_ms=0)
        assert feed(detector, [1.0, 1.2]) == [StepEvent(timestamp=100)]

    @pytest.mark.parametrize("threshold", [float("nan"), float("inf"), None])
    def test_invalid_threshold_fails_fast(self, threshold):
        with pytest.raises(ConfigurationError):
            StepDetector(threshold=threshold, refractory_ms=300)

    def test_negative_refractory_fails_fast(self):
        with pytest.raises(ConfigurationError):
            StepDetector(threshold=12.0, refractory_ms=-1)

    def test_reset_forgets_state(self, detector):
        detector.observe(Sample(13.0, 1000))
        detector.reset()
        assert detector.last_magnitude == 0.0
        assert detector.last_step_time is None
        assert detector.observe(Sample(13.0, 1100)) == StepEvent(timestamp=1100)
