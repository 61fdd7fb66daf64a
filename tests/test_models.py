"""Tests for pydantic models.

Tests validate:
1. Launch timings must be finite and non-negative
2. camelCase aliases accepted for host payloads
3. DailyReport is immutable and serializes to the wire keys
"""

import pytest
from pydantic import ValidationError

from usagestats.models.types import DailyReport, HttpRequest, LaunchStats


@pytest.fixture
def report() -> DailyReport:
    return DailyReport(
        app_version="1.2.3",
        os_version="22.6.0",
        main_ready_time=200.0,
        load_time=300.0,
        renderer_ready_time=70.0,
        commits=5,
    )


class TestLaunchStats:
    """Test LaunchStats model."""

    def test_valid_launch_stats(self):
        """Valid timings should create model."""
        stats = LaunchStats(main_ready_time=100, load_time=200, renderer_ready_time=50)
        assert stats.main_ready_time == 100.0
        assert stats.renderer_ready_time == 50.0

    def test_accepts_camel_case(self):
        """Host payloads may use the wire field names."""
        stats = LaunchStats.model_validate(
            {"mainReadyTime": 1.5, "loadTime": 2, "rendererReadyTime": 0}
        )
        assert stats.main_ready_time == 1.5
        assert stats.load_time == 2.0
        assert stats.renderer_ready_time == 0.0

    def test_negative_timing_rejected(self):
        """Durations cannot be negative."""
        with pytest.raises(ValidationError):
            LaunchStats(main_ready_time=-1, load_time=200, renderer_ready_time=50)

    @pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_timing_rejected(self, bad):
        """Timings must be finite to be sent as JSON."""
        with pytest.raises(ValidationError):
            LaunchStats(main_ready_time=100, load_time=bad, renderer_ready_time=50)

    def test_missing_timing_rejected(self):
        """All three timings are required."""
        with pytest.raises(ValidationError):
            LaunchStats.model_validate({"main_ready_time": 1, "load_time": 2})


class TestDailyReport:
    """Test DailyReport model."""

    def test_payload_keys(self, report: DailyReport):
        """to_payload uses the collection endpoint's field names."""
        assert report.to_payload() == {
            "version": "1.2.3",
            "osVersion": "22.6.0",
            "mainReadyTime": 200.0,
            "loadTime": 300.0,
            "rendererReadyTime": 70.0,
            "commits": 5,
        }

    def test_is_frozen(self, report: DailyReport):
        """Reports cannot be modified after construction."""
        with pytest.raises(ValidationError):
            report.commits = 6

    def test_negative_commits_rejected(self):
        """Commit counts are non-negative."""
        with pytest.raises(ValidationError):
            DailyReport(
                app_version="1",
                os_version="1",
                main_ready_time=0,
                load_time=0,
                renderer_ready_time=0,
                commits=-1,
            )


class TestHttpRequest:
    """Test HttpRequest model."""

    def test_defaults(self):
        """Method defaults to POST with no headers."""
        request = HttpRequest(url="https://stats.test", body={"commits": 1})
        assert request.method == "POST"
        assert request.headers == {}
