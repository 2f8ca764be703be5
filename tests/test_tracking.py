# ABOUTME: Tests for the injected event sinks
# ABOUTME: Verifies that the logging sink emits structured records for every event

from structlog.testing import capture_logs

from commons_attribution.tracking import LoggingEventSink, NullEventSink


class TestNullEventSink:
    def test_events_are_dropped(self):
        sink = NullEventSink()

        assert sink.track_event("asset", "lookup-success", "File:Foo.jpg") is None
        assert sink.track_page_load("asset") is None


class TestLoggingEventSink:
    """Test the event sink writing structured log records."""

    def test_track_event(self):
        with capture_logs() as logs:
            sink = LoggingEventSink(site="test-site")
            sink.track_event("asset", "lookup-failure", "File:Foo.jpg", 1)

        assert logs == [
            {
                "event": "Tracked event",
                "log_level": "info",
                "site": "test-site",
                "category": "asset",
                "action": "lookup-failure",
                "event_name": "File:Foo.jpg",
                "value": 1,
            }
        ]

    def test_track_page_load(self):
        with capture_logs() as logs:
            LoggingEventSink().track_page_load("asset")

        assert logs[0]["event"] == "Tracked page load"
        assert logs[0]["page_name"] == "asset"
        assert logs[0]["site"] == "commons-attribution"
