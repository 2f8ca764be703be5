# ABOUTME: Injected event-sink capability for usage analytics
# ABOUTME: Ships a no-op sink and one that writes events as structured log records

from typing import Protocol

from commons_attribution.utils.logging import get_logger


class EventSink(Protocol):
    """Receives usage events; implementations decide where they go."""

    def track_event(self, category: str, action: str, name: str | None = None, value: float | None = None) -> None:
        """Record an event such as a resolved or failed asset lookup."""
        ...

    def track_page_load(self, page_name: str) -> None:
        """Record that a page (or CLI command) was shown."""
        ...


class NullEventSink:
    """Event sink that drops every event."""

    def track_event(self, category: str, action: str, name: str | None = None, value: float | None = None) -> None:
        pass

    def track_page_load(self, page_name: str) -> None:
        pass


class LoggingEventSink:
    """Event sink that emits each event as a structured log record."""

    def __init__(self, site: str = "commons-attribution"):
        self.site = site
        self.logger = get_logger(__name__).bind(site=site)

    def track_event(self, category: str, action: str, name: str | None = None, value: float | None = None) -> None:
        self.logger.info("Tracked event", category=category, action=action, event_name=name, value=value)

    def track_page_load(self, page_name: str) -> None:
        self.logger.info("Tracked page load", page_name=page_name)
