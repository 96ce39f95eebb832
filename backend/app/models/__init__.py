from app.models.event import Event, EventSource, EventType  # noqa: F401
