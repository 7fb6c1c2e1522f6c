from .schema import SessionView, SessionUpdate, StatusResponse

__all__ = ["SessionView", "SessionUpdate", "StatusResponse"]
