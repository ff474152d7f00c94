from .event_loop import BackgroundEventLoop

__all__ = ["BackgroundEventLoop"]
