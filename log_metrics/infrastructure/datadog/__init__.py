from .base_client import BaseDatadogClient

__all__ = ["BaseDatadogClient"]
