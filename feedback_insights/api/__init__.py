from .server import InsightsServer, create_app

__all__ = ["InsightsServer", "create_app"]
