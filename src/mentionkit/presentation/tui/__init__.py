from .app import MentionDemoApp

__all__ = ["MentionDemoApp"]
