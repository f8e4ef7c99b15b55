"""FastAPI routers acting as controllers in the MVC architecture."""

from . import chat, places, tts

__all__ = ["chat", "places", "tts"]
