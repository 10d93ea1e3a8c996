from .session import ChatSession
from .transcript import Transcript

__all__ = ["ChatSession", "Transcript"]
