# peerlearn/routers/chat/__init__.py
from .chat_router import router as chat_router

__all__ = ["chat_router"]
