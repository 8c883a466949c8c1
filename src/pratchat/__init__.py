"""
PratChat: a real-time chat relay between WebSocket clients and a
generative language model.
"""

__version__ = "0.1.0"
