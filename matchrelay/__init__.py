"""Two-player matchmaking and game-state relay over WebSockets.

The lobby (queue + room registry) is kept free of FastAPI concerns so it can
be driven by the WebSocket route, tests, or another transport.
"""

__version__ = "0.1.0"
