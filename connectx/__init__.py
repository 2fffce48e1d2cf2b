"""Connect-X match server for 2D and 3D boards over WebSockets."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "models",
    "match2d",
    "controller2d",
    "match3d",
    "controller3d",
    "protocol",
    "hub",
    "server",
    "client",
]