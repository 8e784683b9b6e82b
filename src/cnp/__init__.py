"""check-node-packages core package.

Finds declared npm dependencies that no source file references, and removes
them with the project's package manager on request.
"""

__version__ = "1.0.2"

__all__ = [
    "core",
]
