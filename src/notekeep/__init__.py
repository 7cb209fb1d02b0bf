"""NoteKeep - personal notes backend.

User registration, JWT access/refresh token rotation and
ownership-scoped note storage.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
