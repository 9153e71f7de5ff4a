"""YU Community backend: club content moderation and notification fan-out."""

__version__ = "0.1.0"
