"""Core model exports."""

from .api import ApiModel

__all__ = ["ApiModel"]
