"""Console reporting for engagement analysis results."""

from .formatter_base import OutputFormatter

__all__ = ['OutputFormatter']
