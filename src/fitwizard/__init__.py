"""
fitwizard: progression and performance analytics for strength training logs.
"""

__version__ = "0.1.0"
