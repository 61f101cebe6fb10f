"""
Landing page redirect service (xkcd / APOD archive)
"""

__version__ = "1.0.0"
