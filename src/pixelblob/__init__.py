"""
pixelblob - raw pixel buffer analysis engine.

Detects, separates and geometrically characterizes foreground objects on a white
background, and compares region color statistics against reference histograms.
"""

__version__ = "1.0.0"
