"""
Build Visio stencils from folders of SVG/PNG images.
"""

__version__ = "0.1.0"
