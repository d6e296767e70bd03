"""
splashy - beautiful Unsplash photos as desktop wallpapers, from the command line.
"""

__version__ = "0.1.0"
