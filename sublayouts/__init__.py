"""
sublayouts - Grupos de ventanas con layouts anidados para un tiling WM.

Run the demo with:  python -m sublayouts
"""

__version__ = "0.1.0"
