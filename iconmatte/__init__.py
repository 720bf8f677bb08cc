"""
iconmatte: compare background removal algorithms on one image
"""

__version__ = "0.1.0"
