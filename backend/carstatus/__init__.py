"""
Car status API over a TeslaMate database
"""

__version__ = "0.1.0"
