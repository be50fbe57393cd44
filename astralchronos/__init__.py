"""
AstralChronos: a space history, astronomy and exploration website.
"""

__version__ = "1.0.0"
