"""
Illustra: AI-assisted illustration editor with masks and speech bubbles.
"""
__version__ = "0.1.0"
