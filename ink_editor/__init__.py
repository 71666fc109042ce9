"""
Ink Editor

The editing engine of a stylus-driven text editor: classifies handwritten
ink on a character grid, recognizes characters and editing gestures against
a learned template database, and applies the result to a text buffer.
"""

__version__ = "0.1.0"
