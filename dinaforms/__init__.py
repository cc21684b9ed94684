"""
DinaForms: render user-input forms dynamically from JSON schemas.
"""

__version__ = "1.0.0"
