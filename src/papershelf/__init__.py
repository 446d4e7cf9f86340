"""
papershelf: a local research paper corpus manager.
"""

__version__ = "0.1.0"
