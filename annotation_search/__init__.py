"""Search annotations through class hierarchies and enclosing scopes."""

__version__ = "0.0.1"
__author__ = "Annotation Search Developers"
__license__ = "License :: OSI Approved :: MIT License"
__status__ = "Alpha"
