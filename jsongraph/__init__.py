"""
jsongraph - view a JSON document as a graph of nodes and edit it in place.
"""

__version__ = "0.3.0"
