"""
linkfinder: find-or-create front end for a short-link store.

Type part of an alias or URL; matching links are offered as you type, and
anything that does not exist yet can be shortened on the spot.
"""

__version__ = "1.0.0"
