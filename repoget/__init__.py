"""
repoget: fetch remote repositories into a URL-keyed tree and jump into them.
"""

__version__ = "0.3.0"
