"""
pathstore - local filesystem object store.

Path-addressed files and collections with derived metadata, plus the
credential and configuration providers used by the service built on top.
"""

__version__ = "0.1.0"
