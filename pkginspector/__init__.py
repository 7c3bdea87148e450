"""pkginspector - inspect .pkg and .nupkg package archives."""

__version__ = "1.0.0"
