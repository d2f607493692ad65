"""pathfilter — decide which named filters match a set of changed files."""

__version__ = "1.0.0"
