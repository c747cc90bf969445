"""Deep Time AR core: era transitions and creature placement."""

__version__ = "0.1.0"
