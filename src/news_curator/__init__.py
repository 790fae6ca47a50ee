"""Tech news curation for a given job role."""

__version__ = "0.1.0"
