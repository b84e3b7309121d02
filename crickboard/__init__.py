"""CrickBoard: amateur cricket team tracker."""

__version__ = "0.1.0"
