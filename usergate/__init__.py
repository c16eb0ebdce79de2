"""usergate: credential login and bearer-token gate for the users API."""

__version__ = "0.1.0"
