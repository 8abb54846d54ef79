"""Version Guard - lock an installed application version and block its updater."""

__version__ = "0.3.0"
