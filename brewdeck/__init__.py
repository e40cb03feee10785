"""brewdeck — search and manage Homebrew formulae and casks."""

__version__ = "0.1.0"
