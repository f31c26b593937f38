"""Configure WSL2 networking for direct internet access or access through a Px proxy."""

__version__ = "0.5.1"