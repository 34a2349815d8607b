"""crosstype: wire-compatible type declarations for several target languages."""

__version__ = "0.1.0"
