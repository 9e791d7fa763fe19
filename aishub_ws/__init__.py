"""AisHub to Signal K bridge."""

__version__ = "0.1.0"
