"""BookMe booking core: booking lifecycle service for a peer-to-peer marketplace."""

__version__ = "0.1.0"
