"""Core configuration, constants, exceptions and request context."""
