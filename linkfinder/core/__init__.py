"""Core configuration, exceptions and validators."""
