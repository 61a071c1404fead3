"""Core infrastructure shared by all commands: configuration, logging, errors."""
