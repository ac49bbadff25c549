"""
Configuration loading and validation for merge settings.

Provides a strongly typed settings object for paths, delimiter and encoding,
loaded from environment variables with upfront validation.
"""
