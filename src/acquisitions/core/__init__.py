"""Core configuration and logging for the Acquisitions API."""
