"""Application infrastructure: settings, logging and bootstrap."""
