"""Qt user interface for the items editor."""
