"""Controllers translating user input into grid operations."""
