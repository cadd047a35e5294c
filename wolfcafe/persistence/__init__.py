"""SQLite persistence for menu items."""
