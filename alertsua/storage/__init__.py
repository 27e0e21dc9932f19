"""SQLite persistence for region metadata and status history."""
