"""SingleTask - one actionable task at a time from a remote task list."""
