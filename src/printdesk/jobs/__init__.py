"""Print job lifecycle."""
