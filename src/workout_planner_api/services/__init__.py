"""Program editing, scheduling and library services."""
