"""HTTP routes for the workout planner API."""
