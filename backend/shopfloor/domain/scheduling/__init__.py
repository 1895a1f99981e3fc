"""Production operation scheduling domain."""
