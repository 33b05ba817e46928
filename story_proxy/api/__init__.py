"""HTTP layer for the bedtime story proxy."""
