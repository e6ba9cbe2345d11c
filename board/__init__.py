"""Daily task board: time grid, overlap rule, task lifecycle, and statistics."""
