"""Client-side booking session and view-state projection."""
