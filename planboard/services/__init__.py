"""Domain services for scheduling, board moves, and remote persistence."""
