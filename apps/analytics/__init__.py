"""Back-office statistics."""
