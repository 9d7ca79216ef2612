"""Django apps of the Innkeeper project, one per bounded context."""
