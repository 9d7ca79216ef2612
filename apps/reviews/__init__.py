"""Guest feedback on rooms."""
