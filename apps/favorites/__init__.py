"""Rooms bookmarked by guests."""
