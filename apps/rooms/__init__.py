"""Room catalog: room types, rooms and their photos."""
