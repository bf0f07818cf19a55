# Tile constants centralized for modular imports
WALL = "W"
FLOOR = "F"
HALLWAY = "H"
EXIT = "E"  # single level exit, always carved over a room floor tile

WALKABLE = frozenset({FLOOR, HALLWAY, EXIT})

__all__ = ["WALL", "FLOOR", "HALLWAY", "EXIT", "WALKABLE"]
