"""Domain services used by the farm views."""
