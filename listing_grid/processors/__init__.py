"""Processing steps applied to the kept grid cells."""
