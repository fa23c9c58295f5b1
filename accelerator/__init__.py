"""Anderson acceleration core and fixed-point drivers."""
