"""Wire schemas of the link store API."""
