"""Command-line front end for termwall."""
