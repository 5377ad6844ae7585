"""smartdiff command line interface."""
