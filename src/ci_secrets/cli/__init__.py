"""CI secrets command line interface."""
