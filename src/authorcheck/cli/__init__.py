"""authorcheck command line interface."""
