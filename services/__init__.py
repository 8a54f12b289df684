"""Domain services operating on an explicit database session."""
