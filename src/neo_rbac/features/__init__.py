"""Feature modules of the authorization core."""
