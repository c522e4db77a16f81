"""Request handlers for the newsletter API."""
