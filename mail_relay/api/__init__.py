"""FastAPI application for the mail relay."""
