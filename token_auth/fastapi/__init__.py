"""Hosting the authenticators in a FastAPI application."""
