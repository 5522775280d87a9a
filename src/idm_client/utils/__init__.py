"""Utility modules shared by the API client."""
