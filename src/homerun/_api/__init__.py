"""Endpoint modules for the Google Maps Platform APIs used by homerun."""
