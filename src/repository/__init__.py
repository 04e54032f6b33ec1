"""Clients for release-hosting repository APIs."""
