"""Tableau REST client: transport, pagination and project operations."""
