"""Kost Manager notification service."""
