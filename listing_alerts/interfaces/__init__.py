"""Inbound adapters exposing the application."""
