"""Blueprints HTML de la app."""
