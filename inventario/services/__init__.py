"""Servicios: cliente del backend, autenticación y estado de la vista."""
