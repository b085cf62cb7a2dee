"""Núcleo del cliente: configuración, dominio, errores y el pipeline de requests."""
