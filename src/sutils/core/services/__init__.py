"""Servicios del Core (orquestación sobre colaboradores inyectados)."""

from sutils.core.services.request_pipeline import ApiClient, create_api_client, prepare_body

__all__ = ["ApiClient", "create_api_client", "prepare_body"]
