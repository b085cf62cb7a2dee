"""Adaptadores de I/O: transporte httpx y logger stdlib/Rich."""
