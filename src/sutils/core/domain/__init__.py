"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos del cliente (configuración, opciones
  por request, request construido) validadas con Pydantic v2/dataclasses.
- El dominio no conoce el transporte concreto: solo describe *qué* se envía.
"""
