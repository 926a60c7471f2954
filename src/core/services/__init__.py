"""Servicios del Core: setup del stack, mantenimiento, reintentos, checks del host."""
