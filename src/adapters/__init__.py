"""Adaptadores hacia sistemas externos: subprocess, Docker, Ollama, HTTP."""
