"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers de los sondeos HTTP (Open WebUI, API de
  Ollama) del comando doctor.
- Facilita testeo: se puede sustituir por un transport mockeado.
"""

from __future__ import annotations

import httpx

from core.config import StackSettings

USER_AGENT = "rag-stack/0.1 (+https://local)"


def build_async_client(
    settings: StackSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros."""

    settings = settings or StackSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    )


async def probe_endpoint(client: httpx.AsyncClient, url: str) -> tuple[bool, str]:
    """GET best-effort: (ok, detalle). Cualquier error de red cuenta como fallo."""

    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__
    return response.status_code < 500, f"HTTP {response.status_code}"


async def fetch_ollama_tags(client: httpx.AsyncClient, base_url: str) -> list[str]:
    """Nombres de modelos según `GET /api/tags` de la API de Ollama."""

    response = await client.get(f"{base_url.rstrip('/')}/api/tags")
    response.raise_for_status()
    payload = response.json()
    return [str(m.get("name")) for m in payload.get("models", []) if m.get("name")]
