"""Transporte HTTP (httpx) com retry/backoff para a API outbound."""

from app.infra.http.client import HttpClient, HttpClientConfig, HttpError

__all__ = ["HttpClient", "HttpClientConfig", "HttpError"]
