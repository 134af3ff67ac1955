"""Shared plumbing for resource services."""

from urllib.parse import quote

from blaaiz.client import HttpClient

API_PREFIX = "/api/external"


class BaseService:
    """Thin request wrapper around one API resource."""

    def __init__(self, client: HttpClient):
        self.client = client


def resource_path(*segments: object) -> str:
    """Join path segments under the external API prefix, escaping ids."""
    return "/".join([API_PREFIX, *(quote(str(s), safe="") for s in segments)])
