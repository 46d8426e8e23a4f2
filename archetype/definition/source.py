"""External API source helper."""

from __future__ import annotations

from typing import Mapping

from archetype.config import EXTERNAL_AUTH_HEADERS
from archetype.models.entity import Endpoints, ExternalAuth, ExternalSource


def make_external_auth(auth_type: str, header: str | None = None) -> ExternalAuth:
    """Build auth config, defaulting the header from the auth type."""
    return ExternalAuth(
        type=auth_type,
        header=header or EXTERNAL_AUTH_HEADERS.get(auth_type, "Authorization"),
    )


def external(
    base_url: str,
    *,
    path_prefix: str = "",
    resource_name: str | None = None,
    override: Mapping[str, str] | None = None,
    auth: Mapping[str, str] | None = None,
) -> ExternalSource:
    """Create an external API source for an entity or a whole manifest.

    Endpoints left out of *override* are derived per entity by the compiler
    from the pluralized entity name::

        external("env:API_URL")                          # GET /products, ...
        external("env:API_URL", path_prefix="/v1")       # GET /v1/products, ...
        external("env:LEGACY", override={"list": "GET /catalog/search"})
    """
    ext_auth = None
    if auth:
        ext_auth = make_external_auth(auth["type"], auth.get("header"))
    return ExternalSource(
        base_url=base_url,
        path_prefix=path_prefix,
        resource_name=resource_name,
        endpoints=Endpoints(**dict(override or {})),
        auth=ext_auth,
    )
