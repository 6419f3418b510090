# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""YouSign v3 REST client and its hook-instrumented variant."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator, Iterable
from datetime import timedelta
from typing import Any

import httpx
import structlog

from pysign.client.files import build_document_form
from pysign.client.retry import RetryPolicy
from pysign.client.settings import ClientSettings
from pysign.client.types import (
    AddedFile,
    AddFileOptions,
    AddSignerOptions,
    AddSignerResponse,
    CertificateData,
    CreateSignatureRequestOptions,
    SignatureRequest,
    SignatureRequestActivateResponse,
    SignatureRequestQuery,
    SignatureRequestQueryResult,
)
from pysign.core.config import Config
from pysign.hooks.decorators import no_hook
from pysign.hooks.instrument import instrument
from pysign.hooks.naming import ERROR_EVENT
from pysign.hooks.registry import HookRegistry
from pysign.kernel.exceptions import MissingApiKeyException, ValidationException

logger = structlog.get_logger("pysign.client")


class Client:
    """Plain async client for the YouSign v3 REST API.

    Every public ``async def`` method maps to one API call and returns the
    decoded JSON body (or raw ``bytes`` for downloads). HTTP failures are
    raised as ``httpx.HTTPStatusError`` / ``httpx.RequestError``.

    Args:
        api_key: YouSign API key. Falls back to ``settings.api_key``.
        settings: Connection settings; sandbox defaults when omitted.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        api_key = api_key or self.settings.api_key
        if not api_key:
            raise MissingApiKeyException(
                "YouSign API key is required and not provided",
                code="CLIENT_MISSING_API_KEY",
            )

        self._http = httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )
        self._retry = RetryPolicy(
            max_attempts=self.settings.retry.max_attempts,
            base_delay=timedelta(seconds=self.settings.retry.base_delay),
        )

    @classmethod
    def from_config(cls, config: Config, *, transport: httpx.AsyncBaseTransport | None = None) -> Client:
        """Create a client from the ``pysign.client`` configuration section."""
        settings = ClientSettings.from_config(config)
        return cls(settings.api_key, settings=settings, transport=transport)

    # ------------------------------------------------------------------
    # Signature requests
    # ------------------------------------------------------------------

    async def create_signature_request(self, options: CreateSignatureRequestOptions) -> SignatureRequest:
        """Create a draft signature request."""
        response = await self._request("POST", "/signature_requests", json=options)
        return response.json()

    async def add_document(self, signature_request_id: str, options: AddFileOptions) -> AddedFile:
        """Upload a document (signable or attachment) to a signature request."""
        response = await self._request(
            "POST",
            f"/signature_requests/{signature_request_id}/documents",
            files=build_document_form(options),
        )
        return response.json()

    async def add_signer(self, signature_request_id: str, options: AddSignerOptions) -> AddSignerResponse:
        """Add a person who has to sign to a signature request."""
        response = await self._request(
            "POST",
            f"/signature_requests/{signature_request_id}/signers",
            json=options,
        )
        return response.json()

    async def activate_signature_request(self, signature_request_id: str) -> SignatureRequestActivateResponse | str:
        """Activate a signature request so signers can sign.

        Error statuses are not raised here; the API's error body is
        returned to the caller as-is, decoded as JSON when possible and as
        text otherwise (e.g. a gateway HTML page).
        """
        response = await self._request(
            "POST",
            f"/signature_requests/{signature_request_id}/activate",
            raise_for_status=False,
        )
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get_requests(self, query: SignatureRequestQuery | None = None) -> SignatureRequestQueryResult:
        """List signature requests matching *query* (one page)."""
        params = {k: v for k, v in (query or {}).items() if v is not None}
        response = await self._request("GET", "/signature_requests", params=params, retry=True)
        return response.json()

    async def iter_requests(self, query: SignatureRequestQuery | None = None) -> AsyncIterator[SignatureRequest]:
        """Yield every signature request matching *query*, following page cursors."""
        params: dict[str, Any] = dict(query or {})
        while True:
            page = await self.get_requests(params)  # type: ignore[arg-type]
            for signature_request in page.get("data", []):
                yield signature_request
            cursor = (page.get("meta") or {}).get("next_cursor")
            if not cursor:
                return
            params["after"] = cursor

    # ------------------------------------------------------------------
    # Documents and audit trails
    # ------------------------------------------------------------------

    async def get_document(self, signature_request_id: str, document_id: str) -> bytes:
        """Download a document of the signature request."""
        response = await self._request(
            "GET",
            f"/signature_requests/{signature_request_id}/documents/{document_id}/download",
            retry=True,
        )
        return response.content

    async def get_certificate_data(self, signature_request_id: str, signer_id: str) -> CertificateData:
        """Fetch the audit trail of one signer as structured data."""
        response = await self._request(
            "GET",
            f"/signature_requests/{signature_request_id}/signers/{signer_id}/audit_trails",
            retry=True,
        )
        return response.json()

    async def get_certificate(self, signature_request_id: str, signer_id: str | bool = True) -> bytes:
        """Download an audit trail certificate as PDF bytes.

        Args:
            signature_request_id: The signature request.
            signer_id: A signer id for that signer's certificate, or a bool
                for the certificate covering every signer.
        """
        if isinstance(signer_id, bool):
            path = f"/signature_requests/{signature_request_id}/audit_trails/download"
        elif isinstance(signer_id, str):
            path = f"/signature_requests/{signature_request_id}/signers/{signer_id}/audit_trails/download"
        else:
            raise ValidationException(
                f"Invalid signer_id type: {type(signer_id).__name__}: {signer_id!r}",
                context={"signer_id": repr(signer_id)},
            )
        response = await self._request("GET", path, retry=True)
        return response.content

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @no_hook
    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        raise_for_status: bool = True,
        retry: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        async def send() -> httpx.Response:
            return await self._http.request(method, path, **kwargs)

        start = time.perf_counter()
        try:
            response = await (self._retry.execute(send) if retry else send())
            if raise_for_status:
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning(
                "yousign_request_failed",
                method=method,
                path=path,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            self._report_error(exc)
            raise

        logger.debug(
            "yousign_request",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    def _report_error(self, error: httpx.HTTPError) -> None:
        """Called with every HTTP failure before it is raised."""


class YouSignClient(Client):
    """YouSign client that emits lifecycle hooks around every API call.

    Each operation ``name`` fires ``onBegin<Name>`` with its arguments and
    ``onAfter<Name>`` with its result; every HTTP failure fires ``onError``.
    ``aclose`` is exempt.

    Example::

        yousign = YouSignClient(os.environ["YOUSIGN_API_KEY"])
        yousign.hooks.register("onAfterCreate_signature_request", audit.record)
        yousign.hooks.register("onError", alerts.notify)

        request = await yousign.create_signature_request({"name": "NDA", "delivery_mode": "email"})
        document = await yousign.add_document(request["id"], {
            "file": open("nda.pdf", "rb"),
            "nature": "signable_document",
            "parse_anchors": True,
        })
        await yousign.add_signer(request["id"], {
            "signature_level": "electronic_signature",
            "info": {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com",
                     "phone_number": None, "locale": "en"},
            "fields": [{"type": "signature", "document_id": document["id"], "page": 1, "x": 0, "y": 0}],
        })
        await yousign.activate_signature_request(request["id"])

    Args:
        exempt: Extra operation names to leave uninstrumented.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        exempt: Iterable[str] = (),
    ) -> None:
        super().__init__(api_key, settings=settings, transport=transport)
        self.hooks = HookRegistry()
        instrument(self, exempt=exempt)

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        exempt: Iterable[str] = (),
    ) -> YouSignClient:
        settings = ClientSettings.from_config(config)
        return cls(settings.api_key, settings=settings, transport=transport, exempt=exempt)

    @no_hook
    async def aclose(self) -> None:
        """Wait for running async hook handlers, then close the HTTP client."""
        await self.hooks.drain()
        await super().aclose()

    def _report_error(self, error: httpx.HTTPError) -> None:
        self.hooks.fire(ERROR_EVENT, error)
