"""httpx authentication hook that SigV4-signs outgoing requests.

Callers own the transport. Attach :class:`SigV4Auth` to an ``httpx.Client``
(or pass it per request) and the body produced by the Bedrock adapter is
signed just before it is sent::

    auth = SigV4Auth(resolve_aws_credentials())
    httpx.post(adapter.endpoint(), content=body, headers=adapter.headers(), auth=auth)
"""

from __future__ import annotations

from typing import Generator

import httpx

from ..config.defaults import BEDROCK_SERVICE_NAME
from ..config.env import AwsCredentials
from .signing import SigV4Signer


class SigV4Auth(httpx.Auth):
    requires_request_body = True

    def __init__(self, credentials: AwsCredentials, service: str = BEDROCK_SERVICE_NAME) -> None:
        self._signer = SigV4Signer(credentials, service=service)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        signed = self._signer.sign(
            request.method,
            str(request.url),
            {k: v for k, v in request.headers.items() if k.lower() == "content-type"},
            request.content,
        )
        for name, value in signed.items():
            request.headers[name] = value
        yield request


__all__ = ["SigV4Auth"]
