"""AWS Signature Version 4 request signing.

Purpose
-------
Produce the headers that authenticate one HTTP request to an AWS service:
``X-Amz-Date``, ``Host``, ``X-Amz-Content-Sha256``, the optional
``X-Amz-Security-Token`` and ``Authorization``. Signing is a pure function
of the credentials, the request and the clock, so it is deterministic for a
fixed ``now``.

Algorithm
---------
1. Canonical request: method, URI-encoded path, sorted query, the signed
   headers (lower-cased, trimmed, sorted), the signed-header list and the
   hex SHA-256 of the body.
2. String to sign: algorithm, timestamp, credential scope
   (``<date>/<region>/<service>/aws4_request``) and the hex SHA-256 of the
   canonical request.
3. Signing key: HMAC chain ``AWS4<secret>`` -> date -> region -> service ->
   ``aws4_request``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote, urlsplit

from ..base.errors import MissingCredentialsError
from ..base.log_support import mask_secret
from ..base.logging import get_logger, log_event
from ..config.defaults import BEDROCK_SERVICE_NAME
from ..config.env import AwsCredentials

ALGORITHM = "AWS4-HMAC-SHA256"
REQUEST_TYPE = "aws4_request"
KEY_PREFIX = "AWS4"
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_STAMP_FORMAT = "%Y%m%d"

_logger = get_logger("gateway_providers.bedrock.signing")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    k_date = hmac_sha256((KEY_PREFIX + secret_key).encode("utf-8"), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, REQUEST_TYPE)


def canonical_uri(path: str) -> str:
    """Encode every path segment again, as the service expects for non-S3 APIs."""
    return quote(path or "/", safe="/~")


def canonical_query(query: str) -> str:
    pairs = sorted(parse_qsl(query, keep_blank_values=True))
    return "&".join(f"{quote(k, safe='-_.~')}={quote(v, safe='-_.~')}" for k, v in pairs)


def canonical_headers(headers: Mapping[str, str]) -> Tuple[str, str]:
    """Return ``(canonical header block, signed header list)``."""
    normalized = {k.lower().strip(): " ".join(str(v).split()) for k, v in headers.items()}
    names = sorted(normalized)
    block = "".join(f"{name}:{normalized[name]}\n" for name in names)
    return block, ";".join(names)


def canonical_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    payload_hash: str,
) -> Tuple[str, str]:
    """Return ``(canonical request, signed header list)``."""
    parts = urlsplit(url)
    block, signed = canonical_headers(headers)
    text = "\n".join(
        [
            method.upper(),
            canonical_uri(parts.path),
            canonical_query(parts.query),
            block,
            signed,
            payload_hash,
        ]
    )
    return text, signed


def credential_scope(date_stamp: str, region: str, service: str) -> str:
    return f"{date_stamp}/{region}/{service}/{REQUEST_TYPE}"


def string_to_sign(amz_date: str, scope: str, canonical: str) -> str:
    return "\n".join([ALGORITHM, amz_date, scope, sha256_hex(canonical.encode("utf-8"))])


class SigV4Signer:
    """Signs requests for one service with fixed credentials.

    The signer holds no mutable state; one instance may be shared across
    threads.
    """

    def __init__(
        self,
        credentials: AwsCredentials,
        service: str = BEDROCK_SERVICE_NAME,
        provider: str = "bedrock",
    ) -> None:
        self.credentials = credentials
        self.service = service
        self.provider = provider

    def sign(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        now: Optional[datetime] = None,
    ) -> Dict[str, str]:
        """Return ``headers`` plus the authentication headers for this request.

        Only ``Content-Type``, ``Host`` and the ``X-Amz-*`` headers are
        signed; other caller headers are passed through unsigned.

        Raises:
            MissingCredentialsError: access key or secret key is empty.
        """
        creds = self.credentials
        if not creds.complete:
            raise MissingCredentialsError(
                "AWS access key id and secret access key are required for signing",
                provider=self.provider,
            )
        moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        amz_date = moment.strftime(AMZ_DATE_FORMAT)
        date_stamp = moment.strftime(DATE_STAMP_FORMAT)
        payload_hash = sha256_hex(body or b"")

        out: Dict[str, str] = dict(headers or {})
        out["Host"] = urlsplit(url).netloc
        out["X-Amz-Date"] = amz_date
        out["X-Amz-Content-Sha256"] = payload_hash
        if creds.session_token:
            out["X-Amz-Security-Token"] = creds.session_token

        to_sign = {
            k: v for k, v in out.items() if k.lower() in ("content-type", "host") or k.lower().startswith("x-amz-")
        }
        canonical, signed = canonical_request(method, url, to_sign, payload_hash)
        scope = credential_scope(date_stamp, creds.region, self.service)
        key = derive_signing_key(creds.secret_access_key, date_stamp, creds.region, self.service)
        signature = hmac.new(key, string_to_sign(amz_date, scope, canonical).encode("utf-8"), hashlib.sha256).hexdigest()

        out["Authorization"] = (
            f"{ALGORITHM} Credential={creds.access_key_id}/{scope}, "
            f"SignedHeaders={signed}, Signature={signature}"
        )
        log_event(
            _logger,
            "request.sign",
            level=logging.DEBUG,
            provider=self.provider,
            region=creds.region,
            service=self.service,
            access_key=mask_secret(creds.access_key_id),
            signed_headers=signed,
        )
        return out


__all__ = [
    "ALGORITHM",
    "SigV4Signer",
    "sha256_hex",
    "hmac_sha256",
    "derive_signing_key",
    "canonical_uri",
    "canonical_query",
    "canonical_headers",
    "canonical_request",
    "credential_scope",
    "string_to_sign",
]
