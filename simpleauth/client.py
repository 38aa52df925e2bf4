"""
Authenticated HTTP Client
=========================
httpx integration that signs every outgoing request.

Usage:
    auth = SimpleAuth(AuthConfig(pre_shared_key="secret"))
    with httpx.Client(auth=TorchAuth(auth)) as client:
        client.get("https://service.internal/api")
"""

import logging
from typing import Generator, Mapping, Optional, Union

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .algorithms import HashAlg
from .headers import HTTP_HEADER, build_auth_value
from .signer import SimpleAuth

logger = logging.getLogger(__name__)


class TorchAuth(httpx.Auth):
    """
    httpx auth flow adding a freshly signed token to each request.

    A new token is issued per request, so retries and long-lived
    clients never send an expired one.
    """

    def __init__(
        self,
        auth: SimpleAuth,
        payload: Optional[Mapping[str, str]] = None,
        alg: Union[HashAlg, str, None] = None,
        header_name: str = HTTP_HEADER,
    ):
        self.auth = auth
        self.payload = dict(payload) if payload else None
        self.alg = alg
        self.header_name = header_name

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self.auth.sign(self.payload, alg=self.alg)
        request.headers[self.header_name] = build_auth_value(token)
        yield request


@retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def fetch(
    url: str,
    auth: Optional[SimpleAuth] = None,
    payload: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    client: Optional[httpx.Client] = None,
) -> httpx.Response:
    """
    GET a URL, optionally authenticated.

    Transport errors (connect failures, timeouts) are retried; HTTP
    error statuses are returned to the caller untouched.

    Args:
        url: Target URL
        auth: Signer to authenticate with, or None for an anonymous request
        payload: Optional payload to sign into the token
        timeout: Connect/read timeout in seconds
        client: Existing httpx.Client to reuse

    Returns:
        The httpx.Response
    """
    flow = TorchAuth(auth, payload=payload) if auth is not None else None
    if client is not None:
        return client.get(url, auth=flow, timeout=timeout)
    with httpx.Client(timeout=timeout) as owned:
        return owned.get(url, auth=flow)
