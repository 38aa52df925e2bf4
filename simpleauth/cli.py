"""
simpleauth command line.

Usage:
  simpleauth sign    [--key K] [--alg SHA256|SHA512] [--data k=v ...]
  simpleauth verify  TOKEN [--key K] [--expire N]
  simpleauth genkey  [--length N]
  simpleauth bench   [--key K] [--iterations N]
  simpleauth request URL [--key K]

The key defaults to $SIMPLEAUTH_PRE_SHARED_KEY.

Exit codes: 0=OK, 1=invalid token / request failed, 2=usage/config error.
"""

import argparse
import json
import logging
import sys
import time
from typing import Dict, List, Optional

import httpx
import structlog

from .algorithms import HashAlg
from .client import fetch
from .config import MAX_EXPIRE, AuthConfig
from .exceptions import ConfigurationError, SigningError
from .keys import DEFAULT_KEY_LENGTH, generate_random_key
from .signer import SimpleAuth

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def _parse_pairs(pairs: List[str]) -> Dict[str, str]:
    payload: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        payload[key] = value
    return payload


def _build_auth(args: argparse.Namespace) -> SimpleAuth:
    config = AuthConfig.from_env()
    changes = {}
    if getattr(args, "key", None) is not None:
        changes["pre_shared_key"] = args.key
    if getattr(args, "expire", None) is not None:
        changes["expire"] = args.expire
    if getattr(args, "alg", None) is not None:
        changes["algorithm"] = args.alg
    return SimpleAuth(config.replace(**changes))


def cmd_sign(args: argparse.Namespace) -> int:
    auth = _build_auth(args)
    print(auth.sign(_parse_pairs(args.data)))
    return EXIT_OK


def cmd_verify(args: argparse.Namespace) -> int:
    auth = _build_auth(args)
    payload = auth.decode(args.token)
    if payload is None:
        print("invalid")
        return EXIT_INVALID
    print(json.dumps(payload, ensure_ascii=False))
    return EXIT_OK


def cmd_genkey(args: argparse.Namespace) -> int:
    print(generate_random_key(args.length))
    return EXIT_OK


def cmd_bench(args: argparse.Namespace) -> int:
    auth = _build_auth(args).set_expire(MAX_EXPIRE)
    total = args.iterations
    token = ""

    started = time.perf_counter()
    for _ in range(total):
        token = auth.sign()
    elapsed = max(time.perf_counter() - started, 1e-9)
    print(f"bench sign/s={int(total / elapsed)}")

    started = time.perf_counter()
    for _ in range(total):
        auth.verify(token)
    elapsed = max(time.perf_counter() - started, 1e-9)
    print(f"bench verify/s={int(total / elapsed)}")
    return EXIT_OK


def _show_response(label: str, response: httpx.Response) -> None:
    print(f"--- {label}")
    print(f"head> {response.status_code} {response.reason_phrase}")
    for line in response.text.splitlines():
        print(f"body> {line}")


def cmd_request(args: argparse.Namespace) -> int:
    auth = _build_auth(args)
    try:
        anonymous = fetch(args.url, timeout=args.timeout)
        _show_response("without token", anonymous)
        signed = fetch(args.url, auth=auth, timeout=args.timeout)
        _show_response("with token", signed)
    except httpx.HTTPError as e:
        print(f"Unable to connect: {e}", file=sys.stderr)
        return EXIT_INVALID
    return EXIT_OK if signed.is_success else EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simpleauth",
        description="Issue and verify HMAC time-bounded tokens.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    algs = [alg.value for alg in HashAlg]

    p = sub.add_parser("sign", help="print a signed token")
    p.add_argument("--key", help="pre-shared key")
    p.add_argument("--alg", choices=algs)
    p.add_argument("--data", nargs="*", default=[], metavar="KEY=VALUE")
    p.set_defaults(func=cmd_sign)

    p = sub.add_parser("verify", help="verify a token and print its payload")
    p.add_argument("token")
    p.add_argument("--key", help="pre-shared key")
    p.add_argument("--expire", type=int, help="expiry window in seconds")
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("genkey", help="print a random pre-shared key")
    p.add_argument("--length", type=int, default=DEFAULT_KEY_LENGTH)
    p.set_defaults(func=cmd_genkey)

    p = sub.add_parser("bench", help="measure sign/verify throughput")
    p.add_argument("--key", default="benchkey")
    p.add_argument("--iterations", type=int, default=100000)
    p.set_defaults(func=cmd_bench)

    p = sub.add_parser("request", help="GET a URL without and with a token")
    p.add_argument("url")
    p.add_argument("--key", help="pre-shared key")
    p.add_argument("--timeout", type=float, default=5.0)
    p.set_defaults(func=cmd_request)

    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        parser.print_usage(sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except (ConfigurationError, SigningError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
