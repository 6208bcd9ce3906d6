#!/usr/bin/env python3
"""
Maps MCP Server - Entry Point

Serves the map tools over Streamable HTTP. Configuration comes from the
command line, falling back to environment variables (a .env file in the
working directory or project root is loaded first).
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .constants import PROVIDER_CHOICES, EnvVar, ServerConfig, TransportConfig

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
load_dotenv()

logger = logging.getLogger(__name__)

from .async_server import create_server  # noqa: E402


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, value)
        return default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, value)
        return default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maps MCP Server")
    parser.add_argument(
        "--host",
        default=os.environ.get(EnvVar.MCP_SERVER_HOST, ServerConfig.DEFAULT_HOST),
        help=f"Host to bind (default: {ServerConfig.DEFAULT_HOST})",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=_env_int(EnvVar.MCP_SERVER_PORT, ServerConfig.DEFAULT_PORT),
        help=f"Port to listen on (default: {ServerConfig.DEFAULT_PORT})",
    )
    parser.add_argument(
        "-r",
        "--provider",
        choices=PROVIDER_CHOICES,
        type=str.lower,
        default=os.environ.get(EnvVar.MAP_API_PROVIDER, ServerConfig.DEFAULT_PROVIDER).lower(),
        help=f"Map API provider (default: {ServerConfig.DEFAULT_PROVIDER})",
    )
    parser.add_argument(
        "-k",
        "--apikey",
        default=os.environ.get(EnvVar.GOOGLE_MAPS_API_KEY),
        help="Google Maps API key",
    )
    parser.add_argument(
        "-s",
        "--riskscape-key",
        default=os.environ.get(EnvVar.RISKSCAPE_API_KEY),
        help="RiskScape API key",
    )
    parser.add_argument(
        "--tool-timeout",
        type=float,
        default=_env_float(EnvVar.MCP_TOOL_TIMEOUT, TransportConfig.TOOL_TIMEOUT_SECONDS),
        help="Seconds a tool call may run before it is reported as timed out (0 disables)",
    )
    parser.add_argument(
        "--session-idle-timeout",
        type=float,
        default=_env_float(
            EnvVar.MCP_SESSION_IDLE_TIMEOUT, TransportConfig.SESSION_IDLE_TIMEOUT_SECONDS
        ),
        help="Seconds of inactivity after which a session is closed (0 disables)",
    )
    parser.add_argument(
        "--unknown-session",
        choices=TransportConfig.UNKNOWN_SESSION_POLICIES,
        default=os.environ.get(EnvVar.MCP_UNKNOWN_SESSION, TransportConfig.UNKNOWN_SESSION_CREATE),
        help="POST with an unknown session id: start a new session or reject with 400",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get(EnvVar.LOG_LEVEL, "INFO").upper(),
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the MCP server."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        mcp, _ = create_server(
            provider=args.provider,
            google_api_key=args.apikey,
            riskscape_api_key=args.riskscape_key,
            tool_timeout=args.tool_timeout,
            unknown_session_policy=args.unknown_session,
            session_idle_timeout=args.session_idle_timeout,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(
        f"Maps MCP Server starting on {args.host}:{args.port} (provider: {args.provider})",
        file=sys.stderr,
    )
    mcp.run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
