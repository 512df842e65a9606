# mcp_http_bridge/cli/main.py
"""
mcp-http-bridge command

Minimal, production-oriented CLI:
- Builds the proxy configuration (fails closed before touching stdout)
- Runs one session over stdin/stdout
- Stops the session on SIGINT/SIGTERM within a bounded budget
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import AsyncIterable, Callable, List, Mapping, Optional, Sequence, TextIO, Tuple

from mcp_http_bridge import __version__
from mcp_http_bridge.config import ConfigIssue, ProxyConfig, RawInputs, load_config_file
from mcp_http_bridge.infra.transport import ProxySession

logger = logging.getLogger(__name__)

DEBUG_ENV = "MCP_HTTP_BRIDGE_DEBUG"
LOG_PREFIX = "[mcp-http-bridge]"

# stop() cleanup uses 5s; leave room for cancelling the in-flight request
SHUTDOWN_BUDGET_S = 8.0


# ----------------------------
# Logging
# ----------------------------

def configure_logging(debug: bool, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Send package logs to stderr (stdout carries the protocol).

    Safe to call more than once: the handler installed by a previous call
    is replaced.
    """
    package_logger = logging.getLogger("mcp_http_bridge")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_mcp_http_bridge", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler._mcp_http_bridge = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter(f"{LOG_PREFIX} %(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return package_logger


# ----------------------------
# Argument parsing
# ----------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-http-bridge",
        description=(
            "Bridge newline-delimited JSON-RPC on stdin/stdout to a remote HTTP JSON-RPC endpoint.\n"
            "Header values may reference environment variables as $NAME or ${NAME}."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        help="Remote endpoint (http:// or https://)",
    )
    parser.add_argument(
        "-H", "--header",
        dest="headers",
        action="append",
        default=[],
        metavar='"Name: Value"',
        help="Extra request header; repeatable. Later headers with the same name win.",
    )
    parser.add_argument(
        "--timeout",
        metavar="MS",
        help="Request timeout in milliseconds (default: 60000)",
    )
    parser.add_argument(
        "--config",
        help="YAML file with endpoint, headers, timeout_ms and debug",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help=f"Verbose diagnostics on stderr (also: {DEBUG_ENV}=true)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def resolve_inputs(args: argparse.Namespace, env: Mapping[str, str]) -> Tuple[RawInputs, List[ConfigIssue]]:
    """Merge the optional config file, the environment and the command line."""
    issues: List[ConfigIssue] = []
    base = RawInputs()

    if args.config:
        loaded = load_config_file(args.config)
        issues.extend(loaded.errors)
        base = loaded.inputs

    debug = args.debug
    if debug is None and env.get(DEBUG_ENV, "").lower() == "true":
        debug = True

    inputs = base.merged_with(
        endpoint=args.url,
        headers=args.headers,
        timeout_ms=args.timeout,
        debug=debug,
    )

    if not inputs.endpoint:
        issues.append(ConfigIssue.error(
            "endpoint",
            "No endpoint given",
            hint="Pass --url or set endpoint in the config file",
        ))
    return inputs, issues


def report_issues(issues: Sequence[ConfigIssue], stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stderr
    for issue in issues:
        print(f"{LOG_PREFIX} {issue}", file=out)


# ----------------------------
# Signals
# ----------------------------

def install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    callback: Callable[[str], None],
) -> Callable[[], None]:
    """
    Route SIGINT/SIGTERM to ``callback(signal_name)``.

    Returns a function that restores the previous handlers.
    """
    restorers: List[Callable[[], None]] = []

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, callback, sig.name)
            restorers.append(lambda s=sig: loop.remove_signal_handler(s))
        except (NotImplementedError, RuntimeError, ValueError):
            # Windows event loops have no add_signal_handler
            try:
                previous = signal.signal(
                    sig,
                    lambda signum, frame: loop.call_soon_threadsafe(callback, signal.Signals(signum).name),
                )
            except ValueError:
                continue  # not the main thread
            restorers.append(lambda s=sig, p=previous: signal.signal(s, p))

    def restore() -> None:
        for undo in restorers:
            try:
                undo()
            except (RuntimeError, ValueError):
                pass

    return restore


# ----------------------------
# Main entry
# ----------------------------

async def serve(
    config: ProxyConfig,
    *,
    lines: Optional[AsyncIterable[str]] = None,
    output: Optional[TextIO] = None,
    session: Optional[ProxySession] = None,
) -> int:
    """Run one session until stdin closes or a termination signal arrives."""
    session = session if session is not None else ProxySession(config, output=output)
    loop = asyncio.get_running_loop()
    run_task = asyncio.ensure_future(session.run(lines, output))
    stopping: List["asyncio.Future[None]"] = []

    async def _shutdown() -> None:
        try:
            await asyncio.wait_for(session.stop(), timeout=SHUTDOWN_BUDGET_S)
        except asyncio.TimeoutError:
            logger.warning("Session shutdown exceeded %.0fs, exiting anyway", SHUTDOWN_BUDGET_S)
        finally:
            run_task.cancel()

    def _on_signal(signal_name: str) -> None:
        if stopping:
            return
        logger.debug("Received %s", signal_name)
        stopping.append(asyncio.ensure_future(_shutdown()))

    restore = install_signal_handlers(loop, _on_signal)
    try:
        await run_task
    except asyncio.CancelledError:
        if not stopping:
            raise
    finally:
        restore()
        if stopping:
            await stopping[0]
        else:
            try:
                await asyncio.wait_for(session.stop(), timeout=SHUTDOWN_BUDGET_S)
            except asyncio.TimeoutError:
                logger.warning("Session shutdown exceeded %.0fs", SHUTDOWN_BUDGET_S)
    return 0


def main(argv: Optional[Sequence[str]] = None, env: Optional[Mapping[str, str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    environ = os.environ if env is None else env

    inputs, issues = resolve_inputs(args, environ)
    configure_logging(bool(inputs.debug))

    if issues:
        report_issues(issues)
        return 1

    result = ProxyConfig.from_inputs(
        inputs.endpoint or "",
        inputs.headers,
        inputs.timeout_ms,
        bool(inputs.debug),
        environ,
    )
    report_issues(result.warnings + result.errors)
    if not result.ok or result.config is None:
        return 1

    logger.debug("Configuration: %s", result.config.to_dict())

    try:
        return asyncio.run(serve(result.config))
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"{LOG_PREFIX} Fatal error: {e}", file=sys.stderr)
        return 1


__all__ = ["build_parser", "configure_logging", "install_signal_handlers", "main", "resolve_inputs", "serve"]
