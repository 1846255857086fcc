"""Composition root for catserver.

This module is the ONLY location that imports both core protocol logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Store instantiation and seeding
- Core service initialization
- Entry point selection (server or CLI)
"""

import asyncio
import json
import logging
import sys
from typing import Any

from catserver.adapters.cli.commands import CLICommandHandler
from catserver.adapters.store.memory import InMemoryCategoryStore
from catserver.adapters.transport.tcp_server import TCPProtocolServer
from catserver.config import Settings, load_settings
from catserver.core.dispatcher import Dispatcher
from catserver.core.protocol_service import ProtocolService


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface over the in-process protocol.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "catserver> ")

            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = execute_cli_command(cli_handler, command, args)
                if "message" in result:
                    print(result["message"])
                else:
                    print(json.dumps(result, indent=2, default=str))
            except (ValueError, TypeError) as e:
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


def execute_cli_command(
    cli_handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Args:
        cli_handler: CLICommandHandler instance.
        command: Command name.
        args: Command arguments.

    Returns:
        Command result dictionary.

    Raises:
        ValueError: If the command or a required argument is missing.
    """
    if not isinstance(args, dict):
        raise ValueError("Arguments must be a JSON object")
    output_format = args.get("format", "json")

    def required(key: str) -> Any:
        if key not in args:
            raise ValueError(f"Missing required parameter: {key}")
        return args[key]

    if command == "list":
        return cli_handler.list_categories(output_format=output_format)
    elif command == "show":
        return cli_handler.show_category(int(required("cid")), output_format=output_format)
    elif command == "add":
        return cli_handler.add_category(str(required("name")), output_format=output_format)
    elif command == "rename":
        return cli_handler.rename_category(
            int(required("cid")), str(required("name")), output_format=output_format
        )
    elif command == "remove":
        return cli_handler.remove_category(int(required("cid")), output_format=output_format)
    elif command == "echo":
        return cli_handler.echo(str(required("text")), output_format=output_format)
    elif command == "raw":
        request = {k: v for k, v in args.items() if k != "format"}
        return cli_handler.raw_request(request, output_format=output_format)
    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  list
    List all categories.
    Example: list {"format": "text"}

  show
    Show a single category.
    Required: cid
    Example: show {"cid": 1}

  add
    Create a category.
    Required: name
    Example: add {"name": "Spices"}

  rename
    Rename an existing category.
    Required: cid, name
    Example: rename {"cid": 1, "name": "Drinks"}

  remove
    Delete a category.
    Required: cid
    Example: remove {"cid": 2}

  echo
    Echo text back through the protocol.
    Required: text
    Example: echo {"text": "hello"}

  raw
    Send a request object exactly as written.
    Example: raw {"method": "read", "path": "/api/categories", "date": 1700000000}

  help
    Show this help message.

  exit
    Exit the CLI.

Every command also accepts "format": "json" or "text".
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_protocol(settings: Settings) -> ProtocolService:
    """Wire the store, dispatcher and protocol service."""
    store = InMemoryCategoryStore(seed=settings.seed_categories)
    logger = logging.getLogger(__name__)
    logger.info(f"Category store seeded with {store.count()} categories")
    dispatcher = Dispatcher(store)
    return ProtocolService(dispatcher)


async def bootstrap() -> None:
    """Load configuration, wire components, and start the application.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Build the store and core services
    4. Select and start run mode
    """
    settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading catserver...")

    protocol = build_protocol(settings)

    logger.info(f"Starting in {settings.run_mode} mode...")

    if settings.run_mode == "server":
        server = TCPProtocolServer(
            protocol=protocol,
            host=settings.server_host,
            port=settings.server_port,
            read_timeout=settings.read_timeout_seconds,
            max_payload_bytes=settings.max_payload_bytes,
        )
        await server.start()
        try:
            await server.serve_forever()
        finally:
            await server.stop()

    elif settings.run_mode == "cli":
        await _run_cli_interactive(CLICommandHandler(protocol))

    else:
        logger.error(f"Unknown run mode: {settings.run_mode}")
        sys.exit(1)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
