"""CineQueue Main Application."""

import asyncio
import signal
import sys

import uvicorn
from pydantic import ValidationError

from cinequeue import CINEQUEUE_HEADER, log
from cinequeue.config.settings import get_config
from cinequeue.exceptions import ConfigError


def _setup_signal_handlers(server: uvicorn.Server) -> None:
    """Install SIGINT/SIGTERM handlers that ask the server to exit."""
    loop = asyncio.get_running_loop()

    def _on_signal(sig):
        name = signal.Signals(sig).name if sig else "UNKNOWN"
        log.info(f"CineQueue: Received {name} signal, initiating graceful shutdown...")
        server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, lambda s=sig: _on_signal(s))
        except NotImplementedError:
            # Fallback for environments that don't support add_signal_handler
            signal.signal(sig, lambda s, f: _on_signal(s))


def validate_configuration() -> bool:
    """Validate the application configuration and log a masked summary.

    Returns:
        bool: True if configuration is valid, False otherwise
    """
    try:
        config = get_config()
        config.auth.require_secret()
        if config.omdb.api_key is None or not config.omdb.api_key.get_secret_value():
            log.error("CineQueue: omdb.api_key must be configured")
            return False
        log.info(f"CineQueue: {config!s}")
        return True
    except ConfigError as e:
        log.error(f"CineQueue: {e}")
        return False
    except ValidationError as e:
        log.error(f"CineQueue: Configuration validation failed: {e}")
        return False
    except (OSError, PermissionError) as e:
        log.error(f"CineQueue: File system error during configuration: {e}")
        return False


async def run() -> int:
    """Main application entry point.

    Validates the configuration and serves the API until shutdown.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    try:
        log.info("\n" + CINEQUEUE_HEADER)

        if not validate_configuration():
            return 1

        from cinequeue.web.app import create_app

        config = get_config()
        app = create_app()
        uv_config = uvicorn.Config(
            app,
            host=config.web.host,
            port=config.web.port,
            log_config=None,
            loop="asyncio",
            proxy_headers=True,
            forwarded_allow_ips="*",
        )

        server = uvicorn.Server(uv_config)
        _setup_signal_handlers(server)

        log.success(
            "CineQueue: API started at "
            f"\033[92mhttp://{config.web.host}:{config.web.port} "
            "(ctrl+c to stop)\033[0m"
        )
        # Use `_serve()` so uvicorn doesn't install its own signal handlers
        await server._serve()
        log.success("CineQueue: Application shutdown complete")
    except KeyboardInterrupt:
        log.info("CineQueue: Keyboard interrupt received, shutting down...")
    except ValidationError as e:
        log.error(f"CineQueue: Configuration validation error: {e}")
        return 1
    except (OSError, PermissionError) as e:
        log.error(f"CineQueue: File system error: {e}")
        return 1
    except asyncio.CancelledError:
        log.info("CineQueue: Application cancelled")
        return 0
    except Exception as e:
        log.error(f"CineQueue: Unexpected application error: {e}", exc_info=True)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Initializes the application and runs the main event loop.

    Args:
        argv (list[str] | None): Command-line arguments (unused).

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        log.info("CineQueue: Application interrupted")
        return 0
    except Exception as e:
        log.error(f"CineQueue: Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
