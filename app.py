#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Verbico AI - Text + Voice Translation Application

Entry point for the NiceGUI-based translation application.
"""

# The UI calls its own API on localhost; keep proxies out of that hop
import os
os.environ.setdefault('NO_PROXY', 'localhost,127.0.0.1')
os.environ.setdefault('no_proxy', 'localhost,127.0.0.1')

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def setup_logging():
    """Configure logging to console and file.

    Log file location: ~/.verbico/logs/verbico.log (UTF-8, append mode)

    Returns:
        tuple: (console_handler, file_handler) to keep references alive
    """
    logs_dir = Path.home() / ".verbico" / "logs"
    log_file_path = logs_dir / "verbico.log"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))

    file_handler = None
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            log_file_path,
            mode='a',
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    except OSError as e:
        print(f"[WARNING] Failed to create log file {log_file_path}: {e}", file=sys.stderr)
        file_handler = None

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Replace any handlers from earlier setup_logging() calls or imported libraries
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)

    # Server and per-request HTTP logs stay at WARNING
    for name in ['uvicorn', 'uvicorn.error', 'uvicorn.access',
                 'starlette', 'httpcore', 'httpx',
                 'asyncio', 'concurrent']:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Verbico AI starting (Python %s)", sys.version.split()[0])
    logger.info("Executable: %s", sys.executable)
    logger.debug("sys.argv: %s", sys.argv)

    if file_handler:
        logger.info("Log file: %s", log_file_path)
    else:
        logger.warning("File logging disabled - console only")

    return (console_handler, file_handler)


# Global reference to keep log handlers alive (prevents garbage collection)
_global_log_handlers = None


def main():
    """Main entry point

    Note: The UI import is inside main() so that NiceGUI is only loaded
    when the application actually starts.
    """
    import asyncio

    global _global_log_handlers
    _global_log_handlers = setup_logging()

    logger = logging.getLogger(__name__)

    from verbico.ui.app import run_app

    no_auto_open = os.environ.get("VERBICO_NO_AUTO_OPEN", "")
    show = no_auto_open.strip().lower() not in ("1", "true", "yes")

    try:
        run_app(show=show)
    except KeyboardInterrupt:
        logger.debug("Application shutdown via KeyboardInterrupt")
    except asyncio.CancelledError:
        # uvicorn cancels pending tasks when the server stops
        logger.debug("Application shutdown via CancelledError")
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        raise


if __name__ == '__main__':
    main()
