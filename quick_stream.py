
#                 ____        _      __      _____ __
#                / __ \__  __(_)____/ /__   / ___// /_________  ____ _____ ___
#               / / / / / / / / ___/ //_/   \__ \/ __/ ___/ _ \/ __ `/ __ `__ \
#              / /_/ / /_/ / / /__/ ,<     ___/ / /_/ /  /  __/ /_/ / / / / / /
#              \___\_\__,_/_/\___/_/|_|   /____/\__/_/   \___/\__,_/_/ /_/ /_/
#
import argparse
import os
import sys
import time
from pathlib import Path

# Check for a POSIX terminal
if os.name != 'posix':
    print("Quick Stream needs a POSIX terminal (Linux or macOS).")
    sys.exit(1)

# Import modules
try:
    from loguru import logger
    from quickstream.config import *
    from quickstream.logging_config import setup_logger
    from quickstream.store import ConfigStore
    from quickstream.processes import ProcessSupervisor
    from quickstream.state import Session
    from quickstream.ui import render
    from quickstream.input import KeyboardInput, handle_input
except ImportError as e:
    print(f"Error loading modules: {e}")
    print("Install the package with: pip install -e .")
    sys.exit(1)


def parse_args(argv=None, settings=None):
    """Command-line flags layered over the QSTREAM_* environment."""
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(
        prog="quick-stream",
        description="Pick a saved URL and encoder preset, then stream in the background.",
    )
    parser.add_argument("--config", type=str, default=None,
                        help=f"Config file (default: {settings.config_path})")
    parser.add_argument("--encoder", type=str, default=None,
                        help=f"Encoder binary (default: {settings.encoder})")
    parser.add_argument("--attach", action="store_true",
                        help="Keep the encoder in this process group and kill it on any exit")
    parser.add_argument("--log-level", type=str.upper, default=None, choices=LOG_LEVELS,
                        help=f"Log level (default: {settings.log_level})")
    args = parser.parse_args(argv)

    if args.config:
        settings.config_path = Path(args.config).expanduser()
    if args.encoder:
        settings.encoder = args.encoder
    if args.attach:
        settings.detach = False
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def build_session(settings):
    store = ConfigStore(settings.config_path)
    supervisor = ProcessSupervisor(
        encoder=settings.encoder,
        detach=settings.detach,
        reap_timeout=settings.reap_timeout,
    )
    return Session.create(store, supervisor)


def run(session):
    """Main application loop."""
    sys.stdout.write(CLEAR_SCREEN + HIDE_CURSOR)
    sys.stdout.flush()

    with KeyboardInput() as keyboard:
        try:
            while session.running:
                render(session)
                handle_input(session, keyboard)
                time.sleep(POLL_INTERVAL)
        except KeyboardInterrupt:
            # Ctrl+C arrives as SIGINT in cbreak mode and quits from any mode
            session.quit()
        finally:
            sys.stdout.write(SHOW_CURSOR + C_RESET + CLEAR_SCREEN + CURSOR_HOME)
            sys.stdout.flush()


def main(argv=None):
    settings = parse_args(argv)
    try:
        setup_logger(settings.log_level)
    except ValueError as e:
        # An unknown level from QSTREAM_LOG_LEVEL
        sys.stderr.write(f"Error: {e}\n")
        return 1
    logger.info("Session starting", operation="main", status="started",
                config=str(settings.config_path), encoder=settings.encoder, detach=settings.detach)

    session = build_session(settings)
    try:
        run(session)
    except Exception as e:
        logger.exception("UI loop failed", operation="main", status="crashed")
        sys.stderr.write(f"Error: {e}\n")
        return 1
    finally:
        # Detached encoders outlive a crash on purpose; attached ones never do
        if not settings.detach:
            session.supervisor.stop()

    logger.info("Session ended", operation="main", status="success")
    return 0


if __name__ == "__main__":
    sys.exit(main())
