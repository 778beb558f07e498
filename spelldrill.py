#!/usr/bin/env python3
"""Standalone spelldrill: practice in the terminal without running the server."""

import argparse
import logging
import sys

from cli.console import ConsoleUI
from cli.local_client import LocalClient
from cli.speech import ConsoleNarrator, TerminalNotifier
from server.file_storage import FileStorage


def main():
    parser = argparse.ArgumentParser(description='Spelldrill - spelling practice (local mode)')
    parser.add_argument(
        '--state-dir',
        default=None,
        help='Directory for word lists and profile (default: $SPELLDRILL_STATE_DIR or project root)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show log messages'
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    storage = FileStorage(state_dir=args.state_dir)
    ui = ConsoleUI(LocalClient(storage), ConsoleNarrator(storage.load_config()), TerminalNotifier())

    try:
        ui.run()
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
