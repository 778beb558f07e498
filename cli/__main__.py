"""Entry point for spelldrill CLI client."""

import argparse
import logging
import sys

from cli.api_client import SpelldrillAPIClient
from cli.console import ConsoleUI
from cli.speech import ConsoleNarrator, TerminalNotifier


def main():
    parser = argparse.ArgumentParser(description='Spelldrill - spelling practice')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show log messages'
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    client = SpelldrillAPIClient(base_url=args.server)
    ui = ConsoleUI(client, ConsoleNarrator(), TerminalNotifier())

    try:
        ui.run()
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
