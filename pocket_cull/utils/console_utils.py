#!/usr/bin/env python3
"""
Console utilities.
Console encoding setup and the interactive yes/no prompt.
"""

import sys

from ..exceptions import UserAbort

YES_ANSWERS = ('y', 'yes')
NO_ANSWERS = ('n', 'no')
QUIT_ANSWERS = ('q', 'quit')


def setup_console_encoding():
    """Use UTF-8 on Windows consoles so the status marks print."""
    if sys.platform.startswith('win'):
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.reconfigure(encoding='utf-8')
            except (AttributeError, OSError):
                # Not a TextIOWrapper (e.g. redirected to a custom object)
                continue


def init_console():
    """Initialize console with proper encoding."""
    setup_console_encoding()


class ConsolePrompter:
    """
    Asks yes/no questions on a terminal.

    "y"/"yes" and "n"/"no" in any case are accepted, "q"/"quit" raises
    UserAbort. Anything else asks again.
    """

    def __init__(self, input_func=input, out=None):
        self.input_func = input_func
        self.out = out

    def confirm(self, message):
        while True:
            try:
                answer = self.input_func(f"{message} [y/n]: ")
            except EOFError:
                raise UserAbort("Input closed. Bye!")

            answer = answer.strip().lower()
            if answer in YES_ANSWERS:
                return True
            if answer in NO_ANSWERS:
                return False
            if answer in QUIT_ANSWERS:
                raise UserAbort("Quitting. Bye!")
            print("Please answer y, n or q.", file=self.out or sys.stdout)
