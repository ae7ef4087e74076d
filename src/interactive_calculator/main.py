"""
Command-line runner for the calculator session.

This script:
- Reads keystroke lines from a file, or from standard input when no file is given
- Replays every line against a single calculator session
- Prints the display expression and the live preview after each line

Line syntax
-----------
Words are separated by whitespace. A word is either a command name
(clear, delete, percent, sign, equals), a key name (Enter, Backspace, Delete),
``history`` / ``clear-history``, or a run of single-character keys such as ``12+3*4=``.

Example
-------
input:  12+3*4 equals
output: 24 | 24
"""

import argparse
from pathlib import Path
import sys
from typing import Iterable, List, Optional, TextIO

from pydantic import BaseModel, Field, FilePath, ValidationError

from interactive_calculator.common.logger import logger
from interactive_calculator.common.models import Command
from interactive_calculator.session.calculator import CalculatorSession, format_expression
from interactive_calculator.session.history import DEFAULT_HISTORY_LIMIT, HistoryRecorder


COMMAND_NAMES = frozenset(command.value for command in Command)
NAMED_KEYS = frozenset({"Enter", "Backspace", "Delete"})


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    keys_file : Optional[FilePath]
        File with keystroke lines, standard input when omitted.
    history_limit : int
        Maximum number of history entries kept by the session.
    """

    keys_file: Optional[FilePath] = None
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, sys.argv when None

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        description="Replay calculator keystrokes and print the display after each line"
    )

    parser.add_argument(
        "keys_file",
        nargs="?",
        help="File containing keystroke lines (defaults to standard input)",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=DEFAULT_HISTORY_LIMIT,
        help="Maximum number of calculations kept in history",
    )

    args = parser.parse_args(argv)

    try:
        return CliArgs(keys_file=args.keys_file, history_limit=args.history_limit)
    except ValidationError as exc:
        parser.error(str(exc))


def render(session: CalculatorSession) -> str:
    """Return the display line of a session, e.g. "2 + 3 | 5"."""
    return f"{session.get_display_expression()} | {session.get_preview_result()}"


def render_history(session: CalculatorSession) -> List[str]:
    """Return one line per history entry, most recent first."""
    if not session.get_history():
        return ["No calculations yet"]
    return [f"{format_expression(entry.expression)} = {entry.result}" for entry in session.get_history()]


def replay_line(session: CalculatorSession, line: str) -> List[str]:
    """
    Apply one line of keystrokes to the session.

    :param CalculatorSession session: Session to drive
    :param str line: Whitespace-separated words

    :return: Output lines: any requested history listing, then the display line
    :rtype: List[str]
    """
    output: List[str] = []

    for word in line.split():
        if word in COMMAND_NAMES:
            session.on_command(word)
        elif word in NAMED_KEYS:
            session.on_key(word)
        elif word == "history":
            output.extend(render_history(session))
        elif word == "clear-history":
            session.clear_history()
        else:
            for key in word:
                if not session.on_key(key):
                    logger.warning(f"⌨️❌ Unknown key {key!r} in {word!r}")

    output.append(render(session))
    return output


def run(lines: Iterable[str], session: CalculatorSession, out: TextIO) -> None:
    """
    Replay every non-empty line and write the resulting display lines.

    :param lines: Keystroke lines
    :param CalculatorSession session: Session to drive
    :param TextIO out: Destination stream
    """
    for line in lines:
        if not line.strip():
            continue
        for rendered in replay_line(session, line):
            out.write(f"{rendered}\n")
        out.flush()


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point of the ``interactive-calculator`` command.
    """
    cli_args = parse_args(argv)
    session = CalculatorSession(history=HistoryRecorder(limit=cli_args.history_limit))

    if cli_args.keys_file is None:
        logger.debug("📥 Reading keystrokes from standard input")
        run(sys.stdin, session, sys.stdout)
        return

    keys_path: Path = Path(cli_args.keys_file)
    logger.debug(f"📥 Reading keystrokes from {keys_path}")
    with keys_path.open("r", encoding="utf-8") as f_in:
        run(f_in, session, sys.stdout)


if __name__ == "__main__":
    main()
