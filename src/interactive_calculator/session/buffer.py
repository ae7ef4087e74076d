"""Input normalization and commands for the expression buffer."""
import re
import string
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from interactive_calculator.common.logger import logger
from interactive_calculator.common.models import Command, HistoryEntry
from interactive_calculator.common.parser import (
    ERROR_RESULT,
    OPERATORS,
    ExpressionParser,
    format_plain,
    to_result_string,
)
from interactive_calculator.session.history import HistoryRecorder


# Unsigned number at the very end of the buffer ("12", "0.5", ".5")
TRAILING_NUMBER = re.compile(r"\d*\.?\d+$")

# Splits the buffer into numeric segments
OPERATOR_SPLIT = re.compile(r"[+\-*/]")


class CommandOutcome(BaseModel):
    """Buffer and history after a command, and whether a calculation was committed."""

    model_config = ConfigDict(frozen=True)

    buffer: str = Field(..., description="Expression buffer after the command")
    history: HistoryRecorder = Field(..., description="History after the command")
    committed: bool = Field(default=False, description="True only for a successful equals")


def ends_with_operator(buffer: str) -> bool:
    """Tell whether the last character of the buffer is an operator."""
    return bool(buffer) and buffer[-1] in OPERATORS


def _trailing_segment_start(buffer: str) -> Optional[int]:
    """
    Find where the trailing numeric segment starts, unary sign included.

    A "-" in front of the digits is the segment's own sign only when it opens the buffer
    or directly follows another operator; otherwise it is a binary minus.

    :param str buffer: Expression buffer

    :return: Index of the first character of the segment, None when the buffer does not end in a number
    :rtype: Optional[int]
    """
    match = TRAILING_NUMBER.search(buffer)
    if match is None:
        return None

    start: int = match.start()
    if start > 0 and buffer[start - 1] == "-" and (start == 1 or buffer[start - 2] in OPERATORS):
        return start - 1
    return start


class ExpressionBuffer:
    """
    Pure state transitions of the calculator expression buffer.

    Rules:
        - Digits are appended as typed
        - A numeric segment holds at most one decimal point; "." on an empty segment becomes "0."
        - A new operator replaces a trailing one; only "-" may open an empty buffer
        - Commands never raise on any buffer content; "equals" turns errors into an empty buffer

    Both entry points take the current state and return the new one, nothing is kept between calls.
    """

    @staticmethod
    def apply_input(buffer: str, char: str) -> str:
        """
        Apply one typed character to the buffer.

        :param str buffer: Current expression buffer
        :param str char: A digit, ".", or one of "+ - * /"

        :return: New expression buffer
        :rtype: str
        """
        if len(char) == 1 and char in string.digits:
            return buffer + char

        if char == ".":
            current: str = OPERATOR_SPLIT.split(buffer)[-1]
            if "." in current:
                return buffer
            return buffer + ("." if current else "0.")

        if char in OPERATORS:
            if not buffer:
                # Only a leading unary minus may start an expression
                return "-" if char == "-" else buffer
            if ends_with_operator(buffer):
                return buffer[:-1] + char
            return buffer + char

        logger.debug(f"⌨️ Ignored input {char!r}")
        return buffer

    @staticmethod
    def _percent(buffer: str) -> str:
        """Replace the trailing number with its value divided by 100."""
        if not buffer or ends_with_operator(buffer):
            return buffer

        start = _trailing_segment_start(buffer)
        if start is None:
            return buffer

        value: float = float(buffer[start:]) / 100
        return buffer[:start] + format_plain(value)

    @staticmethod
    def _toggle_sign(buffer: str) -> str:
        """Toggle the sign of the trailing number, or of the whole buffer when there is none."""
        start = _trailing_segment_start(buffer)
        if start is None:
            # No trailing number: toggle the sign of the whole buffer
            return buffer[1:] if buffer.startswith("-") else "-" + buffer

        segment: str = buffer[start:]
        toggled: str = segment[1:] if segment.startswith("-") else "-" + segment
        return buffer[:start] + toggled

    @staticmethod
    def _equals(buffer: str, history: HistoryRecorder) -> CommandOutcome:
        """Evaluate the buffer and record it in history unless the result is an error."""
        if not buffer or ends_with_operator(buffer):
            return CommandOutcome(buffer=buffer, history=history)

        answer: str = to_result_string(ExpressionParser.evaluate(buffer))
        if answer == ERROR_RESULT:
            logger.warning(f"🧮❌ Could not evaluate {buffer!r}, buffer reset")
            return CommandOutcome(buffer="", history=history)

        logger.info(f"🧮✅ {buffer} = {answer}")
        return CommandOutcome(
            buffer=answer,
            history=history.record(HistoryEntry(expression=buffer, result=answer)),
            committed=True,
        )

    @staticmethod
    def apply_command(
        buffer: str, history: HistoryRecorder, command: Union[Command, str]
    ) -> CommandOutcome:
        """
        Apply a named command to the buffer and history.

        :param str buffer: Current expression buffer
        :param HistoryRecorder history: Current history
        :param command: One of clear, delete, percent, sign, equals

        :return: New buffer, new history and the commit flag
        :rtype: CommandOutcome
        :raises ValueError: If the command name is unknown
        """
        command = Command(command)

        if command is Command.CLEAR:
            return CommandOutcome(buffer="", history=history)
        if command is Command.DELETE:
            return CommandOutcome(buffer=buffer[:-1], history=history)
        if command is Command.PERCENT:
            return CommandOutcome(buffer=ExpressionBuffer._percent(buffer), history=history)
        if command is Command.SIGN:
            return CommandOutcome(buffer=ExpressionBuffer._toggle_sign(buffer), history=history)
        return ExpressionBuffer._equals(buffer, history)
