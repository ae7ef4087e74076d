"""Calculator session exposed to the user interface layer."""
import re
from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from interactive_calculator.common.logger import logger
from interactive_calculator.common.models import Command, HistoryEntry
from interactive_calculator.common.parser import ExpressionParser, to_result_string
from interactive_calculator.session.buffer import ExpressionBuffer, ends_with_operator
from interactive_calculator.session.history import HistoryRecorder


# Display glyphs, applied in this order
GLYPHS: Tuple[Tuple[str, str], ...] = (
    ("*", " × "),
    ("/", " ÷ "),
    ("-", " − "),
    ("+", " + "),
)

PENDING_RESULT: str = "…"

# Physical key names mapped to commands
KEY_COMMANDS: Dict[str, Command] = {
    "Enter": Command.EQUALS,
    "=": Command.EQUALS,
    "Backspace": Command.DELETE,
    "Delete": Command.CLEAR,
    "c": Command.CLEAR,
    "C": Command.CLEAR,
}

INPUT_KEYS = frozenset("0123456789.+-*/")


def format_expression(value: str) -> str:
    """
    Render an expression buffer with spaced operator glyphs, e.g. "2*-3" as "2 × − 3".

    :param str value: Expression buffer

    :return: Display text
    :rtype: str
    """
    for symbol, glyph in GLYPHS:
        value = value.replace(symbol, glyph)
    return re.sub(r"\s+", " ", value).strip()


class CalculatorSession(BaseModel):
    """
    One calculator instance: the expression buffer, its history and the queries a renderer needs.

    The UI layer forwards keystrokes and button presses to ``on_input_char``, ``on_command``
    or ``on_key`` and reads back ``get_display_expression``, ``get_preview_result`` and
    ``get_history``. Independent sessions share no state.
    """

    model_config = ConfigDict(validate_assignment=True)

    buffer: str = Field(default="", description="Current expression buffer")
    history: HistoryRecorder = Field(default_factory=HistoryRecorder, description="Committed calculations")

    def get_display_expression(self) -> str:
        """Return the buffer formatted for display, "0" when empty."""
        return format_expression(self.buffer) if self.buffer else "0"

    def get_preview_result(self) -> str:
        """
        Return the live result of the buffer.

        :return: "0" for an empty buffer, "…" while an operand is still pending, else the formatted result
        :rtype: str
        """
        if not self.buffer:
            return "0"
        if ends_with_operator(self.buffer) or self.buffer.endswith("."):
            return PENDING_RESULT
        return to_result_string(ExpressionParser.evaluate(self.buffer))

    def on_input_char(self, char: str) -> None:
        """Apply a typed digit, decimal point or operator."""
        self.buffer = ExpressionBuffer.apply_input(self.buffer, char)

    def on_command(self, name: Union[Command, str]) -> bool:
        """
        Run a calculator command.

        :param name: One of clear, delete, percent, sign, equals

        :return: True when "equals" committed a calculation to history
        :rtype: bool
        :raises ValueError: If the command name is unknown
        """
        outcome = ExpressionBuffer.apply_command(self.buffer, self.history, name)
        self.buffer = outcome.buffer
        self.history = outcome.history
        return outcome.committed

    def on_key(self, key: str) -> bool:
        """
        Handle a keyboard key the way the keypad does.

        Digits, "." and operators are typed; Enter and "=" evaluate; Backspace deletes one
        character; Delete and "c" clear the buffer.

        :param str key: Key name, e.g. "7", "Enter", "Backspace"

        :return: True if the key was handled
        :rtype: bool
        """
        if key in INPUT_KEYS:
            self.on_input_char(key)
            return True
        if key in KEY_COMMANDS:
            self.on_command(KEY_COMMANDS[key])
            return True

        logger.debug(f"⌨️ Unhandled key {key!r}")
        return False

    def get_history(self) -> Tuple[HistoryEntry, ...]:
        """Return history entries, most recent first."""
        return self.history.entries

    def clear_history(self) -> None:
        """Remove every history entry, keeping the buffer."""
        self.history = self.history.clear()

    def recall_history(self, entry_id: str) -> None:
        """
        Load the result of a history entry into the buffer.

        :param str entry_id: Id of a recorded entry

        :raises KeyError: If no entry has this id
        """
        entry = self.history.find(entry_id)
        if entry is None:
            raise KeyError(f"No history entry with id {entry_id!r}")
        self.buffer = entry.result
