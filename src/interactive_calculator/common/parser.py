"""Tokenize, convert and evaluate calculator expressions."""
from collections.abc import Callable as ABCCallable
from decimal import Decimal
import math
import operator
import string
from typing import Callable, List, Tuple


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

# Mapping of operator symbols to (precedence, function)
OPERATORS: dict[str, Tuple[int, OperatorFn]] = {
    "+": (1, operator.add),
    "-": (1, operator.sub),
    "*": (2, operator.mul),
    "/": (2, operator.truediv),
}

# Number of decimal places kept when formatting a result
RESULT_PRECISION: int = 12

ERROR_RESULT: str = "Error"


def _is_number_char(char: str) -> bool:
    """Tell whether a single character is a digit or a decimal point."""
    return len(char) == 1 and (char in string.digits or char == ".")


class ExpressionParser:
    """
    Parse and evaluate calculator expressions such as ``-5+2*3``.

    Design constraints:
        - No eval(), no dynamic code execution
        - Never raises on malformed input: errors travel as NaN and become "Error" when formatted

    Algorithm:
        1. Tokenize character by character, recognising unary minus from its context
        2. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        3. Evaluate RPN using a stack

    Examples:
        - Buffer: 3+4*2
        - Tokens: ["3", "+", "4", "*", "2"]
        - RPN: ["3", "4", "2", "*", "+"]
    """

    @staticmethod
    def tokenize(raw: str) -> List[str]:
        """
        Split a raw expression buffer into number and operator tokens.

        A "-" belongs to the following number when it opens the string or follows another
        operator, and is followed by a digit or a decimal point. Unknown characters are skipped.

        :param str raw: Expression buffer, e.g. "5*-3"

        :return: List of tokens
        :rtype: List[str]
        """
        tokens: List[str] = []
        number_buffer: str = ""

        for i, char in enumerate(raw):
            prev: str = raw[i - 1] if i > 0 else ""
            nxt: str = raw[i + 1] if i + 1 < len(raw) else ""

            unary_minus: bool = (
                char == "-"
                and (i == 0 or prev in OPERATORS)
                and _is_number_char(nxt)
            )

            if _is_number_char(char) or unary_minus:
                number_buffer += char
                continue

            if char in OPERATORS:
                if number_buffer:
                    tokens.append(number_buffer)
                    number_buffer = ""
                tokens.append(char)

        if number_buffer:
            tokens.append(number_buffer)

        return tokens

    @staticmethod
    def _to_number(token: str) -> float:
        """
        Convert a number token to float.

        :param str token: Number token, possibly signed ("-0.5") or degenerate (".")

        :return: Parsed value, NaN when the literal cannot be parsed
        :rtype: float
        """
        try:
            return float(token)
        except ValueError:
            return math.nan

    @staticmethod
    def to_postfix(tokens: List[str]) -> List[str]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        All operators are binary and left-associative, so stacked operators of equal precedence
        are popped before the incoming one is pushed.

        :param List[str] tokens: List of tokens in infix order

        :return: List of tokens in RPN order
        :rtype: List[str]
        """
        output: List[str] = []
        stack: List[str] = []

        for token in tokens:
            if token not in OPERATORS:
                # Numbers are added directly to the output
                output.append(token)
                continue

            # Operator: pop operators from stack with higher or equal precedence
            prec = OPERATORS[token][0]
            while stack and OPERATORS[stack[-1]][0] >= prec:
                output.append(stack.pop())
            stack.append(token)

        # Append remaining operators in reverse order (stack top first)
        output.extend(stack[::-1])
        return output

    @staticmethod
    def evaluate_postfix(postfix: List[str]) -> float:
        """
        Evaluate an RPN token list with a value stack.

        A missing operand, a NaN operand or a division by zero pushes NaN instead of raising,
        so a single bad step poisons the whole result.

        :param List[str] postfix: Tokens in RPN order

        :return: Computed value, NaN for malformed input or division by zero
        :rtype: float
        """
        stack: List[float] = []

        for token in postfix:
            if token not in OPERATORS:
                stack.append(ExpressionParser._to_number(token))
                continue

            b: float = stack.pop() if stack else math.nan
            a: float = stack.pop() if stack else math.nan

            if math.isnan(a) or math.isnan(b):
                stack.append(math.nan)
            elif token == "/" and b == 0:
                stack.append(math.nan)
            else:
                stack.append(OPERATORS[token][1](a, b))

        if len(stack) != 1:
            return math.nan

        return stack[0]

    @staticmethod
    def evaluate(raw: str) -> float:
        """
        Evaluate a raw expression buffer.

        Used for both the live preview and the final commit.

        :param str raw: Expression buffer

        :return: Computed value; 0.0 when the buffer holds no tokens
        :rtype: float
        """
        tokens: List[str] = ExpressionParser.tokenize(raw)

        if not tokens:
            return 0.0

        return ExpressionParser.evaluate_postfix(ExpressionParser.to_postfix(tokens))


def format_number(value: float) -> str:
    """
    Write a finite number in plain positional notation, rounded to RESULT_PRECISION decimals.

    Trailing zeros are dropped and negative zero is written as "0", so 14.0 gives "14"
    and 0.1 + 0.2 gives "0.3".

    :param float value: Finite value

    :return: Formatted number
    :rtype: str
    """
    # Adding 0.0 turns -0.0 into 0.0
    rounded: float = round(value, RESULT_PRECISION) + 0.0
    return f"{rounded:.{RESULT_PRECISION}f}".rstrip("0").rstrip(".")


def format_plain(value: float) -> str:
    """
    Write a finite number in plain positional notation without rounding.

    Keeps every significant digit of the shortest float repr, e.g. 1e-14 gives "0.00000000000001".

    :param float value: Finite value

    :return: Formatted number
    :rtype: str
    """
    text: str = format(Decimal(repr(value + 0.0)), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def to_result_string(value: float) -> str:
    """
    Format an evaluation result for display.

    :param float value: Result of ExpressionParser.evaluate

    :return: "Error" for NaN or infinity, else the formatted number
    :rtype: str
    """
    if not math.isfinite(value):
        return ERROR_RESULT
    return format_number(value)
