"""
Parser for jsonsmith - builds Value trees from JSON text.

Recursive descent over a character cursor. Every failure raises a ParseError
carrying its code, line, column, byte offset and the structural path of the
node being parsed. Partially built arrays and objects are released before the
error propagates.
"""

import logging
import math
from typing import Optional

from ..security.exceptions import (
    ErrorCode,
    ErrorSuggestionEngine,
    ParseError,
    SecurityError,
)
from ..security.limits import LimitValidator
from ..utils.config import DuplicateKeyPolicy, ParseConfig
from .constants import (
    HEX4_PATTERN,
    HIGH_SURROGATE_MAX,
    HIGH_SURROGATE_MIN,
    JSON_ESCAPE_MAP,
    LITERALS,
    LOW_SURROGATE_MAX,
    LOW_SURROGATE_MIN,
    NUMBER_PATTERN,
    STRING_CHUNK_PATTERN,
    SURROGATE_PATTERN,
    WORD_PATTERN,
)
from .error_handling import ErrorReporter
from .tokenizer import Lexer, Mark, Position, TextInput
from .value import Value

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    ErrorCode.EXPECT_VALUE: "Expected a value but reached end of input",
    ErrorCode.INVALID_VALUE: "Invalid value",
    ErrorCode.ROOT_NOT_SINGULAR: "Unexpected content after the root value",
    ErrorCode.NUMBER_TOO_BIG: "Number is too large to represent",
    ErrorCode.MISS_QUOTATION_MARK: "Unterminated string, expected '\"'",
    ErrorCode.INVALID_STRING_ESCAPE: "Invalid escape sequence",
    ErrorCode.INVALID_STRING_CHAR: "Invalid character in string",
    ErrorCode.INVALID_UNICODE_HEX: "Invalid \\u escape, expected four hex digits",
    ErrorCode.INVALID_UNICODE_SURROGATE: "Invalid or unpaired unicode surrogate",
    ErrorCode.MISS_COMMA_OR_SQUARE_BRACKET: "Expected ',' or ']' after array element",
    ErrorCode.MISS_KEY: "Expected a string key",
    ErrorCode.MISS_COLON: "Expected ':' after object key",
    ErrorCode.MISS_COMMA_OR_CURLY_BRACKET: "Expected ',' or '}' after object member",
    ErrorCode.DUPLICATE_KEY: "Duplicate object key",
    ErrorCode.MAX_DEPTH_EXCEEDED: "Maximum nesting depth exceeded",
}


class Parser:
    """JSON parser that converts text into a Value tree."""

    def __init__(self, text: str, config: Optional[ParseConfig] = None):
        self.text = text
        self.config = config or ParseConfig()
        assert self.config.limits is not None
        self.lexer = Lexer(text, allow_comments=self.config.allow_comments)
        self.validator = LimitValidator(self.config.limits)
        self.error_reporter = ErrorReporter(
            text, self.config.include_context, self.config.max_error_context
        )

    def parse(self) -> Value:
        """Parse the whole input as a single JSON document."""
        try:
            self.validator.validate_input_size(self.text)
        except SecurityError as exc:
            raise self._relocate(exc, self.lexer.mark()) from None

        try:
            self.lexer.skip_whitespace()
            value = self.parse_value()
        except RecursionError:
            raise self._error(
                ErrorCode.MAX_DEPTH_EXCEEDED,
                "Nesting exceeds the interpreter recursion limit",
                error_type=SecurityError,
            ) from None

        self.lexer.skip_whitespace()
        if not self.lexer.at_end():
            value.release()
            raise self._error(ErrorCode.ROOT_NOT_SINGULAR)
        return value

    # Values

    def parse_value(self) -> Value:
        """Parse any JSON value at the cursor."""
        char = self.lexer.peek()

        if char == "":
            raise self._error(ErrorCode.EXPECT_VALUE)
        if char in LITERALS:
            return self._parse_literal(LITERALS[char])
        if char == "-" or "0" <= char <= "9":
            return self.parse_number()
        if char == '"':
            return Value.string(self.parse_string())
        if char == "[":
            return self.parse_array()
        if char == "{":
            return self.parse_object()

        raise self._error(
            ErrorCode.INVALID_VALUE,
            f"Unexpected character {char!r}",
            suggestions=ErrorSuggestionEngine.suggest_for_unexpected_token(char),
        )

    def _parse_literal(self, literal: str) -> Value:
        if not self.lexer.startswith(literal):
            word = self._word_at_cursor()
            raise self._error(
                ErrorCode.INVALID_VALUE,
                f"Invalid literal {word!r}",
                suggestions=ErrorSuggestionEngine.suggest_for_invalid_value(word),
            )
        self.lexer.consume(literal)
        if literal == "null":
            return Value.null()
        return Value.boolean(literal == "true")

    def parse_number(self) -> Value:
        """Validate the number grammar, then convert to a double."""
        lexer = self.lexer
        match = lexer.match(NUMBER_PATTERN)
        literal = match.group()
        exponent = match.group("exp")

        if (
            match.group("int") is None
            or match.group("frac") == "."
            or (exponent is not None and not exponent[-1].isdigit())
        ):
            word = self._word_at_cursor()
            raise self._error(
                ErrorCode.INVALID_VALUE,
                f"Invalid number {word!r}",
                suggestions=ErrorSuggestionEngine.suggest_for_invalid_value(word),
            )

        number = float(literal)
        if math.isinf(number):
            raise self._error(ErrorCode.NUMBER_TOO_BIG, f"Number {literal} is too large")

        lexer.consume(literal)
        return Value.number(number)

    def parse_string(self) -> str:
        """Parse a quoted string at the cursor and return its decoded text."""
        lexer = self.lexer
        start = lexer.mark()
        lexer.advance()

        chunks: Optional[list[str]] = None
        while True:
            chunk = lexer.match(STRING_CHUNK_PATTERN).group()
            lexer.consume(chunk)
            char = lexer.peek()

            if char == '"':
                lexer.advance()
                if chunks is None:
                    text = chunk
                else:
                    chunks.append(chunk)
                    text = "".join(chunks)
                self._check_string_length(len(text), start)
                return text

            # The first escape switches from slicing to a growable buffer
            if chunks is None:
                chunks = []
            chunks.append(chunk)

            if char == "\\":
                chunks.append(self._parse_escape())
            elif char == "":
                raise self._error(ErrorCode.MISS_QUOTATION_MARK)
            else:
                raise self._error(
                    ErrorCode.INVALID_STRING_CHAR,
                    f"Unescaped control character {ord(char):#04x} in string",
                )

    def _parse_escape(self) -> str:
        lexer = self.lexer
        start = lexer.mark()
        lexer.advance()
        char = lexer.advance()

        if char in JSON_ESCAPE_MAP:
            return JSON_ESCAPE_MAP[char]

        if char == "u":
            code_unit = self._read_hex4(start)

            if HIGH_SURROGATE_MIN <= code_unit <= HIGH_SURROGATE_MAX:
                low_start = lexer.mark()
                if not lexer.startswith("\\u"):
                    raise self._error(
                        ErrorCode.INVALID_UNICODE_SURROGATE,
                        f"High surrogate \\u{code_unit:04X} is not followed by a low surrogate",
                        mark=start,
                    )
                lexer.consume("\\u")
                low = self._read_hex4(low_start)
                if not LOW_SURROGATE_MIN <= low <= LOW_SURROGATE_MAX:
                    raise self._error(
                        ErrorCode.INVALID_UNICODE_SURROGATE,
                        f"\\u{low:04X} is not a low surrogate",
                        mark=low_start,
                    )
                return chr(
                    0x10000
                    + ((code_unit - HIGH_SURROGATE_MIN) << 10)
                    + (low - LOW_SURROGATE_MIN)
                )

            if LOW_SURROGATE_MIN <= code_unit <= LOW_SURROGATE_MAX:
                raise self._error(
                    ErrorCode.INVALID_UNICODE_SURROGATE,
                    f"Unpaired low surrogate \\u{code_unit:04X}",
                    mark=start,
                )
            return chr(code_unit)

        if char == "":
            raise self._error(ErrorCode.MISS_QUOTATION_MARK)

        raise self._error(
            ErrorCode.INVALID_STRING_ESCAPE,
            f"Invalid escape sequence '\\{char}'",
            mark=start,
        )

    def _read_hex4(self, escape_start: Mark) -> int:
        match = self.lexer.match(HEX4_PATTERN)
        if match is None:
            raise self._error(ErrorCode.INVALID_UNICODE_HEX, mark=escape_start)
        self.lexer.consume(match.group())
        return int(match.group(), 16)

    # Containers

    def parse_array(self) -> Value:
        """Parse an array; elements are released if any of them fails."""
        lexer = self.lexer
        self._enter_structure(lexer.mark())
        lexer.advance()
        lexer.skip_whitespace()

        items: list[Value] = []
        try:
            if lexer.peek() == "]":
                lexer.advance()
                return Value.array(items)

            index = 0
            while True:
                element_start = lexer.mark()
                lexer.push_index(index)
                try:
                    items.append(self.parse_value())
                    self._check_array_items(len(items), element_start)
                except ParseError as exc:
                    self._recover_element(exc, element_start)
                finally:
                    lexer.pop_path()

                lexer.skip_whitespace()
                if not self._continue_array():
                    break
                index += 1
        except ParseError:
            for item in items:
                item.release()
            raise
        finally:
            self.validator.exit_structure()

        return Value.array(items)

    def _continue_array(self) -> bool:
        """Consume the separator after an element; False once the array is closed."""
        lexer = self.lexer
        char = lexer.peek()
        if char == ",":
            lexer.advance()
            lexer.skip_whitespace()
            if self.config.allow_trailing_commas and lexer.peek() == "]":
                lexer.advance()
                return False
            return True
        if char == "]":
            lexer.advance()
            return False

        error = self._error(
            ErrorCode.MISS_COMMA_OR_SQUARE_BRACKET,
            suggestions=ErrorSuggestionEngine.suggest_for_unclosed_structure("array"),
        )
        return self._recover_separator(error, "]")

    def parse_object(self) -> Value:
        """Parse an object; members are released if any of them fails."""
        lexer = self.lexer
        self._enter_structure(lexer.mark())
        lexer.advance()
        lexer.skip_whitespace()

        members: dict[str, Value] = {}
        try:
            if lexer.peek() == "}":
                lexer.advance()
                return Value.object(members)

            while True:
                member_start = lexer.mark()
                try:
                    key, member = self._parse_member()
                    self._store_member(members, key, member, member_start)
                except ParseError as exc:
                    self._recover_element(exc, member_start)

                lexer.skip_whitespace()
                if not self._continue_object():
                    break
        except ParseError:
            for member in members.values():
                member.release()
            raise
        finally:
            self.validator.exit_structure()

        return Value.object(members)

    def _parse_member(self) -> tuple[str, Value]:
        lexer = self.lexer
        if lexer.peek() != '"':
            raise self._error(ErrorCode.MISS_KEY)
        key = self.parse_string()

        lexer.skip_whitespace()
        if lexer.peek() != ":":
            raise self._error(ErrorCode.MISS_COLON)
        lexer.advance()
        lexer.skip_whitespace()

        lexer.push_key(key)
        try:
            return key, self.parse_value()
        finally:
            lexer.pop_path()

    def _store_member(
        self, members: dict[str, Value], key: str, member: Value, start: Mark
    ) -> None:
        if key in members:
            policy = self.config.duplicate_keys
            if policy is DuplicateKeyPolicy.REJECT:
                member.release()
                raise self._error(
                    ErrorCode.DUPLICATE_KEY, f"Duplicate object key {key!r}", mark=start
                )
            if policy is DuplicateKeyPolicy.FIRST_WINS:
                member.release()
                return
            members[key].release()

        members[key] = member
        self._check_object_keys(len(members), start)

    def _continue_object(self) -> bool:
        """Consume the separator after a member; False once the object is closed."""
        lexer = self.lexer
        char = lexer.peek()
        if char == ",":
            lexer.advance()
            lexer.skip_whitespace()
            if self.config.allow_trailing_commas and lexer.peek() == "}":
                lexer.advance()
                return False
            return True
        if char == "}":
            lexer.advance()
            return False

        error = self._error(
            ErrorCode.MISS_COMMA_OR_CURLY_BRACKET,
            suggestions=ErrorSuggestionEngine.suggest_for_unclosed_structure("object"),
        )
        return self._recover_separator(error, "}")

    # Recovery hooks, strict by default

    def _recover_element(self, error: ParseError, start: Mark) -> None:
        """Handle a failed array element or object member."""
        raise error

    def _recover_separator(self, error: ParseError, closer: str) -> bool:
        """Handle a missing separator; returns whether the container continues."""
        raise error

    # Limits

    def _enter_structure(self, start: Mark) -> None:
        try:
            self.validator.enter_structure()
        except SecurityError as exc:
            raise self._relocate(exc, start) from None

    def _check_string_length(self, length: int, start: Mark) -> None:
        try:
            self.validator.validate_string_length(length)
        except SecurityError as exc:
            raise self._relocate(exc, start) from None

    def _check_array_items(self, count: int, start: Mark) -> None:
        try:
            self.validator.validate_array_items(count)
        except SecurityError as exc:
            raise self._relocate(exc, start) from None

    def _check_object_keys(self, count: int, start: Mark) -> None:
        try:
            self.validator.validate_object_keys(count)
        except SecurityError as exc:
            raise self._relocate(exc, start) from None

    # Diagnostics

    def _word_at_cursor(self) -> str:
        match = self.lexer.match(WORD_PATTERN)
        return match.group() if match else self.lexer.peek()

    def _error(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        mark: Optional[Mark] = None,
        suggestions: Optional[list[str]] = None,
        error_type: type = ParseError,
    ) -> ParseError:
        """Build a positioned error for the cursor or ``mark``."""
        lexer = self.lexer
        if mark is None:
            mark = lexer.mark()
        position = lexer.position_of(mark)
        offset = lexer.byte_offset(mark.pos)
        message = message or DEFAULT_MESSAGES.get(code, code.value)

        if error_type is SecurityError:
            return self.error_reporter.create_security_error(
                message, position, code, offset=offset, path=lexer.path_string()
            )
        return self.error_reporter.create_parse_error(
            message,
            position,
            suggestions,
            code,
            offset=offset,
            path=lexer.path_string(),
        )

    def _relocate(self, error: SecurityError, mark: Mark) -> SecurityError:
        """Attach the location of ``mark`` to a limit violation."""
        lexer = self.lexer
        return self.error_reporter.create_security_error(
            error.message,
            lexer.position_of(mark),
            error.code,
            offset=lexer.byte_offset(mark.pos),
            path=lexer.path_string(),
        )


def decode_input(text: TextInput) -> str:
    """Return ``text`` as str, decoding UTF-8 bytes."""
    if isinstance(text, str):
        # surrogate code points have no UTF-8 encoding
        match = SURROGATE_PATTERN.search(text)
        if match:
            prefix = text[: match.start()]
            raise _encoding_error(
                prefix,
                len(prefix.encode("utf-8")),
                f"lone surrogate U+{ord(match.group()):04X}",
            )
        return text
    if not isinstance(text, (bytes, bytearray)):
        raise TypeError(
            f"JSON input must be str, bytes or bytearray, not {type(text).__name__}"
        )
    try:
        return bytes(text).decode("utf-8")
    except UnicodeDecodeError as exc:
        prefix = bytes(text[: exc.start]).decode("utf-8")
        raise _encoding_error(prefix, exc.start, exc.reason) from None


def _encoding_error(prefix: str, offset: int, reason: str) -> ParseError:
    line = prefix.count("\n") + 1
    column = len(prefix) - prefix.rfind("\n")
    return ParseError(
        f"Input is not valid UTF-8: {reason}",
        Position(line, column),
        code=ErrorCode.INVALID_ENCODING,
        offset=offset,
    )


def parse(text: TextInput, config: Optional[ParseConfig] = None) -> Value:
    """
    Parse JSON text into a Value tree.

    Args:
        text: JSON document as str or UTF-8 bytes
        config: Optional parse configuration

    Returns:
        The root Value of the document

    Raises:
        ParseError: If the text is not a valid JSON document
        SecurityError: If the input exceeds a configured limit
    """
    parser = Parser(decode_input(text), config)
    try:
        return parser.parse()
    except ParseError as exc:
        logger.debug(f"Parse failed with {exc.code.value} at {exc.line}:{exc.column}")
        raise
