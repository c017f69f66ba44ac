"""
Common constants and compiled patterns used across jsonsmith.
"""

import regex

# Escape sequences accepted inside strings (the character after the backslash)
JSON_ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Short forms used when serializing; other control characters use \u00XX
JSON_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

LITERALS = {
    "n": "null",
    "t": "true",
    "f": "false",
}

WHITESPACE = " \t\n\r"

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF

WHITESPACE_PATTERN = regex.compile(r"[ \t\n\r]*")

# Run of string content that needs no decoding: stops at a quote, a backslash
# or a raw control character
STRING_CHUNK_PATTERN = regex.compile(r'[^"\\\x00-\x1f]*')

HEX4_PATTERN = regex.compile(r"[0-9A-Fa-f]{4}")

# Surrogate code points in already-decoded input
SURROGATE_PATTERN = regex.compile(r"[\ud800-\udfff]")

# Every part is optional so a partial match can be inspected for the exact
# grammar violation; see Parser.parse_number.
NUMBER_PATTERN = regex.compile(
    r"(?P<sign>-)?(?P<int>0|[1-9][0-9]*)?(?P<frac>\.[0-9]*)?(?P<exp>[eE][+-]?[0-9]*)?"
)

# Bare word at the cursor, quoted back to the user in diagnostics
WORD_PATTERN = regex.compile(r'[^\s,:\[\]{}"]{1,32}')

ARRAY_INDEX_PATTERN = regex.compile(r"0|[1-9][0-9]*")

# Characters the serializer must escape
ESCAPE_PATTERN = regex.compile(r'["\\\x00-\x1f]')
