# src/sollint/lexer.py
from .sol_token import *
from .error_reporter import get_error_reporter, SolSyntaxError

_KEYWORDS = {
    "pragma": PRAGMA,
    "import": IMPORT,
    "contract": CONTRACT,
    "interface": INTERFACE,
    "library": LIBRARY,
    "abstract": ABSTRACT,
    "function": FUNCTION,
    "constructor": CONSTRUCTOR,
    "fallback": FALLBACK,
    "receive": RECEIVE,
    "modifier": MODIFIER,
    "event": EVENT,
    "error": ERROR,
    "struct": STRUCT,
    "enum": ENUM,
    "using": USING,
    "returns": RETURNS,
    "return": RETURN,
    "if": IF,
    "else": ELSE,
    "for": FOR,
    "while": WHILE,
    "do": DO,
    "break": BREAK,
    "continue": CONTINUE,
    "emit": EMIT,
    "unchecked": UNCHECKED,
    "true": TRUE,
    "false": FALSE,
    "new": NEW,
    "delete": DELETE,
    "is": IS,
    "mapping": MAPPING,
    "assembly": ASSEMBLY,
    "try": TRY,
    "catch": CATCH,
    "revert": REVERT,
    "type": TYPE,
}

# Soft keywords: only keywords where a declaration can start. Elsewhere they
# are ordinary identifiers (``error`` and ``revert`` are common names).
_CONTEXTUAL_KEYWORDS = {"error", "revert", "receive", "fallback", "type"}

# Longest match first within each leading character.
_OPERATORS = {
    "=": ["==", "=>", "="],
    "!": ["!=", "!"],
    "<": ["<<=", "<<", "<=", "<"],
    ">": [">>=", ">>", ">=", ">"],
    "+": ["++", "+=", "+"],
    "-": ["--", "-=", "-"],
    "*": ["**", "*=", "*"],
    "/": ["/=", "/"],
    "%": ["%=", "%"],
    "&": ["&&", "&=", "&"],
    "|": ["||", "|=", "|"],
    "^": ["^=", "^"],
    "~": ["~"],
    "?": ["?"],
    ":": [":"],
    ";": [";"],
    ",": [","],
    ".": ["."],
    "(": ["("],
    ")": [")"],
    "{": ["{"],
    "}": ["}"],
    "[": ["["],
    "]": ["]"],
}

_STRING_PREFIXES = {"hex": HEX_STRING, "unicode": STRING}


class Lexer:
    def __init__(self, source_code, filename="<stdin>"):
        self.input = source_code
        self.position = 0
        self.read_position = 0
        self.ch = ""
        self.line = 1
        self.column = 0
        self.filename = filename
        self.last_token_type = None

        self.error_reporter = get_error_reporter()
        self.error_reporter.register_source(filename, source_code)

        self.read_char()

    def read_char(self):
        if self.ch == "\n":
            self.line += 1
            self.column = 0

        if self.read_position >= len(self.input):
            self.ch = ""
        else:
            self.ch = self.input[self.read_position]

        self.column += 1
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self, offset=0):
        index = self.read_position + offset
        if index >= len(self.input):
            return ""
        return self.input[index]

    def tokenize(self):
        """Lex the whole input, returning the token list including EOF."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == EOF:
                return tokens

    def next_token(self):
        self.skip_whitespace()

        if self.ch == "/" and self.peek_char() == "/":
            self.skip_line_comment()
            return self.next_token()

        if self.ch == "/" and self.peek_char() == "*":
            self.skip_block_comment()
            return self.next_token()

        current_line = self.line
        current_column = self.column

        if self.ch == "":
            tok = Token(EOF, "", current_line, current_column)
        elif self.ch in ('"', "'"):
            tok = Token(STRING, self.read_string(), current_line, current_column)
        elif self.is_letter(self.ch):
            literal = self.read_identifier()
            if literal in _STRING_PREFIXES and self.ch in ('"', "'"):
                tok = Token(_STRING_PREFIXES[literal], self.read_string(), current_line, current_column)
                self.read_char()
            else:
                tok = Token(self.lookup_ident(literal), literal, current_line, current_column)
            self.last_token_type = tok.type
            return tok
        elif self.is_digit(self.ch) or (self.ch == "." and self.is_digit(self.peek_char())):
            token_type, literal = self.read_number()
            tok = Token(token_type, literal, current_line, current_column)
            self.last_token_type = tok.type
            return tok
        elif self.ch in _OPERATORS:
            literal = self.read_operator()
            tok = Token(literal, literal, current_line, current_column)
            self.last_token_type = tok.type
            return tok
        else:
            char_desc = f"'{self.ch}'" if self.ch.isprintable() else f"'\\x{ord(self.ch):02x}'"
            raise self.error_reporter.report_error(
                SolSyntaxError,
                f"Unexpected character {char_desc}",
                line=current_line,
                column=current_column,
                filename=self.filename,
                suggestion="Remove or replace this character with valid Solidity syntax.",
            )

        self.read_char()
        self.last_token_type = tok.type
        return tok

    def read_operator(self):
        for candidate in _OPERATORS[self.ch]:
            if self.input.startswith(candidate, self.position):
                for _ in range(len(candidate)):
                    self.read_char()
                return candidate
        # Every leading character lists itself as the final candidate
        raise AssertionError(f"no operator for {self.ch!r}")

    def skip_line_comment(self):
        self.read_char()
        self.read_char()
        while self.ch != "\n" and self.ch != "":
            self.read_char()

    def skip_block_comment(self):
        start_line = self.line
        start_column = self.column
        self.read_char()
        self.read_char()
        while not (self.ch == "*" and self.peek_char() == "/"):
            if self.ch == "":
                raise self.error_reporter.report_error(
                    SolSyntaxError,
                    "Unterminated block comment",
                    line=start_line,
                    column=start_column,
                    filename=self.filename,
                    suggestion="Close the comment with */.",
                )
            self.read_char()
        self.read_char()
        self.read_char()

    def read_string(self):
        quote = self.ch
        start_line = self.line
        start_column = self.column
        result = []
        while True:
            self.read_char()
            if self.ch == "" or self.ch == "\n":
                raise self.error_reporter.report_error(
                    SolSyntaxError,
                    "Unterminated string literal",
                    line=start_line,
                    column=start_column,
                    filename=self.filename,
                    suggestion=f"Add a closing quote {quote} to terminate the string.",
                )
            elif self.ch == "\\":
                self.read_char()
                escape_map = {
                    "n": "\n",
                    "t": "\t",
                    "r": "\r",
                    "\\": "\\",
                    '"': '"',
                    "'": "'",
                }
                result.append(escape_map.get(self.ch, self.ch))
            elif self.ch == quote:
                break
            else:
                result.append(self.ch)
        return "".join(result)

    def read_identifier(self):
        start_position = self.position
        while self.is_letter(self.ch) or self.is_digit(self.ch):
            self.read_char()
        return self.input[start_position:self.position]

    def read_number(self):
        start_position = self.position

        if self.ch == "0" and self.peek_char() in ("x", "X"):
            self.read_char()
            self.read_char()
            while self.is_hex_digit(self.ch) or self.ch == "_":
                self.read_char()
            return HEX_NUMBER, self.input[start_position:self.position]

        while self.is_digit(self.ch) or self.ch == "_":
            self.read_char()

        # Decimal part, but not a member access such as ``1.max``
        if self.ch == "." and self.is_digit(self.peek_char()):
            self.read_char()
            while self.is_digit(self.ch) or self.ch == "_":
                self.read_char()

        if self.ch in ("e", "E") and (self.is_digit(self.peek_char()) or self.peek_char() == "-"):
            self.read_char()
            if self.ch == "-":
                self.read_char()
            while self.is_digit(self.ch):
                self.read_char()

        return NUMBER, self.input[start_position:self.position]

    def lookup_ident(self, ident):
        token = _KEYWORDS.get(ident)
        if token is None:
            return IDENT

        if ident in _CONTEXTUAL_KEYWORDS:
            # ``error`` only declares at item level, ``revert`` only as a
            # statement keyword when followed by a custom error name.
            if self.last_token_type in (None, SEMICOLON, LBRACE, RBRACE):
                return token
            return IDENT

        return token

    def is_letter(self, char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char in ("_", "$")

    def is_digit(self, char):
        return "0" <= char <= "9" if char else False

    def is_hex_digit(self, char):
        return self.is_digit(char) or ("a" <= char.lower() <= "f" if char else False)

    def skip_whitespace(self):
        while self.ch in (" ", "\t", "\n", "\r", "\f", "\v"):
            self.read_char()
