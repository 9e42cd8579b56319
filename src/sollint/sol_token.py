# src/sollint/sol_token.py

# Special
ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers & literals
IDENT = "IDENT"
NUMBER = "NUMBER"
HEX_NUMBER = "HEX_NUMBER"
STRING = "STRING"
HEX_STRING = "HEX_STRING"

# Assignment operators
ASSIGN = "="
PLUS_ASSIGN = "+="
MINUS_ASSIGN = "-="
STAR_ASSIGN = "*="
SLASH_ASSIGN = "/="
MOD_ASSIGN = "%="
BIT_OR_ASSIGN = "|="
BIT_AND_ASSIGN = "&="
BIT_XOR_ASSIGN = "^="
SHL_ASSIGN = "<<="
SAR_ASSIGN = ">>="

# Arithmetic
PLUS = "+"
MINUS = "-"
STAR = "*"
SLASH = "/"
MOD = "%"
POWER = "**"
INCREMENT = "++"
DECREMENT = "--"

# Comparison & logic
EQ = "=="
NOT_EQ = "!="
LT = "<"
GT = ">"
LTE = "<="
GTE = ">="
AND = "&&"
OR = "||"
BANG = "!"

# Bitwise
BIT_AND = "&"
BIT_OR = "|"
BIT_XOR = "^"
BIT_NOT = "~"
SHL = "<<"
SAR = ">>"

# Delimiters
COMMA = ","
SEMICOLON = ";"
COLON = ":"
DOT = "."
QUESTION = "?"
ARROW = "=>"
LPAREN = "("
RPAREN = ")"
LBRACE = "{"
RBRACE = "}"
LBRACKET = "["
RBRACKET = "]"

# Keywords
PRAGMA = "PRAGMA"
IMPORT = "IMPORT"
CONTRACT = "CONTRACT"
INTERFACE = "INTERFACE"
LIBRARY = "LIBRARY"
ABSTRACT = "ABSTRACT"
FUNCTION = "FUNCTION"
CONSTRUCTOR = "CONSTRUCTOR"
FALLBACK = "FALLBACK"
RECEIVE = "RECEIVE"
MODIFIER = "MODIFIER"
EVENT = "EVENT"
ERROR = "ERROR"
STRUCT = "STRUCT"
ENUM = "ENUM"
USING = "USING"
RETURNS = "RETURNS"
RETURN = "RETURN"
IF = "IF"
ELSE = "ELSE"
FOR = "FOR"
WHILE = "WHILE"
DO = "DO"
BREAK = "BREAK"
CONTINUE = "CONTINUE"
EMIT = "EMIT"
UNCHECKED = "UNCHECKED"
TRUE = "TRUE"
FALSE = "FALSE"
NEW = "NEW"
DELETE = "DELETE"
IS = "IS"
MAPPING = "MAPPING"
ASSEMBLY = "ASSEMBLY"
TRY = "TRY"
CATCH = "CATCH"
REVERT = "REVERT"
TYPE = "TYPE"


class Token:
    def __init__(self, token_type, literal, line=0, column=0):
        self.type = token_type
        self.literal = literal
        self.line = line
        self.column = column

    def __repr__(self):
        return f"Token({self.type}, {self.literal!r}, line={self.line}, column={self.column})"


ASSIGNMENT_OPERATORS = {
    ASSIGN, PLUS_ASSIGN, MINUS_ASSIGN, STAR_ASSIGN, SLASH_ASSIGN, MOD_ASSIGN,
    BIT_OR_ASSIGN, BIT_AND_ASSIGN, BIT_XOR_ASSIGN, SHL_ASSIGN, SAR_ASSIGN,
}

# Identifiers that name built-in value types. Anything matching one of these
# (or the sized int/uint/bytes families) starts a type name.
ELEMENTARY_TYPES = {
    "address", "bool", "string", "bytes", "int", "uint", "byte",
    "fixed", "ufixed",
}


def is_elementary_type(name):
    if name in ELEMENTARY_TYPES:
        return True
    for prefix in ("uint", "int", "bytes"):
        if name.startswith(prefix) and name[len(prefix):].isdigit():
            return True
    return False
