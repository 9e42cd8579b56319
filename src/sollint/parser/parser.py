## src/sollint/parser/parser.py
import logging

from ..sol_token import *
from ..lexer import Lexer
from ..sol_ast import *

logger = logging.getLogger("sollint.parser")

# Precedence constants, loosest first
(LOWEST, ASSIGN_PREC, CONDITIONAL, LOGICAL_OR, LOGICAL_AND, EQUALS, LESSGREATER,
 BITWISE_OR, BITWISE_XOR, BITWISE_AND, SHIFT, SUM, PRODUCT, EXPONENT, PREFIX,
 POSTFIX) = range(1, 17)

precedences = {
    QUESTION: CONDITIONAL,
    OR: LOGICAL_OR,
    AND: LOGICAL_AND,
    EQ: EQUALS, NOT_EQ: EQUALS,
    LT: LESSGREATER, GT: LESSGREATER, LTE: LESSGREATER, GTE: LESSGREATER,
    BIT_OR: BITWISE_OR,
    BIT_XOR: BITWISE_XOR,
    BIT_AND: BITWISE_AND,
    SHL: SHIFT, SAR: SHIFT,
    PLUS: SUM, MINUS: SUM,
    STAR: PRODUCT, SLASH: PRODUCT, MOD: PRODUCT,
    POWER: EXPONENT,
    INCREMENT: POSTFIX, DECREMENT: POSTFIX,
    LPAREN: POSTFIX, DOT: POSTFIX, LBRACKET: POSTFIX, LBRACE: POSTFIX,
}
precedences.update({op: ASSIGN_PREC for op in ASSIGNMENT_OPERATORS})

# Operators that group to the right
_RIGHT_ASSOCIATIVE = {POWER}

VISIBILITY = {"public", "private", "internal", "external"}
STATE_MUTABILITY = {"pure", "view", "payable", "constant"}
VARIABLE_MUTABILITY = {"constant", "immutable", "transient"}
DATA_LOCATIONS = {"memory", "storage", "calldata"}
NUMBER_UNITS = {
    "wei", "gwei", "szabo", "finney", "ether",
    "seconds", "minutes", "hours", "days", "weeks", "years",
}


class Parser:
    """Recursive-descent / Pratt parser producing a ``SourceUnit``.

    Parsing is tolerant: problems are appended to ``errors`` as
    ``"Line L:C - message"`` strings and parsing continues at the next
    statement or contract item. A non-empty ``errors`` list means the tree
    is partial and should not be analyzed.
    """

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []
        self.tokens = lexer.tokenize()
        self.pos = 0
        self._last_collected = []
        self.cur_token = None
        self.peek_token = None

        self.prefix_parse_fns = {
            IDENT: self.parse_identifier,
            TYPE: self.parse_identifier,
            ERROR: self.parse_identifier,
            REVERT: self.parse_identifier,
            RECEIVE: self.parse_identifier,
            FALLBACK: self.parse_identifier,
            NUMBER: self.parse_number_literal,
            HEX_NUMBER: self.parse_number_literal,
            STRING: self.parse_string_literal,
            HEX_STRING: self.parse_string_literal,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            LPAREN: self.parse_grouped_expression,
            LBRACKET: self.parse_inline_array,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            BIT_NOT: self.parse_prefix_expression,
            INCREMENT: self.parse_prefix_expression,
            DECREMENT: self.parse_prefix_expression,
            DELETE: self.parse_prefix_expression,
            NEW: self.parse_new_expression,
        }
        self.infix_parse_fns = {
            LPAREN: self.parse_call_expression,
            DOT: self.parse_member_access,
            LBRACKET: self.parse_index_expression,
            LBRACE: self.parse_call_options,
            QUESTION: self.parse_conditional_expression,
            INCREMENT: self.parse_postfix_expression,
            DECREMENT: self.parse_postfix_expression,
        }
        for op in (PLUS, MINUS, STAR, SLASH, MOD, POWER, EQ, NOT_EQ, LT, GT, LTE,
                   GTE, AND, OR, BIT_AND, BIT_OR, BIT_XOR, SHL, SAR):
            self.infix_parse_fns[op] = self.parse_infix_expression
        for op in ASSIGNMENT_OPERATORS:
            self.infix_parse_fns[op] = self.parse_assignment_expression

        self._sync()

    # === SOURCE UNIT ===

    def parse_source_unit(self):
        unit = SourceUnit()
        while not self.cur_token_is(EOF):
            item = self.parse_source_item()
            if item is not None:
                unit.items.append(item)
            self.next_token()
        logger.debug("parsed %s: %d items, %d errors",
                     self.lexer.filename, len(unit.items), len(self.errors))
        return unit

    def parse_source_item(self):
        token = self.cur_token
        if self.cur_token_is(PRAGMA):
            return self._at(PragmaDirective(" ".join(self._collect_until(SEMICOLON)[1:])), token)
        if self.cur_token_is(IMPORT):
            literals = self._collect_until(SEMICOLON)
            path = next((t.literal for t in self._last_collected if t.type == STRING), " ".join(literals))
            return self._at(ImportDirective(path), token)
        if self.cur_token.type in (CONTRACT, INTERFACE, LIBRARY, ABSTRACT):
            return self.parse_contract_definition()
        if self.cur_token_is(SEMICOLON):
            return None
        # Free functions, file-level structs/enums/errors/constants
        return self.parse_contract_item(where="at file level")

    # === CONTRACTS ===

    def parse_contract_definition(self):
        """contract Token is ERC20, Ownable(msg.sender) { ... }"""
        token = self.cur_token
        kind = self.cur_token.literal
        if self.cur_token_is(ABSTRACT):
            if not self.expect_peek(CONTRACT):
                return None
            kind = "abstract contract"

        if not self.expect_peek(IDENT):
            self.recover_to_next_item()
            return None
        name = self._at(Identifier(self.cur_token.literal), self.cur_token)

        bases = []
        if self.peek_token_is(IS):
            self.next_token()
            while True:
                if not self.expect_peek(IDENT):
                    break
                base = self.cur_token.literal
                while self.peek_token_is(DOT):
                    self.next_token()
                    self.next_token()
                    base += "." + self.cur_token.literal
                bases.append(Identifier(base))
                if self.peek_token_is(LPAREN):
                    self.next_token()
                    self._skip_balanced(LPAREN, RPAREN)
                if not self.peek_token_is(COMMA):
                    break
                self.next_token()

        if not self.expect_peek(LBRACE):
            self.recover_to_next_item()
            return None

        contract = self._at(ContractDefinition(name, kind=kind, bases=bases), token)
        self.next_token()
        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            item = self.parse_contract_item()
            if item is not None:
                contract.items.append(item)
            self.next_token()

        if self.cur_token_is(EOF):
            self._error(f"Unclosed contract '{name}' (reached EOF)")
        return contract

    def parse_contract_item(self, where="in contract body"):
        t = self.cur_token.type
        if t == FUNCTION:
            return self.parse_function_definition("function")
        if t == CONSTRUCTOR:
            return self.parse_function_definition("constructor")
        if t == FALLBACK:
            return self.parse_function_definition("fallback")
        if t == RECEIVE:
            return self.parse_function_definition("receive")
        if t == MODIFIER:
            return self.parse_function_definition("modifier")
        if t == EVENT:
            return self.parse_event_definition()
        if t == ERROR:
            return self.parse_error_definition()
        if t == STRUCT:
            return self.parse_struct_definition()
        if t == ENUM:
            return self.parse_enum_definition()
        if t == USING:
            return self.parse_using_directive()
        if t == TYPE:
            return self.parse_user_defined_value_type()
        if t == SEMICOLON:
            return None
        if t in (IDENT, MAPPING):
            return self.parse_state_variable()

        self._error(f"Unexpected token '{self.cur_token.literal}' {where}")
        self.recover_to_next_item()
        return None

    def parse_state_variable(self):
        """uint256 public constant MAX = 10;"""
        token = self.cur_token
        type_name = self.parse_type_name()
        if type_name is None:
            self.recover_to_next_item()
            return None

        visibility = None
        mutability = None
        while self.peek_token_is(IDENT) and (
            self.peek_token.literal in VISIBILITY
            or self.peek_token.literal in VARIABLE_MUTABILITY
            or self.peek_token.literal == "override"
        ):
            self.next_token()
            literal = self.cur_token.literal
            if literal in VISIBILITY:
                visibility = literal
            elif literal in VARIABLE_MUTABILITY:
                mutability = literal
            elif self.peek_token_is(LPAREN):
                self.next_token()
                self._skip_balanced(LPAREN, RPAREN)

        name = None
        if self.peek_token_is(IDENT):
            self.next_token()
            name = self._at(Identifier(self.cur_token.literal), self.cur_token)
        else:
            self._error(f"Expected state variable name after type '{type_name}', got '{self.peek_token.literal}'")

        initial_value = None
        if self.peek_token_is(ASSIGN):
            self.next_token()
            self.next_token()
            initial_value = self.parse_expression(LOWEST)

        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_item()
        return self._at(VariableDeclaration(type_name, name, visibility, mutability, initial_value), token)

    def parse_function_definition(self, kind):
        token = self.cur_token
        header = FunctionHeader(kind=kind)

        if kind in ("function", "modifier"):
            if self.peek_token.type in (IDENT, RECEIVE, FALLBACK, ERROR, REVERT, TYPE):
                self.next_token()
                header.name = self._at(Identifier(self.cur_token.literal), self.cur_token)
            elif kind == "modifier":
                self._error("Expected modifier name")

        if self.peek_token_is(LPAREN):
            self.next_token()
            header.parameters = self.parse_parameter_list()
        elif kind != "modifier":
            self.expect_peek(LPAREN)
            self.recover_to_next_item()
            return None

        while self.peek_token.type not in (LBRACE, SEMICOLON, EOF):
            self.next_token()
            literal = self.cur_token.literal
            if self.cur_token_is(RETURNS):
                if not self.expect_peek(LPAREN):
                    break
                header.returns = self.parse_parameter_list()
            elif literal in VISIBILITY:
                header.visibility = literal
            elif literal in STATE_MUTABILITY:
                header.state_mutability = literal
            elif literal == "virtual":
                header.is_virtual = True
            elif literal == "override":
                header.overrides = True
                if self.peek_token_is(LPAREN):
                    self.next_token()
                    self._skip_balanced(LPAREN, RPAREN)
            elif self.cur_token_is(IDENT):
                header.modifiers.append(self.parse_modifier_invocation())
            else:
                self._error(f"Unexpected token '{literal}' in {kind} header")
                self.recover_to_next_item()
                return None

        body = None
        if self.peek_token_is(LBRACE):
            self.next_token()
            body = self.parse_block().statements
        elif not self.expect_peek(SEMICOLON):
            return None

        return self._at(FunctionDefinition(header, body), token)

    def parse_modifier_invocation(self):
        token = self.cur_token
        name = self.cur_token.literal
        while self.peek_token_is(DOT):
            self.next_token()
            self.next_token()
            name += "." + self.cur_token.literal
        arguments = []
        if self.peek_token_is(LPAREN):
            self.next_token()
            arguments = self.parse_expression_list(RPAREN)
        return self._at(ModifierInvocation(Identifier(name), arguments), token)

    def parse_parameter_list(self):
        """(uint256 amount, address payable to): current token is '('"""
        params = []
        if self.peek_token_is(RPAREN):
            self.next_token()
            return params

        while True:
            self.next_token()
            token = self.cur_token
            type_name = self.parse_type_name()
            if type_name is None:
                self._skip_to_closing_paren()
                return params
            param = self._at(Parameter(type_name), token)
            while self.peek_token_is(IDENT):
                self.next_token()
                literal = self.cur_token.literal
                if literal in DATA_LOCATIONS:
                    param.location = literal
                elif literal == "indexed":
                    continue
                else:
                    param.name = Identifier(literal)
            params.append(param)

            if self.peek_token_is(COMMA):
                self.next_token()
                continue
            if not self.expect_peek(RPAREN):
                self._skip_to_closing_paren()
            return params

    def parse_event_definition(self):
        token = self.cur_token
        if not self.expect_peek(IDENT) or not self.expect_peek(LPAREN):
            self.recover_to_next_item()
            return None
        name = Identifier(self.tokens[self.pos - 1].literal)
        params = self.parse_parameter_list()
        if self.peek_token_is(IDENT) and self.peek_token.literal == "anonymous":
            self.next_token()
        self.expect_peek(SEMICOLON)
        return self._at(EventDefinition(name, params), token)

    def parse_error_definition(self):
        token = self.cur_token
        if not self.expect_peek(IDENT) or not self.expect_peek(LPAREN):
            self.recover_to_next_item()
            return None
        name = Identifier(self.tokens[self.pos - 1].literal)
        params = self.parse_parameter_list()
        self.expect_peek(SEMICOLON)
        return self._at(ErrorDefinition(name, params), token)

    def parse_struct_definition(self):
        token = self.cur_token
        if not self.expect_peek(IDENT):
            self.recover_to_next_item()
            return None
        struct = self._at(StructDefinition(Identifier(self.cur_token.literal)), token)
        if not self.expect_peek(LBRACE):
            self.recover_to_next_item()
            return struct

        self.next_token()
        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            member_token = self.cur_token
            type_name = self.parse_type_name()
            if type_name is None or not self.expect_peek(IDENT):
                self.recover_to_next_statement()
            else:
                struct.members.append(self._at(Parameter(type_name, Identifier(self.cur_token.literal)), member_token))
                self.expect_peek(SEMICOLON)
            self.next_token()
        return struct

    def parse_enum_definition(self):
        token = self.cur_token
        if not self.expect_peek(IDENT):
            self.recover_to_next_item()
            return None
        enum = self._at(EnumDefinition(Identifier(self.cur_token.literal)), token)
        if not self.expect_peek(LBRACE):
            self.recover_to_next_item()
            return enum
        while not self.peek_token_is(RBRACE) and not self.peek_token_is(EOF):
            self.next_token()
            if self.cur_token_is(IDENT):
                enum.values.append(Identifier(self.cur_token.literal))
            elif not self.cur_token_is(COMMA):
                self._error(f"Unexpected token '{self.cur_token.literal}' in enum '{enum.name}'")
        self.expect_peek(RBRACE)
        return enum

    def parse_using_directive(self):
        """using SafeMath for uint256;"""
        token = self.cur_token
        literals = self._collect_until(SEMICOLON)[1:]
        if "for" in literals:
            split = literals.index("for")
            library, target = " ".join(literals[:split]), " ".join(literals[split + 1:])
        else:
            library, target = " ".join(literals), None
        return self._at(UsingDirective(library, target), token)

    def parse_user_defined_value_type(self):
        """type Price is uint128;"""
        token = self.cur_token
        if not self.expect_peek(IDENT):
            self.recover_to_next_item()
            return None
        name = Identifier(self.cur_token.literal)
        if not self.expect_peek(IS):
            self.recover_to_next_item()
            return None
        self.next_token()
        underlying = self.parse_type_name()
        if underlying is None:
            self.recover_to_next_item()
            return None
        self.expect_peek(SEMICOLON)
        return self._at(UserDefinedValueType(name, underlying), token)

    # === TYPES ===

    def parse_type_name(self):
        """Parse a type name starting at the current token; returns its text."""
        if self.cur_token_is(MAPPING):
            if not self.expect_peek(LPAREN):
                return None
            inner = self._skip_balanced(LPAREN, RPAREN)
            type_name = "mapping(" + " ".join(inner) + ")"
        elif self.cur_token_is(FUNCTION):
            if not self.expect_peek(LPAREN):
                return None
            inner = self._skip_balanced(LPAREN, RPAREN)
            type_name = "function(" + " ".join(inner) + ")"
            while self.peek_token_is(IDENT) and (
                self.peek_token.literal in VISIBILITY or self.peek_token.literal in STATE_MUTABILITY
            ):
                self.next_token()
                type_name += " " + self.cur_token.literal
            if self.peek_token_is(RETURNS):
                self.next_token()
                self.next_token()
                type_name += " returns(" + " ".join(self._skip_balanced(LPAREN, RPAREN)) + ")"
        elif self.cur_token_is(IDENT):
            type_name = self.cur_token.literal
            while self.peek_token_is(DOT):
                self.next_token()
                if not self.expect_peek(IDENT):
                    return None
                type_name += "." + self.cur_token.literal
            if type_name == "address" and self.peek_token_is(IDENT) and self.peek_token.literal == "payable":
                self.next_token()
                type_name += " payable"
        else:
            self._error(f"Expected type name, got '{self.cur_token.literal}'")
            return None

        while self.peek_token_is(LBRACKET):
            self.next_token()
            type_name += "[" + "".join(self._skip_balanced(LBRACKET, RBRACKET)) + "]"
        return type_name

    # === STATEMENTS ===

    def parse_block(self):
        """Parse { ... }; current token is '{', ends on the matching '}'."""
        block = self._at(BlockStatement(), self.cur_token)
        self.next_token()
        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()

        if self.cur_token_is(EOF):
            self._error("Unclosed block (reached EOF)")
        return block

    def parse_statement(self):
        """Parse one statement; ends on its last token (';' or '}')."""
        t = self.cur_token.type
        if t == LBRACE:
            return self.parse_block()
        if t == UNCHECKED:
            return self.parse_unchecked_block()
        if t == IF:
            return self.parse_if_statement()
        if t == FOR:
            return self.parse_for_statement()
        if t == WHILE:
            return self.parse_while_statement()
        if t == DO:
            return self.parse_do_while_statement()
        if t == RETURN:
            return self.parse_return_statement()
        if t == EMIT:
            return self.parse_emit_statement()
        if t == TRY:
            return self.parse_try_statement()
        if t == ASSEMBLY:
            return self.parse_assembly_statement()
        if t == BREAK:
            return self._simple_statement(BreakStatement())
        if t == CONTINUE:
            return self._simple_statement(ContinueStatement())
        if self.cur_token.literal == "revert" and self.peek_token_is(IDENT):
            return self.parse_revert_statement()
        if t == IDENT and self.cur_token.literal == "_" and self.peek_token_is(SEMICOLON):
            return self._simple_statement(PlaceholderStatement())
        if self._looks_like_declaration():
            return self.parse_variable_declaration_statement()
        return self.parse_expression_statement()

    def _simple_statement(self, stmt):
        self._at(stmt, self.cur_token)
        self.expect_peek(SEMICOLON)
        return stmt

    def parse_unchecked_block(self):
        token = self.cur_token
        if not self.expect_peek(LBRACE):
            self.recover_to_next_statement()
            return None
        return self._at(UncheckedBlock(self.parse_block().statements), token)

    def parse_if_statement(self):
        token = self.cur_token
        if not self.expect_peek(LPAREN):
            self.recover_to_next_statement()
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            self.recover_to_next_statement()
            return None

        self.next_token()
        consequence = self.parse_statement()
        alternative = None
        if self.peek_token_is(ELSE):
            self.next_token()
            self.next_token()
            alternative = self.parse_statement()
        return self._at(IfStatement(condition, consequence, alternative), token)

    def parse_for_statement(self):
        token = self.cur_token
        if not self.expect_peek(LPAREN):
            self.recover_to_next_statement()
            return None

        self.next_token()
        init = None
        if not self.cur_token_is(SEMICOLON):
            if self._looks_like_declaration():
                init = self.parse_variable_declaration_statement()
            else:
                init = self.parse_expression_statement()

        self.next_token()
        condition = None
        if not self.cur_token_is(SEMICOLON):
            condition = self.parse_expression(LOWEST)
            if not self.expect_peek(SEMICOLON):
                self.recover_to_next_statement()
                return None

        self.next_token()
        update = None
        if not self.cur_token_is(RPAREN):
            update = self.parse_expression(LOWEST)
            if not self.expect_peek(RPAREN):
                self.recover_to_next_statement()
                return None

        self.next_token()
        body = self.parse_statement()
        return self._at(ForStatement(init, condition, update, body), token)

    def parse_while_statement(self):
        token = self.cur_token
        if not self.expect_peek(LPAREN):
            self.recover_to_next_statement()
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            self.recover_to_next_statement()
            return None
        self.next_token()
        body = self.parse_statement()
        return self._at(WhileStatement(condition, body), token)

    def parse_do_while_statement(self):
        token = self.cur_token
        self.next_token()
        body = self.parse_statement()
        if not self.expect_peek(WHILE) or not self.expect_peek(LPAREN):
            self.recover_to_next_statement()
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(RPAREN):
            self.recover_to_next_statement()
            return None
        self.expect_peek(SEMICOLON)
        return self._at(DoWhileStatement(body, condition), token)

    def parse_return_statement(self):
        stmt = self._at(ReturnStatement(), self.cur_token)
        if self.peek_token_is(SEMICOLON):
            self.next_token()
            return stmt
        self.next_token()
        stmt.return_value = self.parse_expression(LOWEST)
        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_statement()
        return stmt

    def parse_emit_statement(self):
        token = self.cur_token
        self.next_token()
        event_call = self.parse_expression(LOWEST)
        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_statement()
        return self._at(EmitStatement(event_call), token)

    def parse_revert_statement(self):
        token = self.cur_token
        self.next_token()
        error_call = self.parse_expression(LOWEST)
        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_statement()
        return self._at(RevertStatement(error_call), token)

    def parse_try_statement(self):
        """try target.f() returns (uint v) { ... } catch Error(string memory r) { ... }"""
        token = self.cur_token
        self.next_token()
        expression = self.parse_expression(LOWEST)
        if self.peek_token_is(RETURNS):
            self.next_token()
            if self.expect_peek(LPAREN):
                self.parse_parameter_list()
        if not self.expect_peek(LBRACE):
            self.recover_to_next_statement()
            return None
        stmt = self._at(TryStatement(expression, self.parse_block()), token)

        while self.peek_token_is(CATCH):
            self.next_token()
            if self.peek_token.type in (IDENT, ERROR):
                self.next_token()
            if self.peek_token_is(LPAREN):
                self.next_token()
                self.parse_parameter_list()
            if not self.expect_peek(LBRACE):
                self.recover_to_next_statement()
                return stmt
            stmt.catch_clauses.append(self.parse_block())
        return stmt

    def parse_assembly_statement(self):
        token = self.cur_token
        if self.peek_token_is(STRING):
            self.next_token()
        if self.peek_token_is(LPAREN):
            self.next_token()
            self._skip_balanced(LPAREN, RPAREN)
        if not self.expect_peek(LBRACE):
            self.recover_to_next_statement()
            return None
        self._skip_balanced(LBRACE, RBRACE)
        return self._at(AssemblyStatement(), token)

    def parse_variable_declaration_statement(self):
        token = self.cur_token
        if self.cur_token_is(LPAREN):
            declarations = self._parse_declaration_tuple()
            if declarations is None:
                self.recover_to_next_statement()
                return None
            if not self.expect_peek(ASSIGN):
                self.recover_to_next_statement()
                return None
            self.next_token()
            initial_value = self.parse_expression(LOWEST)
        else:
            declaration = self._parse_local_declaration()
            if declaration is None:
                self.recover_to_next_statement()
                return None
            declarations = [declaration]
            initial_value = None
            if self.peek_token_is(ASSIGN):
                self.next_token()
                self.next_token()
                initial_value = self.parse_expression(LOWEST)

        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_statement()
        return self._at(VariableDeclarationStatement(declarations, initial_value), token)

    def _parse_local_declaration(self):
        token = self.cur_token
        type_name = self.parse_type_name()
        if type_name is None:
            return None
        location = None
        if self.peek_token_is(IDENT) and self.peek_token.literal in DATA_LOCATIONS:
            self.next_token()
            location = self.cur_token.literal
        if not self.expect_peek(IDENT):
            return None
        decl = self._at(VariableDeclaration(type_name, Identifier(self.cur_token.literal)), token)
        decl.mutability = location
        return decl

    def _parse_declaration_tuple(self):
        """(uint a, , bool ok): current token is '('"""
        declarations = []
        self.next_token()
        while True:
            if self.cur_token_is(COMMA):
                declarations.append(None)
                self.next_token()
                continue
            if self.cur_token_is(RPAREN):
                declarations.append(None)
                return declarations
            decl = self._parse_local_declaration()
            if decl is None:
                return None
            declarations.append(decl)
            if self.peek_token_is(COMMA):
                self.next_token()
                self.next_token()
                continue
            if not self.expect_peek(RPAREN):
                return None
            return declarations

    def parse_expression_statement(self):
        token = self.cur_token
        expression = self.parse_expression(LOWEST)
        if expression is None:
            self.recover_to_next_statement()
            return None
        if not self.expect_peek(SEMICOLON):
            self.recover_to_next_statement()
        return self._at(ExpressionStatement(expression), token)

    # === EXPRESSIONS ===

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self._error(f"Unexpected token '{self.cur_token.literal}'")
            return None

        left_exp = prefix()
        if left_exp is None:
            return None

        while not self.peek_token_is(SEMICOLON) and precedence < self.peek_precedence():
            if self.peek_token_is(LBRACE) and not self._starts_call_options(left_exp):
                return left_exp

            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left_exp

            self.next_token()
            left_exp = infix(left_exp)
            if left_exp is None:
                return None

        return left_exp

    def parse_identifier(self):
        literal = self.cur_token.literal
        if is_elementary_type(literal):
            node = ElementaryTypeExpression(literal)
            if literal == "address" and self.peek_token_is(IDENT) and self.peek_token.literal == "payable":
                self.next_token()
                node.type_name = "address payable"
            return self._at(node, self.cur_token)
        return self._at(Identifier(literal), self.cur_token)

    def parse_number_literal(self):
        token = self.cur_token
        literal = token.literal.replace("_", "")
        unit = None
        if self.peek_token_is(IDENT) and self.peek_token.literal in NUMBER_UNITS:
            self.next_token()
            unit = self.cur_token.literal

        if token.type == HEX_NUMBER:
            return self._at(IntegerLiteral(int(literal, 16), unit), token)
        try:
            return self._at(IntegerLiteral(int(literal), unit), token)
        except ValueError:
            return self._at(NumberLiteral(literal, unit), token)

    def parse_string_literal(self):
        token = self.cur_token
        value = token.literal
        while self.peek_token.type in (STRING, HEX_STRING):
            self.next_token()
            value += self.cur_token.literal
        return self._at(StringLiteral(value), token)

    def parse_boolean(self):
        return self._at(BooleanLiteral(self.cur_token_is(TRUE)), self.cur_token)

    def parse_grouped_expression(self):
        """(expr) yields expr itself; (a, b) and (, b) yield a TupleExpression."""
        token = self.cur_token
        if self.peek_token_is(RPAREN):
            self.next_token()
            return self._at(TupleExpression([]), token)

        elements = []
        self.next_token()
        while True:
            if self.cur_token_is(COMMA):
                elements.append(None)
                self.next_token()
                continue
            if self.cur_token_is(RPAREN):
                elements.append(None)
                break
            element = self.parse_expression(LOWEST)
            if element is None:
                return None
            elements.append(element)
            if self.peek_token_is(COMMA):
                self.next_token()
                self.next_token()
                continue
            if not self.expect_peek(RPAREN):
                return None
            break

        if len(elements) == 1:
            return elements[0]
        return self._at(TupleExpression(elements), token)

    def parse_inline_array(self):
        token = self.cur_token
        elements = self.parse_expression_list(RBRACKET)
        return self._at(TupleExpression(elements, is_array=True), token)

    def parse_prefix_expression(self):
        token = self.cur_token
        operator = self.cur_token.literal
        self.next_token()
        right = self.parse_expression(PREFIX)
        if right is None:
            return None
        return self._at(PrefixExpression(operator, right), token)

    def parse_new_expression(self):
        token = self.cur_token
        self.next_token()
        type_name = self.parse_type_name()
        if type_name is None:
            return None
        return self._at(NewExpression(type_name), token)

    def parse_infix_expression(self, left):
        token = self.cur_token
        operator = BinOpKind(self.cur_token.literal)
        precedence = self.cur_precedence()
        if self.cur_token.type in _RIGHT_ASSOCIATIVE:
            precedence -= 1
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return self._at(InfixExpression(left, operator, right), token, left)

    def parse_assignment_expression(self, left):
        token = self.cur_token
        operator = self.cur_token.literal
        self.next_token()
        value = self.parse_expression(ASSIGN_PREC - 1)
        if value is None:
            return None
        return self._at(AssignmentExpression(left, operator, value), token, left)

    def parse_conditional_expression(self, condition):
        token = self.cur_token
        self.next_token()
        true_expression = self.parse_expression(LOWEST)
        if true_expression is None or not self.expect_peek(COLON):
            return None
        self.next_token()
        false_expression = self.parse_expression(CONDITIONAL - 1)
        if false_expression is None:
            return None
        return self._at(ConditionalExpression(condition, true_expression, false_expression), token, condition)

    def parse_postfix_expression(self, left):
        return self._at(PostfixExpression(left, self.cur_token.literal), self.cur_token, left)

    def parse_call_expression(self, function):
        token = self.cur_token
        if self.peek_token_is(LBRACE):
            self.next_token()
            arguments = [value for _, value in self._parse_named_pairs()]
            if not self.expect_peek(RPAREN):
                return None
        else:
            arguments = self.parse_expression_list(RPAREN)

        options = []
        if isinstance(function, FunctionCallOptions):
            options = function.options
            function = function.expression
        return self._at(CallExpression(function, arguments, options), token, function)

    def parse_call_options(self, left):
        token = self.cur_token
        return self._at(FunctionCallOptions(left, self._parse_named_pairs()), token, left)

    def parse_member_access(self, left):
        token = self.cur_token
        self.next_token()
        member = self.cur_token.literal
        if not member or not (member[0].isalpha() or member[0] in "_$"):
            self._error(f"Expected member name after '.', got '{member}'")
            return None
        return self._at(MemberAccess(left, member), token, left)

    def parse_index_expression(self, left):
        token = self.cur_token
        if self.peek_token_is(RBRACKET):
            self.next_token()
            return self._at(IndexExpression(left), token, left)

        self.next_token()
        index = None
        if not self.cur_token_is(COLON):
            index = self.parse_expression(LOWEST)
            if index is None:
                return None
            if self.peek_token_is(COLON):
                self.next_token()
        if self.cur_token_is(COLON) and not self.peek_token_is(RBRACKET):
            # slice end: arr[start:end]
            self.next_token()
            self.parse_expression(LOWEST)
        if not self.expect_peek(RBRACKET):
            return None
        return self._at(IndexExpression(left, index), token, left)

    def parse_expression_list(self, end):
        elements = []
        if self.peek_token_is(end):
            self.next_token()
            return elements

        self.next_token()
        elements.append(self.parse_expression(LOWEST))

        while self.peek_token_is(COMMA):
            self.next_token()
            self.next_token()
            elements.append(self.parse_expression(LOWEST))

        self.expect_peek(end)
        return [e for e in elements if e is not None]

    def _parse_named_pairs(self):
        """{name: expr, ...}: current token is '{', ends on '}'."""
        pairs = []
        while not self.peek_token_is(RBRACE) and not self.peek_token_is(EOF):
            if not self.expect_peek(IDENT):
                break
            key = self.cur_token.literal
            if not self.expect_peek(COLON):
                break
            self.next_token()
            value = self.parse_expression(LOWEST)
            if value is not None:
                pairs.append((key, value))
            if self.peek_token_is(COMMA):
                self.next_token()
        self.expect_peek(RBRACE)
        return pairs

    def _starts_call_options(self, left):
        """``x.call{value: v}`` versus a block that follows an expression."""
        if not isinstance(left, (Identifier, MemberAccess)):
            return False
        return self._token_at(self.pos + 2).type == IDENT and self._token_at(self.pos + 3).type == COLON

    # === LOOKAHEAD ===

    def _looks_like_declaration(self):
        """Decide between ``T name ...;`` and an expression statement."""
        i = self.pos
        tok = self._token_at(i)
        if tok.type in (MAPPING, FUNCTION):
            return True
        if tok.type == LPAREN:
            return self._looks_like_tuple_declaration(i)
        if tok.type != IDENT:
            return False

        i += 1
        while self._token_at(i).type == DOT and self._token_at(i + 1).type == IDENT:
            i += 2
        if self._token_at(i).type == IDENT and self._token_at(i).literal == "payable":
            i += 1
        while self._token_at(i).type == LBRACKET:
            closing = self._matching_index(i, LBRACKET, RBRACKET)
            if closing is None:
                return False
            i = closing + 1
        if self._token_at(i).type == IDENT and self._token_at(i).literal in DATA_LOCATIONS:
            i += 1
        return self._token_at(i).type == IDENT and self._token_at(i + 1).type in (ASSIGN, SEMICOLON)

    def _looks_like_tuple_declaration(self, start):
        closing = self._matching_index(start, LPAREN, RPAREN)
        if closing is None or self._token_at(closing + 1).type != ASSIGN:
            return False

        segment = []
        depth = 0
        for tok in self.tokens[start + 1:closing + 1]:
            if tok.type in (LPAREN, LBRACKET):
                depth += 1
            elif tok.type in (RPAREN, RBRACKET) and depth > 0:
                depth -= 1
            elif depth == 0 and tok.type in (COMMA, RPAREN):
                if len(segment) >= 2 and segment[-1].type == IDENT and segment[-2].type in (IDENT, RBRACKET):
                    return True
                segment = []
                continue
            segment.append(tok)
        return False

    def _matching_index(self, start, open_type, close_type):
        depth = 0
        for i in range(start, len(self.tokens)):
            t = self.tokens[i].type
            if t == open_type:
                depth += 1
            elif t == close_type:
                depth -= 1
                if depth == 0:
                    return i
        return None

    # === RECOVERY ===

    def recover_to_next_statement(self):
        """Skip to the end of the current statement without eating a closing '}'."""
        depth = 0
        while not self.cur_token_is(EOF):
            if self.cur_token_is(LBRACE):
                depth += 1
            elif self.cur_token_is(RBRACE):
                depth -= 1
                if depth <= 0:
                    return
            elif self.cur_token_is(SEMICOLON) and depth == 0:
                return
            if depth == 0 and self.peek_token.type in (RBRACE, EOF):
                return
            self.next_token()

    def recover_to_next_item(self):
        self.recover_to_next_statement()

    def _skip_balanced(self, open_type, close_type):
        """Consume from the current opener to its closer; returns inner literals."""
        literals = []
        depth = 0
        while not self.cur_token_is(EOF):
            if self.cur_token_is(open_type):
                depth += 1
                if depth > 1:
                    literals.append(self.cur_token.literal)
            elif self.cur_token_is(close_type):
                depth -= 1
                if depth == 0:
                    return literals
                literals.append(self.cur_token.literal)
            else:
                literals.append(self.cur_token.literal)
            self.next_token()
        self._error(f"Expected closing '{close_type}' (reached EOF)")
        return literals

    def _skip_to_closing_paren(self):
        while not self.cur_token_is(RPAREN) and not self.cur_token_is(EOF):
            self.next_token()

    def _collect_until(self, end):
        """Consume tokens up to and including ``end``; returns their literals."""
        collected = []
        while not self.cur_token_is(end) and not self.cur_token_is(EOF):
            collected.append(self.cur_token)
            self.next_token()
        if self.cur_token_is(EOF):
            self._error(f"Expected '{end}' (reached EOF)")
        self._last_collected = collected
        return [t.literal for t in collected]

    # === TOKEN UTILITIES ===

    def next_token(self):
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self._sync()

    def _sync(self):
        self.cur_token = self._token_at(self.pos)
        self.peek_token = self._token_at(self.pos + 1)

    def _token_at(self, index):
        if index < len(self.tokens):
            return self.tokens[index]
        return self.tokens[-1]

    def cur_token_is(self, t):
        return self.cur_token.type == t

    def peek_token_is(self, t):
        return self.peek_token.type == t

    def expect_peek(self, t):
        if self.peek_token_is(t):
            self.next_token()
            return True
        self._error(f"Expected next token to be {t}, got '{self.peek_token.literal or self.peek_token.type}' instead",
                    self.peek_token)
        return False

    def peek_precedence(self):
        return precedences.get(self.peek_token.type, LOWEST)

    def cur_precedence(self):
        return precedences.get(self.cur_token.type, LOWEST)

    def _error(self, message, token=None):
        token = token or self.cur_token
        self.errors.append(f"Line {token.line}:{token.column} - {message}")

    @staticmethod
    def _at(node, token, first=None):
        """Stamp a node with the line of ``first`` (if it has one) or ``token``."""
        line = getattr(first, "line", None) if first is not None else None
        node.line = line if line is not None else token.line
        return node


def parse_source(source_code, filename="<stdin>"):
    """Lex and parse ``source_code``; returns ``(source_unit, errors)``."""
    parser = Parser(Lexer(source_code, filename))
    unit = parser.parse_source_unit()
    return unit, parser.errors
