"""Parser tests: contract structure, statements and operator grouping."""

from sollint.parser.parser import parse_source
from sollint.sol_ast import (
    AssignmentExpression, BinOpKind, BlockStatement, CallExpression,
    ExpressionStatement, Identifier, IfStatement, InfixExpression,
    IntegerLiteral, MemberAccess, PlaceholderStatement, RevertStatement,
    UncheckedBlock, UserDefinedValueType, VariableDeclarationStatement,
)


def _body(parse, statements):
    unit = parse("contract C { function f() public { %s } }" % statements)
    return unit.contracts[0].functions[0].body


def _expr(parse, expression):
    stmt = _body(parse, expression + ";")[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


class TestContractStructure:

    def test_counter_contract(self, parse):
        unit = parse("""
            pragma solidity ^0.8.0;

            contract Counter {
                uint256 public count;
                function increment() public { count; }
            }
        """)
        assert len(unit.contracts) == 1
        contract = unit.contracts[0]
        assert contract.name == Identifier("Counter")
        assert contract.kind == "contract"

        var = contract.variables[0]
        assert var.name == Identifier("count")
        assert var.type_name == "uint256"
        assert var.visibility == "public"
        assert var.line == 5

        fn = contract.functions[0]
        assert fn.name == Identifier("increment")
        assert fn.header.visibility == "public"
        assert isinstance(fn.body[0], ExpressionStatement)
        assert fn.body[0].expression == Identifier("count")

    def test_inheritance_and_mapping(self, parse):
        unit = parse("""
            contract Token is ERC20, Ownable(msg.sender) {
                mapping(address => uint256) private balances;
                address payable owner = payable(msg.sender);
            }
        """)
        contract = unit.contracts[0]
        assert contract.bases == [Identifier("ERC20"), Identifier("Ownable")]
        assert contract.variables[0].type_name == "mapping(address => uint256)"
        assert contract.variables[0].visibility == "private"
        assert contract.variables[1].type_name == "address payable"
        assert isinstance(contract.variables[1].initial_value, CallExpression)

    def test_interface_functions_have_no_body(self, parse):
        unit = parse("interface IERC20 { function totalSupply() external view returns (uint256); }")
        fn = unit.contracts[0].functions[0]
        assert unit.contracts[0].kind == "interface"
        assert fn.body is None
        assert fn.header.state_mutability == "view"
        assert fn.header.returns[0].type_name == "uint256"

    def test_constructor_modifier_and_receive(self, parse):
        unit = parse("""
            contract Owned {
                address owner;
                constructor() { owner = msg.sender; }
                modifier onlyOwner() { require(msg.sender == owner); _; }
                receive() external payable {}
                function kill() public onlyOwner { selfdestruct(payable(owner)); }
            }
        """)
        kinds = [f.header.kind for f in unit.contracts[0].functions]
        assert kinds == ["constructor", "modifier", "receive", "function"]

        constructor, modifier, receive, kill = unit.contracts[0].functions
        assert constructor.name is None
        assert constructor.display_name == "constructor"
        assert modifier.name == Identifier("onlyOwner")
        assert isinstance(modifier.body[1], PlaceholderStatement)
        assert receive.body == []
        assert kill.header.modifiers[0].name == Identifier("onlyOwner")

    def test_other_items_are_parsed_and_kept_apart(self, parse):
        unit = parse("""
            contract Items {
                using SafeMath for uint256;
                event Transfer(address indexed from, address indexed to, uint256 value);
                error Unauthorized(address caller);
                struct Point { uint x; uint y; }
                enum Status { Active, Paused }
                uint256 total;
            }
        """)
        contract = unit.contracts[0]
        assert len(contract.items) == 6
        assert [v.name for v in contract.variables] == [Identifier("total")]
        assert contract.functions == []

    def test_user_defined_value_types(self, parse):
        unit = parse("""
            type Price is uint128;

            contract Market {
                type Fee is uint16;
                Price last;
                function kill() public { selfdestruct(payable(msg.sender)); }
            }
        """)
        price = unit.items[0]
        assert isinstance(price, UserDefinedValueType)
        assert price.name == Identifier("Price")
        assert price.underlying_type == "uint128"
        assert price.line == 2

        contract = unit.contracts[0]
        fee = contract.items[0]
        assert isinstance(fee, UserDefinedValueType)
        assert fee.name == Identifier("Fee")
        assert fee.underlying_type == "uint16"
        assert [v.name for v in contract.variables] == [Identifier("last")]
        assert contract.variables[0].type_name == "Price"
        assert len(contract.functions) == 1


class TestStatements:

    def test_declaration_versus_expression(self, parse):
        body = _body(parse, "uint x = 1; x; string memory s = 'a';")
        assert isinstance(body[0], VariableDeclarationStatement)
        assert body[0].declarations[0].name == Identifier("x")
        assert isinstance(body[1], ExpressionStatement)
        assert isinstance(body[2], VariableDeclarationStatement)
        assert body[2].declarations[0].mutability == "memory"

    def test_tuple_declaration(self, parse):
        body = _body(parse, "(uint a, bool ok) = f();")
        stmt = body[0]
        assert isinstance(stmt, VariableDeclarationStatement)
        assert [d.name for d in stmt.declarations] == [Identifier("a"), Identifier("ok")]
        assert isinstance(stmt.initial_value, CallExpression)

    def test_if_else_and_blocks(self, parse):
        body = _body(parse, "if (x) { a; } else b; { c; }")
        stmt = body[0]
        assert isinstance(stmt, IfStatement)
        assert isinstance(stmt.consequence, BlockStatement)
        assert isinstance(stmt.alternative, ExpressionStatement)
        assert isinstance(body[1], BlockStatement)
        assert body[1].statements[0].expression == Identifier("c")

    def test_unchecked_block(self, parse):
        body = _body(parse, "unchecked { i++; }")
        assert isinstance(body[0], UncheckedBlock)
        assert len(body[0].statements) == 1

    def test_loops_try_and_assembly(self, parse):
        body = _body(parse, """
            for (uint i = 0; i < n; i++) { total += i; }
            while (x > 0) x--;
            do { y; } while (y < 3);
            try target.run() returns (uint v) { v; } catch Error(string memory reason) { reason; } catch { }
            assembly { let z := add(1, 2) }
        """)
        names = [type(s).__name__ for s in body]
        assert names == ["ForStatement", "WhileStatement", "DoWhileStatement", "TryStatement", "AssemblyStatement"]
        assert len(body[3].catch_clauses) == 2

    def test_revert_with_custom_error(self, parse):
        body = _body(parse, "if (x) revert Unauthorized(msg.sender); revert('no');")
        assert isinstance(body[0].consequence, RevertStatement)
        assert isinstance(body[1], ExpressionStatement)
        assert body[1].expression.callee_name == "revert"


class TestExpressions:

    def test_parenthesised_multiplication_is_right_operand(self, parse):
        expr = _expr(parse, "a / (b * c)")
        assert isinstance(expr, InfixExpression)
        assert expr.operator == BinOpKind.DIV
        assert isinstance(expr.right, InfixExpression)
        assert expr.right.operator == BinOpKind.MUL

    def test_same_precedence_groups_left(self, parse):
        expr = _expr(parse, "a / b * c")
        assert expr.operator == BinOpKind.MUL
        assert expr.left.operator == BinOpKind.DIV
        assert expr.right == Identifier("c")

    def test_multiplicative_binds_tighter_than_additive(self, parse):
        expr = _expr(parse, "a + b * c")
        assert expr.operator == BinOpKind.ADD
        assert expr.right.operator == BinOpKind.MUL

    def test_exponent_groups_right(self, parse):
        expr = _expr(parse, "a ** b ** c")
        assert expr.operator == BinOpKind.POW
        assert expr.right.operator == BinOpKind.POW

    def test_assignment_groups_right(self, parse):
        expr = _expr(parse, "x = y = 1")
        assert isinstance(expr, AssignmentExpression)
        assert isinstance(expr.value, AssignmentExpression)

    def test_call_with_options(self, parse):
        expr = _expr(parse, 'recipient.call{value: 1 ether}("")')
        assert isinstance(expr, CallExpression)
        assert isinstance(expr.function, MemberAccess)
        assert expr.function.member == "call"
        assert expr.options[0][0] == "value"
        assert isinstance(expr.options[0][1], IntegerLiteral)
        assert expr.options[0][1].unit == "ether"

    def test_callee_name(self, parse):
        assert _expr(parse, "require(ok, 'nope')").callee_name == "require"
        assert _expr(parse, "owner.transfer(1)").callee_name is None


class TestParseErrors:

    def test_errors_are_collected(self):
        unit, errors = parse_source("contract A { function f() public { uint x = ; } }")
        assert errors
        assert errors[0].startswith("Line 1:")
        assert unit.contracts[0].name == Identifier("A")

    def test_unclosed_contract(self):
        _, errors = parse_source("contract A { uint x;")
        assert any("Unclosed contract" in e for e in errors)

    def test_error_context_names_file_level(self):
        _, errors = parse_source("+ contract A {}")
        assert errors[0] == "Line 1:1 - Unexpected token '+' at file level"

        _, errors = parse_source("contract A { + }")
        assert errors[0] == "Line 1:14 - Unexpected token '+' in contract body"
