"""
Tests for the three rules and the symbol collector they build on.

Each detector is exercised directly against a parsed contract so the
tests stay independent of rule selection and reporting.
"""

import pytest

from sollint.analysis import (
    DivisionBeforeMultiplicationDetector,
    SymbolCollector,
    UnprotectedSelfdestructDetector,
    UnusedVariableDetector,
    unprotected_calls,
    unused_symbols,
)
from sollint.config import LintConfig
from sollint.findings import RuleKind, Severity
from sollint.sol_ast import (
    ContractDefinition, FunctionDefinition, FunctionHeader, Identifier,
    VariableDeclaration,
)


def _contract(parse, source):
    return parse(source).contracts[0]


def _function_body(parse, statements):
    unit = parse("contract C { function f() public { %s } }" % statements)
    return unit.contracts[0].functions[0].body


# ══════════════════════════════════════════════════════════════════════
#  Symbol collection
# ══════════════════════════════════════════════════════════════════════

class TestSymbolCollector:

    def test_declared_in_order_without_duplicates(self, parse):
        contract = _contract(parse, """
            contract C {
                uint b;
                uint a;
                uint b;
            }
        """)
        declared = SymbolCollector().declared(contract)
        assert declared == [Identifier("b"), Identifier("a")]

    def test_unnamed_declaration_is_skipped(self):
        contract = ContractDefinition(Identifier("C"), items=[
            VariableDeclaration("uint256", None),
            VariableDeclaration("uint256", Identifier("x")),
        ])
        assert SymbolCollector().declared(contract) == [Identifier("x")]

    def test_bare_identifier_statement_is_a_use(self, parse):
        contract = _contract(parse, """
            contract C {
                uint a;
                uint b;
                function f() public { a; b + 1; }
            }
        """)
        used = SymbolCollector().used(contract)
        assert used == {Identifier("a")}

    def test_nested_bare_identifier_counts(self, parse):
        contract = _contract(parse, """
            contract C {
                uint a;
                function f(bool ok) public { if (ok) { a; } }
            }
        """)
        assert Identifier("a") in SymbolCollector().used(contract)

    def test_strict_mode_counts_every_reference(self, parse):
        contract = _contract(parse, """
            contract C {
                uint a;
                uint b;
                uint c = a;
                address owner;
                modifier only() { require(msg.sender == owner); _; }
                function f() public only { b = b + 1; }
            }
        """)
        used = SymbolCollector(count_nested_references=True).used(contract)
        assert {Identifier("a"), Identifier("b"), Identifier("owner")} <= used
        assert Identifier("c") not in used

    def test_sets_are_per_contract(self, parse):
        unit = parse("""
            contract A { uint shared; function f() public { shared; } }
            contract B { uint shared; }
        """)
        first, second = unit.contracts
        assert SymbolCollector().collect(first).unused() == []
        assert SymbolCollector().collect(second).unused() == [Identifier("shared")]

    def test_unused_symbols_difference(self):
        declared = [Identifier("x"), Identifier("y"), Identifier("z")]
        assert unused_symbols(declared, {Identifier("y")}) == [Identifier("x"), Identifier("z")]


# ══════════════════════════════════════════════════════════════════════
#  Unused variables
# ══════════════════════════════════════════════════════════════════════

class TestUnusedVariableDetector:

    def test_one_finding_per_unused_name(self, parse):
        contract = _contract(parse, """
            contract Counter {
                uint256 unusedVar;
                uint256 count;
                uint256 other;
                function increment() public { count; }
            }
        """)
        findings = UnusedVariableDetector().detect(contract, LintConfig())

        assert [f.symbol for f in findings] == ["unusedVar", "other"]
        for f in findings:
            assert f.rule == RuleKind.UNUSED_VARIABLE
            assert f.severity == Severity.LOW
            assert f.contract_name == "Counter"
            assert f.function_name == ""
        assert findings[0].line == 3
        assert findings[0].message == "Unused variable in contract 'Counter': 'unusedVar'"

    def test_operand_reference_is_not_a_use_by_default(self, parse):
        contract = _contract(parse, """
            contract C {
                uint a;
                function f() public returns (uint) { return a + 1; }
            }
        """)
        assert len(UnusedVariableDetector().detect(contract, LintConfig())) == 1
        strict = LintConfig(count_nested_references=True)
        assert UnusedVariableDetector().detect(contract, strict) == []

    def test_functions_without_body_contribute_nothing(self, parse):
        contract = _contract(parse, """
            abstract contract C {
                uint a;
                function f() public virtual;
            }
        """)
        findings = UnusedVariableDetector().detect(contract, LintConfig())
        assert [f.symbol for f in findings] == ["a"]


# ══════════════════════════════════════════════════════════════════════
#  Division before multiplication
# ══════════════════════════════════════════════════════════════════════

def _division_findings(parse, statements):
    contract = _contract(parse, "contract C { function calc(uint a, uint b, uint c) public { %s } }" % statements)
    return DivisionBeforeMultiplicationDetector().detect(contract, LintConfig())


class TestDivisionBeforeMultiplication:

    def test_division_by_product_is_flagged(self, parse):
        findings = _division_findings(parse, "a / (b * c);")
        assert len(findings) == 1
        assert findings[0].rule == RuleKind.DIVISION_BEFORE_MULTIPLICATION
        assert findings[0].severity == Severity.MEDIUM
        assert findings[0].function_name == "calc"
        assert findings[0].message == "Unsafe division before multiplication detected."

    @pytest.mark.parametrize("statement", [
        "(a * b) / c;",
        "a / b;",
        "a * b;",
        "a / b * c;",
        "a / (b + c);",
    ])
    def test_other_shapes_are_not_flagged(self, parse, statement):
        assert _division_findings(parse, statement) == []

    def test_only_the_top_level_expression_is_inspected(self, parse):
        assert _division_findings(parse, "uint x = a / (b * c);") == []
        assert _division_findings(parse, "a = a / (b * c);") == []

    def test_nested_statements_are_visited(self, parse):
        findings = _division_findings(parse, """
            if (a > 0) { a / (b * c); }
            for (uint i = 0; i < 2; i++) { unchecked { b / (c * a); } }
        """)
        assert len(findings) == 2

    def test_each_statement_reported_in_source_order(self, parse):
        findings = _division_findings(parse, "a / (b * c);\n b / (a * c);")
        assert len(findings) == 2
        assert findings[0].line < findings[1].line


# ══════════════════════════════════════════════════════════════════════
#  Unprotected selfdestruct
# ══════════════════════════════════════════════════════════════════════

class TestGuardStateMachine:

    def test_guard_before_destruct_protects(self, parse):
        assert unprotected_calls(_function_body(parse, "require(x); selfdestruct(y);")) == []

    def test_guard_after_destruct_does_not_protect(self, parse):
        hits = unprotected_calls(_function_body(parse, "selfdestruct(y); require(x);"))
        assert len(hits) == 1

    def test_destruct_alone(self, parse):
        assert len(unprotected_calls(_function_body(parse, "selfdestruct(y);"))) == 1

    def test_suicide_is_destructive(self, parse):
        assert len(unprotected_calls(_function_body(parse, "suicide(y);"))) == 1

    def test_first_hit_stops_the_scan(self, parse):
        body = _function_body(parse, "suicide(y); selfdestruct(z);")
        hits = unprotected_calls(body)
        assert len(hits) == 1
        assert hits[0].expression.callee_name == "suicide"

    def test_report_all_continues_scanning(self, parse):
        body = _function_body(parse, "suicide(y); selfdestruct(z);")
        hits = unprotected_calls(body, report_all=True)
        assert [h.expression.callee_name for h in hits] == ["suicide", "selfdestruct"]

    def test_require_then_two_destructive_calls(self, parse):
        body = _function_body(parse, "require(x); suicide(y); selfdestruct(z);")
        assert unprotected_calls(body) == []

    def test_member_call_is_not_a_guard(self, parse):
        body = _function_body(parse, "checker.require(x); selfdestruct(y);")
        assert len(unprotected_calls(body)) == 1

    def test_guard_in_plain_block_protects_later_statements(self, parse):
        body = _function_body(parse, "{ require(x); } selfdestruct(y);")
        assert unprotected_calls(body) == []

    def test_guard_in_branch_does_not_leak(self, parse):
        body = _function_body(parse, "if (a) { require(x); } selfdestruct(y);")
        assert len(unprotected_calls(body)) == 1

    def test_guard_in_branch_protects_rest_of_branch(self, parse):
        body = _function_body(parse, "if (a) { require(x); selfdestruct(y); }")
        assert unprotected_calls(body) == []

    def test_destruct_in_nested_body_is_found(self, parse):
        body = _function_body(parse, "while (a) { if (b) { selfdestruct(y); } }")
        assert len(unprotected_calls(body)) == 1

    def test_guard_before_branch_protects_branch(self, parse):
        body = _function_body(parse, "require(x); if (a) selfdestruct(y);")
        assert unprotected_calls(body) == []

    def test_custom_guard_names(self, parse):
        body = _function_body(parse, "_checkOwner(); selfdestruct(y);")
        assert len(unprotected_calls(body)) == 1
        assert unprotected_calls(body, guards=("_checkOwner",)) == []


class TestUnprotectedSelfdestructDetector:

    def test_kill_function(self, parse):
        contract = _contract(parse, """
            contract SelfDestruct {
                address payable owner;
                function kill() public { selfdestruct(owner); }
            }
        """)
        findings = UnprotectedSelfdestructDetector().detect(contract, LintConfig())

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule == RuleKind.UNPROTECTED_SELFDESTRUCT
        assert finding.severity == Severity.HIGH
        assert finding.function_name == "kill"
        assert finding.symbol == "selfdestruct"
        assert finding.message == "Unprotected `selfdestruct` call in function 'kill'"

    def test_guard_state_resets_per_function(self, parse):
        contract = _contract(parse, """
            contract C {
                function a() public { require(msg.sender == owner); selfdestruct(owner); }
                function b() public { selfdestruct(owner); }
            }
        """)
        findings = UnprotectedSelfdestructDetector().detect(contract, LintConfig())
        assert [f.function_name for f in findings] == ["b"]

    def test_unnamed_functions_use_their_kind(self, parse):
        contract = _contract(parse, """
            contract C {
                fallback() external { selfdestruct(payable(msg.sender)); }
            }
        """)
        findings = UnprotectedSelfdestructDetector().detect(contract, LintConfig())
        assert findings[0].function_name == "fallback"

    def test_modifier_access_control_is_not_recognized(self, parse):
        contract = _contract(parse, """
            contract C {
                function kill() public onlyOwner { selfdestruct(owner); }
            }
        """)
        assert len(UnprotectedSelfdestructDetector().detect(contract, LintConfig())) == 1

    def test_configured_destructive_functions(self, parse):
        contract = _contract(parse, "contract C { function f() public { destroy(); } }")
        assert UnprotectedSelfdestructDetector().detect(contract, LintConfig()) == []
        config = LintConfig(destructive_functions=("destroy",))
        findings = UnprotectedSelfdestructDetector().detect(contract, config)
        assert findings[0].symbol == "destroy"

    def test_empty_body(self):
        contract = ContractDefinition(Identifier("Empty"), items=[
            FunctionDefinition(FunctionHeader(name=Identifier("f")), []),
        ])
        assert UnprotectedSelfdestructDetector().detect(contract, LintConfig()) == []
