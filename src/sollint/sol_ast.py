# src/sollint/sol_ast.py
from enum import Enum


class BinOpKind(str, Enum):
    """Binary operator kinds. Values are the Solidity spellings."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    AND = "&&"
    OR = "||"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    SHL = "<<"
    SAR = ">>"

    def __str__(self):
        return self.value


# Base classes
class Node:
    line = None

    def children(self):
        """Direct child nodes, in source order."""
        return []

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __str__(self):
        return self.__repr__()


class Statement(Node): pass
class Expression(Node): pass


def _nodes(*values):
    """Flatten node attributes (single nodes, lists, None) into a child list."""
    result = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            result.extend(v for v in value if isinstance(v, Node))
        elif isinstance(value, Node):
            result.append(value)
    return result


# Source unit & top-level items
class SourceUnit(Node):
    def __init__(self, items=None):
        self.items = items or []

    @property
    def contracts(self):
        return [item for item in self.items if isinstance(item, ContractDefinition)]

    def children(self):
        return _nodes(self.items)

    def __repr__(self):
        return f"SourceUnit(items={len(self.items)})"


class PragmaDirective(Node):
    def __init__(self, text):
        self.text = text

    def __repr__(self):
        return f"PragmaDirective({self.text!r})"


class ImportDirective(Node):
    def __init__(self, path):
        self.path = path

    def __repr__(self):
        return f"ImportDirective({self.path!r})"


class ContractDefinition(Node):
    """contract / interface / library / abstract contract

    contract Counter is Ownable {
        uint256 public count;
        function increment() public { ... }
    }
    """
    def __init__(self, name, kind="contract", bases=None, items=None):
        self.name = name
        self.kind = kind
        self.bases = bases or []
        self.items = items or []

    @property
    def variables(self):
        return [item for item in self.items if isinstance(item, VariableDeclaration)]

    @property
    def functions(self):
        return [item for item in self.items if isinstance(item, FunctionDefinition)]

    def children(self):
        return _nodes(self.items)

    def __repr__(self):
        return f"ContractDefinition(name={self.name}, kind={self.kind}, items={len(self.items)})"


# Contract items
class VariableDeclaration(Node):
    """State variable. ``name`` may be None for partial trees."""
    def __init__(self, type_name, name, visibility=None, mutability=None, initial_value=None):
        self.type_name = type_name
        self.name = name
        self.visibility = visibility
        self.mutability = mutability
        self.initial_value = initial_value

    def children(self):
        return _nodes(self.initial_value)

    def __repr__(self):
        return f"VariableDeclaration(type={self.type_name}, name={self.name})"


class Parameter(Node):
    def __init__(self, type_name, name=None, location=None):
        self.type_name = type_name
        self.name = name
        self.location = location

    def __repr__(self):
        return f"Parameter(type={self.type_name}, name={self.name})"


class ModifierInvocation(Node):
    def __init__(self, name, arguments=None):
        self.name = name
        self.arguments = arguments or []

    def children(self):
        return _nodes(self.arguments)

    def __repr__(self):
        return f"ModifierInvocation(name={self.name})"


class FunctionHeader(Node):
    def __init__(self, name=None, kind="function", parameters=None, visibility=None,
                 state_mutability=None, modifiers=None, returns=None, is_virtual=False,
                 overrides=False):
        self.name = name
        self.kind = kind
        self.parameters = parameters or []
        self.visibility = visibility
        self.state_mutability = state_mutability
        self.modifiers = modifiers or []
        self.returns = returns or []
        self.is_virtual = is_virtual
        self.overrides = overrides

    def children(self):
        return _nodes(self.parameters, self.modifiers, self.returns)

    def __repr__(self):
        return f"FunctionHeader(name={self.name}, kind={self.kind})"


class FunctionDefinition(Node):
    """function / constructor / fallback / receive / modifier.

    ``body`` is None for declarations without an implementation.
    """
    def __init__(self, header, body=None):
        self.header = header
        self.body = body

    @property
    def name(self):
        return self.header.name

    @property
    def display_name(self):
        if self.header.name is not None:
            return str(self.header.name)
        return self.header.kind

    def children(self):
        return _nodes(self.header, self.body)

    def __repr__(self):
        body = "None" if self.body is None else len(self.body)
        return f"FunctionDefinition(name={self.display_name}, body={body})"


class EventDefinition(Node):
    def __init__(self, name, parameters=None):
        self.name = name
        self.parameters = parameters or []

    def __repr__(self):
        return f"EventDefinition(name={self.name})"


class ErrorDefinition(Node):
    def __init__(self, name, parameters=None):
        self.name = name
        self.parameters = parameters or []

    def __repr__(self):
        return f"ErrorDefinition(name={self.name})"


class StructDefinition(Node):
    def __init__(self, name, members=None):
        self.name = name
        self.members = members or []

    def __repr__(self):
        return f"StructDefinition(name={self.name}, members={len(self.members)})"


class EnumDefinition(Node):
    def __init__(self, name, values=None):
        self.name = name
        self.values = values or []

    def __repr__(self):
        return f"EnumDefinition(name={self.name}, values={len(self.values)})"


class UserDefinedValueType(Node):
    def __init__(self, name, underlying_type):
        self.name = name
        self.underlying_type = underlying_type

    def __repr__(self):
        return f"UserDefinedValueType(name={self.name}, underlying_type={self.underlying_type})"


class UsingDirective(Node):
    def __init__(self, library, target=None):
        self.library = library
        self.target = target

    def __repr__(self):
        return f"UsingDirective(library={self.library}, target={self.target})"


# Statement nodes
class ExpressionStatement(Statement):
    def __init__(self, expression):
        self.expression = expression

    def children(self):
        return _nodes(self.expression)

    def __repr__(self):
        return f"ExpressionStatement(expression={self.expression})"


class BlockStatement(Statement):
    def __init__(self, statements=None):
        self.statements = statements or []

    def children(self):
        return _nodes(self.statements)

    def __repr__(self):
        return f"BlockStatement(statements={len(self.statements)})"


class UncheckedBlock(BlockStatement):
    def __repr__(self):
        return f"UncheckedBlock(statements={len(self.statements)})"


class IfStatement(Statement):
    def __init__(self, condition, consequence, alternative=None):
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def children(self):
        return _nodes(self.condition, self.consequence, self.alternative)

    def __repr__(self):
        return f"IfStatement(condition={self.condition})"


class ForStatement(Statement):
    def __init__(self, init, condition, update, body):
        self.init = init
        self.condition = condition
        self.update = update
        self.body = body

    def children(self):
        return _nodes(self.init, self.condition, self.update, self.body)

    def __repr__(self):
        return f"ForStatement(condition={self.condition})"


class WhileStatement(Statement):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body

    def children(self):
        return _nodes(self.condition, self.body)

    def __repr__(self):
        return f"WhileStatement(condition={self.condition})"


class DoWhileStatement(Statement):
    def __init__(self, body, condition):
        self.body = body
        self.condition = condition

    def children(self):
        return _nodes(self.body, self.condition)

    def __repr__(self):
        return f"DoWhileStatement(condition={self.condition})"


class ReturnStatement(Statement):
    def __init__(self, return_value=None):
        self.return_value = return_value

    def children(self):
        return _nodes(self.return_value)

    def __repr__(self):
        return f"ReturnStatement(return_value={self.return_value})"


class VariableDeclarationStatement(Statement):
    """uint256 x = 1;  /  (uint a, bool ok) = f();"""
    def __init__(self, declarations, initial_value=None):
        self.declarations = declarations
        self.initial_value = initial_value

    def children(self):
        return _nodes(self.declarations, self.initial_value)

    def __repr__(self):
        names = [str(d.name) if d is not None else "_" for d in self.declarations]
        return f"VariableDeclarationStatement(names={names})"


class EmitStatement(Statement):
    def __init__(self, event_call):
        self.event_call = event_call

    def children(self):
        return _nodes(self.event_call)

    def __repr__(self):
        return f"EmitStatement(event_call={self.event_call})"


class RevertStatement(Statement):
    """revert CustomError(args);"""
    def __init__(self, error_call):
        self.error_call = error_call

    def children(self):
        return _nodes(self.error_call)

    def __repr__(self):
        return f"RevertStatement(error_call={self.error_call})"


class BreakStatement(Statement):
    def __repr__(self):
        return "BreakStatement()"


class ContinueStatement(Statement):
    def __repr__(self):
        return "ContinueStatement()"


class PlaceholderStatement(Statement):
    """The ``_;`` inside a modifier body."""
    def __repr__(self):
        return "PlaceholderStatement()"


class AssemblyStatement(Statement):
    """Inline assembly; the Yul body is not modelled."""
    def __repr__(self):
        return "AssemblyStatement()"


class TryStatement(Statement):
    def __init__(self, expression, body, catch_clauses=None):
        self.expression = expression
        self.body = body
        self.catch_clauses = catch_clauses or []

    def children(self):
        return _nodes(self.expression, self.body, self.catch_clauses)

    def __repr__(self):
        return f"TryStatement(expression={self.expression}, catches={len(self.catch_clauses)})"


# Expression nodes
class Identifier(Expression):
    """Equality and hashing are by name, so identifiers work as set keys."""
    def __init__(self, value):
        self.value = value

    @property
    def name(self):
        return self.value

    def __eq__(self, other):
        if isinstance(other, Identifier):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"Identifier({self.value})"

    def __str__(self):
        return self.value


class IntegerLiteral(Expression):
    def __init__(self, value, unit=None):
        self.value = value
        self.unit = unit

    def __repr__(self):
        unit = f" {self.unit}" if self.unit else ""
        return f"IntegerLiteral({self.value}{unit})"


class NumberLiteral(Expression):
    """Non-integer numeric literal such as ``1.5 ether`` or ``2e18``."""
    def __init__(self, literal, unit=None):
        self.literal = literal
        self.unit = unit

    def __repr__(self):
        return f"NumberLiteral({self.literal})"


class StringLiteral(Expression):
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"StringLiteral({self.value!r})"


class BooleanLiteral(Expression):
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"BooleanLiteral({self.value})"


class ElementaryTypeExpression(Expression):
    """A type used as a value: ``address(0)``, ``uint256(x)``, ``bytes32``."""
    def __init__(self, type_name):
        self.type_name = type_name

    def __repr__(self):
        return f"ElementaryTypeExpression({self.type_name})"


class CallExpression(Expression):
    def __init__(self, function, arguments=None, options=None):
        self.function = function
        self.arguments = arguments or []
        # ``{value: x, gas: y}`` call options
        self.options = options or []

    @property
    def callee_name(self):
        """Name of a bare identifier callee, else None."""
        if isinstance(self.function, Identifier):
            return self.function.value
        return None

    def children(self):
        return _nodes(self.function, [v for _, v in self.options], self.arguments)

    def __repr__(self):
        return f"CallExpression(function={self.function}, arguments={len(self.arguments)})"


class InfixExpression(Expression):
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def children(self):
        return _nodes(self.left, self.right)

    def __repr__(self):
        return f"InfixExpression({self.left} {self.operator} {self.right})"


class PrefixExpression(Expression):
    def __init__(self, operator, right):
        self.operator = operator
        self.right = right

    def children(self):
        return _nodes(self.right)

    def __repr__(self):
        return f"PrefixExpression({self.operator}{self.right})"


class PostfixExpression(Expression):
    def __init__(self, left, operator):
        self.left = left
        self.operator = operator

    def children(self):
        return _nodes(self.left)

    def __repr__(self):
        return f"PostfixExpression({self.left}{self.operator})"


class AssignmentExpression(Expression):
    def __init__(self, target, operator, value):
        self.target = target
        self.operator = operator
        self.value = value

    def children(self):
        return _nodes(self.target, self.value)

    def __repr__(self):
        return f"AssignmentExpression({self.target} {self.operator} {self.value})"


class MemberAccess(Expression):
    def __init__(self, expression, member):
        self.expression = expression
        self.member = member

    def children(self):
        return _nodes(self.expression)

    def __repr__(self):
        return f"MemberAccess({self.expression}.{self.member})"


class IndexExpression(Expression):
    def __init__(self, base, index=None):
        self.base = base
        self.index = index

    def children(self):
        return _nodes(self.base, self.index)

    def __repr__(self):
        return f"IndexExpression({self.base}[{self.index}])"


class ConditionalExpression(Expression):
    def __init__(self, condition, true_expression, false_expression):
        self.condition = condition
        self.true_expression = true_expression
        self.false_expression = false_expression

    def children(self):
        return _nodes(self.condition, self.true_expression, self.false_expression)

    def __repr__(self):
        return f"ConditionalExpression({self.condition} ? ...)"


class TupleExpression(Expression):
    """``(a, b)`` or ``[a, b]``. Empty slots are None."""
    def __init__(self, elements=None, is_array=False):
        self.elements = elements or []
        self.is_array = is_array

    def children(self):
        return _nodes(self.elements)

    def __repr__(self):
        return f"TupleExpression(elements={len(self.elements)})"


class FunctionCallOptions(Expression):
    """``target.call{value: amount}`` before the argument list is applied."""
    def __init__(self, expression, options=None):
        self.expression = expression
        self.options = options or []

    def children(self):
        return _nodes(self.expression, [v for _, v in self.options])

    def __repr__(self):
        return f"FunctionCallOptions({self.expression}, options={len(self.options)})"


class NewExpression(Expression):
    def __init__(self, type_name):
        self.type_name = type_name

    def __repr__(self):
        return f"NewExpression({self.type_name})"
