"""Abstract Syntax Tree (AST) definitions for EspañolScript.

The AST classes defined in this module are the contract between the parser
and the interpreter. The interpreter never sees source text; it receives a
`Program` whose nodes are already syntactically valid. Every node records
the line and column it came from so runtime errors can point back at the
source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Any


@dataclass
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True, compare=False)
    column: int = field(default=0, kw_only=True, compare=False)


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class VarDecl(Node):
    type_name: str
    name: str
    initializer: Optional[Node] = None


@dataclass
class FuncParam(Node):
    type_name: str
    name: str


@dataclass
class FuncDecl(Node):
    name: str
    params: List[FuncParam]
    body: 'Block'


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Node


@dataclass
class ForStmt(Node):
    init: VarDecl
    condition: Node
    update: Node
    body: Node


@dataclass
class ReturnStmt(Node):
    value: Optional[Node] = None


@dataclass
class PrintStmt(Node):
    value: Node


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class LogicalOp(Node):
    op: str  # 'o' or 'y'
    left: Node
    right: Node


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str  # 'no', '-' or '+'
    operand: Node


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'entero', 'decimal', 'cadena', 'booleano'


@dataclass
class Ident(Node):
    name: str


@dataclass
class Call(Node):
    name: str
    args: List[Node]


@dataclass
class ReadExpr(Node):
    pass


NODE_TYPES = {
    cls.__name__: cls
    for cls in (
        Program, VarDecl, FuncParam, FuncDecl, Block, IfStmt, WhileStmt,
        ForStmt, ReturnStmt, PrintStmt, BreakStmt, ContinueStmt, ExprStmt,
        Assign, LogicalOp, BinaryOp, UnaryOp, Literal, Ident, Call, ReadExpr,
    )
}
