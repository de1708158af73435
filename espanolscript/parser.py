"""Parser for EspañolScript.

Source text is fed into a Lark LALR parser configured with the grammar
below, and the resulting parse tree is transformed into the AST defined in
`espanolscript.ast`. The interpreter only ever consumes that AST, so every
syntax or lexical problem is reported here, as a `ParseError` carrying the
line and column of the offending input.

A few points of the grammar are worth knowing:

* Keywords are plain string literals; Lark re-types an identifier whose
  text equals a keyword, so ``enteros`` is still a valid identifier.
* `^` sits between the additive and multiplicative levels and does not
  chain: ``2 * 3 ^ 2`` is ``(2 * 3) ^ 2`` and ``2 ^ 3 ^ 2`` is rejected.
* The dangling ``sino`` binds to the nearest ``si`` (LALR shift).
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, VisitError

from .ast import (
    Program, VarDecl, FuncParam, FuncDecl, Block, IfStmt, WhileStmt, ForStmt,
    ReturnStmt, PrintStmt, BreakStmt, ContinueStmt, ExprStmt, Assign,
    LogicalOp, BinaryOp, UnaryOp, Literal, Ident, Call, ReadExpr,
)
from .errors import ParseError


GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | func_decl
                | statement

    var_decl: type_name IDENT ["=" expression] ";"
    !type_name: "entero" | "largo" | "decimal" | "booleano" | "cadena"

    func_decl: IDENT "(" [parameters] ")" block
    parameters: parameter ("," parameter)*
    parameter: type_name IDENT

    ?statement: if_stmt
              | while_stmt
              | for_stmt
              | return_stmt
              | print_stmt
              | break_stmt
              | continue_stmt
              | block
              | expr_stmt

    if_stmt: "si" "(" expression ")" statement ["sino" statement]
    while_stmt: "mientras" "(" expression ")" statement
    for_stmt: "para" "(" var_decl expression ";" expression ")" statement
    return_stmt: "retornar" [expression] ";"
    print_stmt: "imprimir" expression ";"
    break_stmt: "romper" ";"
    continue_stmt: "continuar" ";"
    block: "{" declaration* "}"
    expr_stmt: expression ";"

    // Expressions, lowest precedence first
    ?expression: assignment

    ?assignment: IDENT "=" assignment -> assign
               | logic_or

    ?logic_or: logic_and
             | logic_or "o" logic_and -> or_op

    ?logic_and: equality
              | logic_and "y" equality -> and_op

    ?equality: relational
             | equality "==" relational -> eq
             | equality "!=" relational -> ne

    ?relational: additive
               | relational "<" additive -> lt
               | relational "<=" additive -> le
               | relational ">" additive -> gt
               | relational ">=" additive -> ge

    ?additive: power
             | additive "+" power -> add
             | additive "-" power -> sub

    ?power: multiplicative
          | multiplicative "^" multiplicative -> pow

    ?multiplicative: unary
                   | multiplicative "*" unary -> mul
                   | multiplicative "/" unary -> div
                   | multiplicative "%" unary -> mod

    ?unary: "no" unary -> not_op
          | "-" unary -> neg
          | "+" unary -> pos
          | primary

    ?primary: INT -> int_lit
            | DECIMAL -> decimal_lit
            | STRING -> string_lit
            | "verdadero" -> true_lit
            | "falso" -> false_lit
            | IDENT "(" [arguments] ")" -> call
            | "leer" "(" ")" -> read
            | IDENT -> var
            | "(" expression ")"

    arguments: expression ("," expression)*

    // Tokens
    IDENT: /[A-Za-z_áéíóúüñÁÉÍÓÚÜÑ][A-Za-z0-9_áéíóúüñÁÉÍÓÚÜÑ]*/
    DECIMAL.2: /[0-9]+\.[0-9]+/
    INT: /[0-9]+/
    STRING: /"[^"\n]*"/

    LINE_COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

    %import common.WS
    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""


PARSER = Lark(
    GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=True,
)


def _pos(meta) -> dict:
    return {'line': getattr(meta, 'line', 0), 'column': getattr(meta, 'column', 0)}


def _binary(op: str):
    def build(self, meta, items):
        return BinaryOp(op, items[0], items[1], **_pos(meta))
    return build


def _unary(op: str):
    def build(self, meta, items):
        return UnaryOp(op, items[0], **_pos(meta))
    return build


@v_args(meta=True)
class ASTBuilder(Transformer):
    """Transforms the raw parse tree into an AST."""

    def start(self, meta, items):
        return Program(list(items), **_pos(meta))

    def type_name(self, meta, items):
        return str(items[0])

    def var_decl(self, meta, items):
        type_name, name, initializer = items
        return VarDecl(type_name, str(name), initializer, **_pos(meta))

    def func_decl(self, meta, items):
        name, params, body = items
        return FuncDecl(str(name), params or [], body, **_pos(meta))

    def parameters(self, meta, items):
        return list(items)

    def parameter(self, meta, items):
        type_name, name = items
        return FuncParam(type_name, str(name), **_pos(meta))

    def if_stmt(self, meta, items):
        condition, then_branch, else_branch = items
        return IfStmt(condition, then_branch, else_branch, **_pos(meta))

    def while_stmt(self, meta, items):
        return WhileStmt(items[0], items[1], **_pos(meta))

    def for_stmt(self, meta, items):
        init, condition, update, body = items
        return ForStmt(init, condition, update, body, **_pos(meta))

    def return_stmt(self, meta, items):
        return ReturnStmt(items[0], **_pos(meta))

    def print_stmt(self, meta, items):
        return PrintStmt(items[0], **_pos(meta))

    def break_stmt(self, meta, items):
        return BreakStmt(**_pos(meta))

    def continue_stmt(self, meta, items):
        return ContinueStmt(**_pos(meta))

    def block(self, meta, items):
        return Block(list(items), **_pos(meta))

    def expr_stmt(self, meta, items):
        return ExprStmt(items[0], **_pos(meta))

    # Expressions
    def assign(self, meta, items):
        name, value = items
        return Assign(str(name), value, **_pos(meta))

    def or_op(self, meta, items):
        return LogicalOp('o', items[0], items[1], **_pos(meta))

    def and_op(self, meta, items):
        return LogicalOp('y', items[0], items[1], **_pos(meta))

    eq = _binary('==')
    ne = _binary('!=')
    lt = _binary('<')
    le = _binary('<=')
    gt = _binary('>')
    ge = _binary('>=')
    add = _binary('+')
    sub = _binary('-')
    pow = _binary('^')
    mul = _binary('*')
    div = _binary('/')
    mod = _binary('%')

    not_op = _unary('no')
    neg = _unary('-')
    pos = _unary('+')

    def int_lit(self, meta, items):
        return Literal(int(items[0]), 'entero', **_pos(meta))

    def decimal_lit(self, meta, items):
        return Literal(float(items[0]), 'decimal', **_pos(meta))

    def string_lit(self, meta, items):
        return Literal(str(items[0])[1:-1], 'cadena', **_pos(meta))

    def true_lit(self, meta, items):
        return Literal(True, 'booleano', **_pos(meta))

    def false_lit(self, meta, items):
        return Literal(False, 'booleano', **_pos(meta))

    def var(self, meta, items):
        return Ident(str(items[0]), **_pos(meta))

    def call(self, meta, items):
        name, args = items
        return Call(str(name), args or [], **_pos(meta))

    def arguments(self, meta, items):
        return list(items)

    def read(self, meta, items):
        return ReadExpr(**_pos(meta))


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedCharacters):
        return f"carácter no reconocido '{error.char}'"
    if isinstance(error, UnexpectedEOF):
        return "fin de archivo inesperado"
    token = getattr(error, 'token', None)
    return f"símbolo inesperado '{token}'" if token is not None else "entrada inesperada"


def parse_program(source: str) -> Program:
    """Parse EspañolScript source code into an AST Program.

    Raises `ParseError` with the position of the first lexical or syntax
    error.
    """
    try:
        tree = PARSER.parse(source)
    except UnexpectedInput as e:
        line = getattr(e, 'line', None)
        column = getattr(e, 'column', None)
        if line is None or line < 0:
            line, column = None, None
        raise ParseError(f"Error de sintaxis: {_describe(e)}", line, column) from e
    try:
        return ASTBuilder().transform(tree)
    except VisitError as e:
        raise ParseError(f"Error de sintaxis: {e.orig_exc}") from e
