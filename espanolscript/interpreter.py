"""Interpreter for EspañolScript.

This module implements the evaluator: it walks an already-parsed AST,
executing declarations and statements in file order and evaluating
expressions to runtime values. Each `Interpreter` instance is the complete
state of one program run (scopes, function table, console and debug
output), so independent runs never interfere with each other.

Statements return a control signal (see `espanolscript.signals`) instead
of raising exceptions for `retornar`, `romper` and `continuar`; only
language errors are raised, and they abort the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import math
import sys

from .ast import (
    Program, VarDecl, FuncDecl, Block, IfStmt, WhileStmt, ForStmt,
    ReturnStmt, PrintStmt, BreakStmt, ContinueStmt, ExprStmt, Assign,
    LogicalOp, BinaryOp, UnaryOp, Literal, Ident, Call, ReadExpr, Node,
)
from .environment import Environment
from .errors import (
    EspanolScriptError, DuplicateDeclarationError, UndeclaredNameError,
    UninitializedVariableError, TypeMismatchError, OperatorTypeError,
    ArityError, DivisionByZeroError, RecursionDepthError,
)
from .parser import parse_program
from .signals import NORMAL, BREAK, CONTINUE, Signal, ReturnSignal, BreakSignal
from .std.io import BasicIO
from .types import (
    Value, IntVal, DecimalVal, BoolVal, TextVal, NULL, TRUE, FALSE,
    is_numeric, promote, wrap_int, integer_literal, float_to_integer,
    truncating_div, truncating_mod, float_pow, conform, to_string, type_name,
)


@dataclass
class FunctionDef:
    """A user-defined function as registered in the function table."""
    name: str
    param_types: List[str]
    param_names: List[str]
    body: Block

    def __repr__(self) -> str:
        return f"<funcion {self.name}>"


MAX_CALL_DEPTH = 1000
# Python frames reserved for each nested call while a program runs
FRAMES_PER_CALL = 30


class Interpreter:
    """Core interpreter that executes an EspañolScript AST.

    `max_call_depth` bounds nested function calls; going past it raises
    `RecursionDepthError`. With `debug_append` the debug file is extended
    instead of truncated, so several runs can share one trace.
    """
    def __init__(self, io: Optional[BasicIO] = None, debug_level: int = 0, debug_file: str = 'debug.txt',
                 debug_append: bool = False, max_call_depth: int = MAX_CALL_DEPTH):
        self.env = Environment()
        self.functions: Dict[str, FunctionDef] = {}
        self.io = io if io is not None else BasicIO()
        self.debug_level = debug_level
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        mode = 'a' if debug_append else 'w'
        self.debug_fp = open(debug_file, mode, encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Program) -> None:
        self.debug(f"run: {len(program.body)} top-level declarations")
        old_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(old_limit + self.max_call_depth * FRAMES_PER_CALL)
        try:
            for node in program.body:
                try:
                    signal = self.execute(node)
                except RecursionError:
                    # deeply nested expressions can still exhaust the Python stack
                    raise RecursionDepthError(
                        "Profundidad de recursión excedida", node.line or None, node.column or None
                    ) from None
                if signal is not NORMAL:
                    self.debug(f"program stopped early by {type(signal).__name__} at line {node.line}")
                    break
            self.debug("run: finished")
        finally:
            sys.setrecursionlimit(old_limit)
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute(self, node: Node) -> Signal:
        try:
            return self.execute_node(node)
        except EspanolScriptError as e:
            e.locate(node.line, node.column)
            raise

    def evaluate(self, node: Node) -> Value:
        try:
            return self.evaluate_node(node)
        except EspanolScriptError as e:
            e.locate(node.line, node.column)
            raise

    def execute_block(self, statements: List[Node]) -> Signal:
        for stmt in statements:
            signal = self.execute(stmt)
            if signal is not NORMAL:
                return signal
        return NORMAL

    def execute_node(self, node: Node) -> Signal:
        match node:
            case VarDecl(type_name=declared_type, name=name, initializer=initializer):
                value = self.evaluate(initializer) if initializer is not None else None
                variable = self.env.declare(name, declared_type, value)
                self.debug(f"declare {declared_type} {name} = {to_string(variable.value)}", 2)
                return NORMAL
            case FuncDecl():
                self.declare_function(node)
                return NORMAL
            case Block(statements=statements):
                with self.env.scope():
                    return self.execute_block(statements)
            case IfStmt(condition=condition, then_branch=then_branch, else_branch=else_branch):
                cond = self.evaluate(condition)
                if not isinstance(cond, BoolVal):
                    raise OperatorTypeError(f"La condición del 'si' debe ser booleana, se obtuvo {type_name(cond)}")
                self.debug(f"si condition -> {to_string(cond)}", 3)
                if cond.value:
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)
                return NORMAL
            case WhileStmt(condition=condition, body=body):
                while self.loop_condition(condition, 'mientras'):
                    signal = self.execute(body)
                    if isinstance(signal, BreakSignal):
                        break
                    if isinstance(signal, ReturnSignal):
                        return signal
                return NORMAL
            case ForStmt(init=init, condition=condition, update=update, body=body):
                with self.env.scope():
                    self.execute(init)
                    while self.loop_condition(condition, 'para'):
                        signal = self.execute(body)
                        if isinstance(signal, BreakSignal):
                            break
                        if isinstance(signal, ReturnSignal):
                            return signal
                        # continuar still runs the increment
                        self.evaluate(update)
                return NORMAL
            case ReturnStmt(value=value):
                result = self.evaluate(value) if value is not None else None
                return ReturnSignal(result)
            case BreakStmt():
                return BREAK
            case ContinueStmt():
                return CONTINUE
            case PrintStmt(value=value):
                self.io.write_line(to_string(self.evaluate(value)))
                return NORMAL
            case ExprStmt(expr=expr):
                self.evaluate(expr)
                return NORMAL
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def loop_condition(self, condition: Node, keyword: str) -> bool:
        cond = self.evaluate(condition)
        if not isinstance(cond, BoolVal):
            # loops end quietly on a non-boolean condition, unlike 'si'
            self.debug(f"{keyword} at line {condition.line}: non-boolean condition {type_name(cond)} ends the loop")
            return False
        return cond.value

    def declare_function(self, node: FuncDecl) -> None:
        if node.name in self.functions:
            raise DuplicateDeclarationError(f"Función '{node.name}' ya está declarada")
        self.functions[node.name] = FunctionDef(
            node.name,
            [p.type_name for p in node.params],
            [p.name for p in node.params],
            node.body,
        )
        self.debug(f"define function {node.name}({', '.join(p.type_name for p in node.params)})", 2)

    def evaluate_node(self, node: Node) -> Value:
        match node:
            case Literal():
                return self.literal_value(node)
            case Ident(name=name):
                variable = self.env.lookup(name)
                if not variable.initialized:
                    raise UninitializedVariableError(f"Variable '{name}' no está inicializada")
                return variable.value
            case Assign(name=name, value=value_node):
                return self.env.assign(name, self.evaluate(value_node))
            case LogicalOp(op=op, left=left, right=right):
                return self.apply_logical_op(op, left, right)
            case UnaryOp(op=op, operand=operand):
                return self.apply_unary_op(op, self.evaluate(operand))
            case BinaryOp(op=op, left=left, right=right):
                a = self.evaluate(left)
                b = self.evaluate(right)
                return self.apply_binary_op(op, a, b)
            case Call():
                return self.call_function(node)
            case ReadExpr():
                return TextVal(self.io.read_line())
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def literal_value(self, node: Literal) -> Value:
        kind = node.literal_type
        if kind == 'entero':
            return integer_literal(node.value)
        if kind == 'decimal':
            return DecimalVal(float(node.value))
        if kind == 'cadena':
            return TextVal(node.value)
        if kind == 'booleano':
            return TRUE if node.value else FALSE
        raise NotImplementedError(f"unknown literal type {kind}")

    def call_function(self, node: Call) -> Value:
        func = self.functions.get(node.name)
        if func is None:
            raise UndeclaredNameError(f"Función '{node.name}' no está declarada")
        args = [self.evaluate(arg) for arg in node.args]
        if len(args) != len(func.param_types):
            raise ArityError(
                f"Número incorrecto de argumentos para función '{func.name}': "
                f"se esperaban {len(func.param_types)}, se recibieron {len(args)}"
            )
        converted = [
            conform(param_type, arg, f"argumento {i + 1} de función '{func.name}'")
            for i, (param_type, arg) in enumerate(zip(func.param_types, args))
        ]
        if self.call_depth >= self.max_call_depth:
            raise RecursionDepthError(
                f"Profundidad de recursión excedida en función '{func.name}' "
                f"(máximo {self.max_call_depth} llamadas anidadas)"
            )
        self.debug(f"call {func.name}({', '.join(to_string(a) for a in converted)})", 3)
        self.call_depth += 1
        try:
            with self.env.scope():
                for param_type, param_name, arg in zip(func.param_types, func.param_names, converted):
                    self.env.declare(param_name, param_type, arg)
                signal = self.execute(func.body)
        finally:
            self.call_depth -= 1
        # romper/continuar never cross a call boundary
        if isinstance(signal, ReturnSignal) and signal.value is not None:
            result = signal.value
        else:
            result = NULL
        self.debug(f"return {func.name} -> {to_string(result)}", 3)
        return result

    def apply_logical_op(self, op: str, left: Node, right: Node) -> Value:
        a = self.evaluate(left)
        if not isinstance(a, BoolVal):
            raise OperatorTypeError(f"Operador '{op}' requiere operandos booleanos")
        if op == 'o' and a.value:
            return TRUE
        if op == 'y' and not a.value:
            return FALSE
        b = self.evaluate(right)
        if not isinstance(b, BoolVal):
            raise OperatorTypeError(f"Operador '{op}' requiere operandos booleanos")
        return b

    def apply_unary_op(self, op: str, operand: Value) -> Value:
        if op == 'no':
            if not isinstance(operand, BoolVal):
                raise OperatorTypeError("Operador 'no' requiere operando booleano")
            return FALSE if operand.value else TRUE
        if not is_numeric(operand):
            raise OperatorTypeError(f"Operador '{op}' requiere operando numérico")
        if op == '+':
            return operand
        if op == '-':
            if isinstance(operand, DecimalVal):
                return DecimalVal(-operand.value)
            return type(operand)(wrap_int(-operand.value, type(operand)))
        raise OperatorTypeError(f"Operador unario desconocido: {op}")

    def apply_binary_op(self, op: str, a: Value, b: Value) -> Value:
        if op in ('==', '!='):
            eq = self.equal_values(a, b)
            return BoolVal(eq if op == '==' else not eq)
        if op in ('<', '<=', '>', '>='):
            if not (is_numeric(a) and is_numeric(b)):
                raise OperatorTypeError(
                    f"Operador '{op}' no aplicable a {type_name(a)} y {type_name(b)}"
                )
            x, y = float(a.value), float(b.value)
            if op == '<': return BoolVal(x < y)
            if op == '<=': return BoolVal(x <= y)
            if op == '>': return BoolVal(x > y)
            return BoolVal(x >= y)
        # String concatenation
        if op == '+' and (isinstance(a, TextVal) or isinstance(b, TextVal)):
            return TextVal(to_string(a) + to_string(b))
        if not (is_numeric(a) and is_numeric(b)):
            raise OperatorTypeError(f"Operador '{op}' no aplicable a {type_name(a)} y {type_name(b)}")
        result_type = promote(a, b)
        if result_type is DecimalVal:
            return DecimalVal(self.apply_float_op(op, float(a.value), float(b.value)))
        return result_type(self.apply_integer_op(op, a.value, b.value, result_type))

    def apply_float_op(self, op: str, x: float, y: float) -> float:
        if op == '+': return x + y
        if op == '-': return x - y
        if op == '*': return x * y
        if op == '/':
            if y == 0:
                raise DivisionByZeroError("División por cero")
            return x / y
        if op == '%':
            if y == 0:
                raise DivisionByZeroError("División por cero en módulo")
            return math.fmod(x, y)
        if op == '^':
            return float_pow(x, y)
        raise OperatorTypeError(f"Operador desconocido: {op}")

    def apply_integer_op(self, op: str, x: int, y: int, result_type: Any) -> int:
        if op == '+':
            result = x + y
        elif op == '-':
            result = x - y
        elif op == '*':
            result = x * y
        elif op == '/':
            if y == 0:
                raise DivisionByZeroError("División por cero")
            result = truncating_div(x, y)
        elif op == '%':
            if y == 0:
                raise DivisionByZeroError("División por cero en módulo")
            result = truncating_mod(x, y)
        elif op == '^':
            power = float_pow(float(x), float(y))
            try:
                return float_to_integer(power, result_type)
            except TypeMismatchError:
                raise TypeMismatchError(
                    f"Resultado de {x} ^ {y} fuera del rango de {'entero' if result_type is IntVal else 'largo'}"
                ) from None
        else:
            raise OperatorTypeError(f"Operador desconocido: {op}")
        return wrap_int(result, result_type)

    def equal_values(self, a: Value, b: Value) -> bool:
        if is_numeric(a) and is_numeric(b):
            return float(a.value) == float(b.value)
        return a == b


def run_program(source: str, io: Optional[BasicIO] = None, debug_level: int = 0) -> Interpreter:
    """Parse and run a program from a source string, returning the interpreter."""
    ast_program = parse_program(source)
    interpreter = Interpreter(io=io, debug_level=debug_level)
    interpreter.run(ast_program)
    return interpreter


def run_file(file_path: str, io: Optional[BasicIO] = None, debug_level: int = 0) -> Interpreter:
    """Parse and run an EspañolScript file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, io=io, debug_level=debug_level)
