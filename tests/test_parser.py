import pytest

from espanolscript.ast import (
    Program, VarDecl, FuncParam, FuncDecl, Block, IfStmt, ForStmt, ReturnStmt,
    PrintStmt, BreakStmt, ExprStmt, Assign, LogicalOp, BinaryOp, UnaryOp,
    Literal, Ident, Call, ReadExpr,
)
from espanolscript.errors import ParseError
from espanolscript.parser import parse_program


def ent(n):
    return Literal(n, 'entero')


def test_variable_declarations():
    program = parse_program('entero x = 5; decimal d; cadena s = "hola"; booleano b = falso;')
    assert program == Program([
        VarDecl('entero', 'x', ent(5)),
        VarDecl('decimal', 'd', None),
        VarDecl('cadena', 's', Literal('hola', 'cadena')),
        VarDecl('booleano', 'b', Literal(False, 'booleano')),
    ])


def test_function_declaration_and_call():
    program = parse_program('suma(entero a, largo b) { retornar a + b; } imprimir suma(1, 2);')
    func, stmt = program.body
    assert func == FuncDecl('suma', [FuncParam('entero', 'a'), FuncParam('largo', 'b')], Block([
        ReturnStmt(BinaryOp('+', Ident('a'), Ident('b'))),
    ]))
    assert stmt == PrintStmt(Call('suma', [ent(1), ent(2)]))


def test_function_without_parameters_and_call_statement():
    program = parse_program('saludar() { imprimir "hola"; } saludar();')
    assert program.body[0] == FuncDecl('saludar', [], Block([PrintStmt(Literal('hola', 'cadena'))]))
    assert program.body[1] == ExprStmt(Call('saludar', []))


def test_power_binds_looser_than_multiplication():
    program = parse_program('entero x = 2 * 3 ^ 2;')
    assert program.body[0].initializer == BinaryOp(
        '^', BinaryOp('*', ent(2), ent(3)), ent(2)
    )


def test_power_does_not_chain():
    with pytest.raises(ParseError):
        parse_program('entero x = 2 ^ 3 ^ 2;')


def test_precedence_of_logic_and_comparison():
    program = parse_program('booleano b = no a < 1 o c == 2 y d;')
    assert program.body[0].initializer == LogicalOp(
        'o',
        BinaryOp('<', UnaryOp('no', Ident('a')), ent(1)),
        LogicalOp('y', BinaryOp('==', Ident('c'), ent(2)), Ident('d')),
    )


def test_assignment_is_right_associative():
    program = parse_program('a = b = 3;')
    assert program.body[0] == ExprStmt(Assign('a', Assign('b', ent(3))))


def test_unary_minus_and_subtraction():
    program = parse_program('imprimir -1 - -2;')
    assert program.body[0] == PrintStmt(
        BinaryOp('-', UnaryOp('-', ent(1)), UnaryOp('-', ent(2)))
    )


def test_dangling_sino_binds_to_nearest_si():
    program = parse_program('si (a) si (b) imprimir 1; sino imprimir 2;')
    outer = program.body[0]
    assert outer.else_branch is None
    assert outer.then_branch == IfStmt(Ident('b'), PrintStmt(ent(1)), PrintStmt(ent(2)))


def test_para_loop():
    program = parse_program('para (entero i = 0; i < 3; i = i + 1) romper;')
    assert program.body[0] == ForStmt(
        VarDecl('entero', 'i', ent(0)),
        BinaryOp('<', Ident('i'), ent(3)),
        Assign('i', BinaryOp('+', Ident('i'), ent(1))),
        BreakStmt(),
    )


def test_literals_and_leer():
    program = parse_program('cadena s = leer(); decimal d = 3.25; imprimir "sin \\escapes";')
    assert program.body[0].initializer == ReadExpr()
    assert program.body[1].initializer == Literal(3.25, 'decimal')
    assert program.body[2] == PrintStmt(Literal('sin \\escapes', 'cadena'))


def test_keyword_prefix_is_still_an_identifier():
    program = parse_program('entero enteros = 1; entero año = enteros;')
    assert program.body[1] == VarDecl('entero', 'año', Ident('enteros'))


def test_comments_are_ignored():
    source = """
    // comentario de linea
    entero x = 1; /* comentario
    de bloque */ imprimir x;
    """
    program = parse_program(source)
    assert len(program.body) == 2


def test_positions_are_recorded():
    program = parse_program('entero x = 1;\n\nimprimir x;')
    assert program.body[0].line == 1
    assert program.body[1].line == 3
    assert program.body[1].column == 1


def test_syntax_error_reports_position():
    with pytest.raises(ParseError) as excinfo:
        parse_program('entero x = 1;\nimprimir x $;')
    assert excinfo.value.line == 2
    assert 'Error de sintaxis' in str(excinfo.value)


def test_missing_semicolon():
    with pytest.raises(ParseError):
        parse_program('imprimir "hola"')
