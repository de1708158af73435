import builtins
from typing import Optional, TextIO


class BasicIO:
    """Line-oriented console behind `imprimir` and `leer()`.

    With no streams given it talks to the process console through
    `builtins.print` and `builtins.input`; tests and embedders can pass any
    text streams instead.
    """
    def __init__(self, input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None):
        self.input_stream = input_stream
        self.output_stream = output_stream

    def read_line(self) -> str:
        if self.input_stream is None:
            try:
                return builtins.input()
            except EOFError:
                return ''
        line = self.input_stream.readline()
        if line.endswith('\n'):
            line = line[:-1]
        if line.endswith('\r'):
            line = line[:-1]
        return line

    def write_line(self, text: str) -> None:
        if self.output_stream is None:
            builtins.print(text)
            return
        self.output_stream.write(text + '\n')
        self.output_stream.flush()
