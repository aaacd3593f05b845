'''
Evaluation of documentation examples and demos.

Every topic gets its own `ExampleContext`: a private namespace the example code runs in and a
handle on the graphics it produced. Closing the context discards the namespace and releases any
open figures, so nothing leaks from one topic to the next.
'''

import ast
import builtins
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass, field
import io
import logging
from pathlib import Path
import sys
from types import ModuleType, TracebackType
from typing import Any, Dict, List, Optional, Type

from staticdocs.core.utils import PathLike
from staticdocs.exceptions import ExampleError

logger = logging.getLogger('staticdocs')


@dataclass(frozen=True)
class ExampleOutput:
    source: str
    stdout: str = ''
    value: Optional[str] = None
    error: Optional[str] = None
    figures: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.error is not None


def _pyplot() -> Optional[ModuleType]:
    # Figures only exist if the example itself imported pyplot
    return sys.modules.get('matplotlib.pyplot')


class ExampleContext:
    '''
    Private execution context for the examples of a single topic or demo.

    Parameters:
        name: Name of the topic, used to name captured figures.
        figure_dir: Directory captured figures are saved to. Figures are discarded if omitted.
        stop_on_error: Raise `ExampleError` instead of recording the error in the output.
    '''

    def __init__(self, name: str, figure_dir: Optional[PathLike] = None,
                 stop_on_error: bool = False) -> None:
        self.name = name
        self.figure_dir = Path(figure_dir) if figure_dir is not None else None
        self.stop_on_error = stop_on_error
        self.namespace: Dict[str, Any] = {'__name__': f'__example_{name}__',
                                          '__builtins__': builtins}
        self.figures: List[Path] = []
        self.closed = False

    def __enter__(self) -> 'ExampleContext':
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]], exc_value: Optional[BaseException],
                 traceback: Optional[TracebackType]) -> None:
        self.close()

    def evaluate(self, code: str) -> List[ExampleOutput]:
        '''
        Runs example code statement by statement, the way an interactive session would.

        Parameters:
            code: Python source of the example.

        Returns:
            One `ExampleOutput` per top-level statement, holding what it printed, the repr of
            its value (for expressions), any error and the figures it drew.
        '''
        if self.closed:
            raise RuntimeError(f'Example context "{self.name}" is closed')
        try:
            module = ast.parse(code, filename=f'<{self.name}>')
        except SyntaxError as e:
            if self.stop_on_error:
                raise ExampleError(f'Could not parse examples of "{self.name}": {e}') from e
            logger.warning(f'Could not parse examples of "{self.name}": {e}')
            return [ExampleOutput(code, error=f'SyntaxError: {e}')]
        return [self._run(code, statement) for statement in module.body]

    def _run(self, code: str, statement: ast.stmt) -> ExampleOutput:
        source = ast.get_source_segment(code, statement) or ast.unparse(statement)
        buffer = io.StringIO()
        value: Optional[str] = None
        error: Optional[str] = None
        with redirect_stdout(buffer), redirect_stderr(buffer):
            try:
                if isinstance(statement, ast.Expr):
                    result = eval(compile(ast.Expression(statement.value),
                                          f'<{self.name}>', 'eval'), self.namespace)
                    if result is not None:
                        value = repr(result)
                else:
                    exec(compile(ast.Module([statement], type_ignores=[]),
                                 f'<{self.name}>', 'exec'), self.namespace)
            except (Exception, SystemExit) as e:
                # exit() in an example must not end the build
                if self.stop_on_error:
                    raise ExampleError(f'Example of "{self.name}" failed: '
                                       f'{type(e).__name__}: {e}') from e
                error = f'{type(e).__name__}: {e}'
        figures = [p.name for p in self.capture_figures()]
        return ExampleOutput(source, buffer.getvalue(), value, error, figures)

    def capture_figures(self) -> List[Path]:
        '''
        Saves the figures currently open and closes them.

        Returns:
            Paths of the saved images, empty if figures are not being kept.
        '''
        plt = _pyplot()
        if plt is None:
            return []
        saved: List[Path] = []
        for number in plt.get_fignums():
            figure = plt.figure(number)
            if self.figure_dir is not None:
                path = self.figure_dir / f'{self.name}-{len(self.figures) + 1}.png'
                figure.savefig(path)
                self.figures.append(path)
                saved.append(path)
            plt.close(figure)
        return saved

    def close(self) -> None:
        plt = _pyplot()
        if plt is not None:
            plt.close('all')
        self.namespace.clear()
        self.closed = True
