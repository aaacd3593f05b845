from typing import Any, Iterable, Optional, Union

from rich.console import Console
from rich.progress import Progress as BaseProgress
from rich.progress import BarColumn, MofNCompleteColumn, ProgressColumn, TextColumn, \
    TimeElapsedColumn

from staticdocs.core import utils

DEFAULT_COLUMNS = (TextColumn('{task.description}'),
                   BarColumn(),
                   MofNCompleteColumn(),
                   TextColumn('[b gray]Time Elapsed:'),
                   TimeElapsedColumn(),
                   TextColumn('[b yellow]Errors: {task.fields[errors]}'))


class Progress(BaseProgress):
    '''
    Single-task progress bar that keeps a count of failed items next to the completed ones.
    '''

    def __init__(self, task: str,
                 columns: Iterable[Union[str, ProgressColumn]] = DEFAULT_COLUMNS,
                 total: Optional[float] = None, console: Optional[Console] = None,
                 transient: bool = False, disable: bool = False, **kwargs: Any) -> None:
        super().__init__(*columns, console=console, transient=transient, disable=disable,
                         **kwargs)
        self._task = super().add_task(task, total=total, errors=0)

    @property
    def completed(self) -> float:
        return self.tasks[self._task].completed

    @property
    def total(self) -> Optional[float]:
        return self.tasks[self._task].total

    @property
    def errors(self) -> int:
        return self.tasks[self._task].fields['errors']

    def advance(self, errors: bool = False, advance: float = 1) -> None:  # type: ignore[override]
        if not errors:
            super().advance(self._task, advance)
        else:
            self.update(errors=self.errors + int(advance))

    def update(self, *, total: Optional[float] = None, completed: Optional[float] = None,  # type: ignore[override]
               advance: Optional[float] = None, description: Optional[str] = None,
               visible: Optional[bool] = None, refresh: bool = False,
               errors: Optional[int] = None) -> None:
        super().update(self._task, total=total, completed=completed, advance=advance,
                       description=description, visible=visible, refresh=refresh,
                       **utils.resolve_kwargs(errors=errors))
