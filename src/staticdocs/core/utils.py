from functools import wraps
import importlib
import importlib.util
import logging
from pathlib import Path
import re
from typing import (Any, Callable, Dict, Final, FrozenSet, List, Optional, Protocol, Tuple, Type,
                    TypeVar, Union)

from staticdocs.exceptions import ExtraNotInstalled

logger = logging.getLogger('staticdocs')

PathLike = Union[Path, str]
JSONValue = Optional[Union[str, int, float,
                           bool, List['JSONValue'], 'JSONObject']]
JSONObject = Dict[str, JSONValue]

JSONObject_T = TypeVar('JSONObject_T', bound=JSONObject)  # type: ignore
SupportsJSON_T = TypeVar('SupportsJSON_T',
                         bound='SupportsJSON')  # type: ignore

DynamicSymbol = Tuple[Path, str]

RESERVED_PAGES: Final[FrozenSet[str]] = frozenset({'index'})


class SupportsJSON(Protocol):

    def to_json(self) -> JSONObject_T:  # type: ignore
        ...

    @classmethod
    def from_json(cls: Type[SupportsJSON_T], json_obj: JSONObject_T) -> SupportsJSON_T:  # type: ignore
        ...


def get_readable_file_size(size: int) -> str:
    '''
    Converts number of bytes to a human readable output (i.e. bytes, KB, MB, GB, TB.)

    Parameters:
        size: The number of bytes.

    Returns:
        A human readable output of the number of bytes.
    '''
    kb = round(size / 2 ** 10, 3)
    mb = round(size / 2 ** 20, 3)
    gb = round(size / 2 ** 30, 3)
    tb = round(size / 2 ** 40, 3)

    for measurement, suffix in [(tb, 'TB'), (gb, 'GB'), (mb, 'MB'), (kb, 'KB')]:
        if measurement >= 1:
            return f'{measurement} {suffix}'
    return f'{size} bytes'


def resolve_kwargs(**kwargs: Any) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def topic_filename(alias: str) -> str:
    '''
    Derives the HTML file name of a topic page from its canonical alias.

    Parameters:
        alias: The first alias of the topic.

    Returns:
        A file name safe to write under the site root, never clashing with the site index.
    '''
    stem = re.sub(r'[^A-Za-z0-9_.-]+', '-', alias).strip('-.')
    if not stem:
        stem = 'topic'
    if stem.casefold() in RESERVED_PAGES:
        stem = f'{stem}-topic'
    return f'{stem}.html'


def write_page(path: PathLike, html: str) -> Path:
    '''
    Writes a rendered HTML page.

    Parameters:
        path: Destination of the page.
        html: Rendered page contents.

    Returns:
        The path of the written page.
    '''
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as file:
        file.write(html)
    logger.debug(f'Wrote {path.name} '
                 f'({get_readable_file_size(path.stat().st_size)})')
    return path


def dynamic_import(file: PathLike, symbol: str) -> Any:
    '''
    Imports a symbol from an arbitrary Python file.

    Parameters:
        file: Path to the Python file.
        symbol: Name of the class or function to retrieve from the file.

    Returns:
        The imported symbol.
    '''
    file = Path(file)
    spec = importlib.util.spec_from_file_location(file.stem, file)
    if spec is None or spec.loader is None:
        raise ImportError(f'Could not load module from "{file}"')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    try:
        return getattr(module, symbol)
    except AttributeError as e:
        raise ImportError(f'"{symbol}" is not defined in "{file}"') from e


def requires_extra(extra: str, feature: str, module: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                importlib.import_module(module)
            except ImportError as e:
                raise ExtraNotInstalled(f'{feature} requires the "{extra}" extra to be installed. '
                                        f'Install with "pip install staticdocs[{extra}]"') from e
            return func(*args, **kwargs)
        return wrapper
    return decorator
