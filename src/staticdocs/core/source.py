'''
Registry of parsed-topic sources.

A source knows which files of a package document topics and turns each of them into a
`TopicRecord`. Sources are registered by format name, either as an importable class path
(`module.submodule.ClassName`) or as a `(file, class_name)` dynamic symbol.
'''

from abc import ABC, abstractmethod
import importlib
import logging
from pathlib import Path
from typing import Any, Final, List, Literal, Mapping, Optional, OrderedDict, Sequence, Union

from staticdocs.core.topic import TopicRecord
from staticdocs.core.utils import DynamicSymbol, PathLike, dynamic_import
from staticdocs.exceptions import SourceNotFound, TopicParsingError

SourceSymbol = Union[str, DynamicSymbol]

SOURCES: Final[OrderedDict[str, SourceSymbol]] = OrderedDict({
    'markdown': 'staticdocs.sources.markdown.MarkdownTopicSource'
})

logger = logging.getLogger('staticdocs')


def add_source(name: str, symbol: SourceSymbol,
               order: Optional[Literal['first', 'last']] = None) -> None:
    SOURCES[name] = symbol
    if order:
        SOURCES.move_to_end(name, last=order == 'last')
        logger.info(f'{"Prepended" if order == "first" else "Appended"} '
                    f'{name} topic source {symbol!r}')
    else:
        logger.info(f'Added {name} topic source {symbol!r}')


def set_sources(sources: Mapping[str, SourceSymbol]) -> None:
    SOURCES.clear()
    logger.info('Topic sources cleared')
    for name, symbol in sources.items():
        add_source(name, symbol)


class TopicSource(ABC):

    @abstractmethod
    def get_source_files(self, path: PathLike) -> Sequence[Path]:
        '''
        Locates the documentation files of a package.

        Parameters:
            path: Directory holding the topic files.

        Returns:
            The topic files, in the order their topics should appear on the site index.
        '''
        pass

    @abstractmethod
    def parse(self, file: PathLike) -> TopicRecord:
        '''
        Parses one documentation file.

        Parameters:
            file: Path to the topic file.

        Returns:
            The topic record, with its aliases and rendering payload.

        Raises:
            TopicParsingError: If the file is not a valid topic.
        '''
        pass


def get_source(name: str, *args: Any, **kwargs: Any) -> TopicSource:
    if name not in SOURCES:
        raise SourceNotFound(f'Unsupported topic source: {name}')
    symbol = SOURCES[name]
    try:
        if isinstance(symbol, str):
            module_path, class_name = symbol.rsplit('.', 1)
            source_class = getattr(importlib.import_module(module_path), class_name)
        else:
            file, class_name = symbol
            source_class = dynamic_import(file, class_name)
    except (ImportError, AttributeError, OSError, ValueError) as e:
        raise SourceNotFound(f'Could not load {name} topic source {symbol!r}: {e}') from e
    return source_class(*args, **kwargs)


def read_topics(path: PathLike, source: Union[str, TopicSource] = 'markdown') -> List[TopicRecord]:
    '''
    Reads every topic of a package. Files that fail to parse are logged and skipped.

    Parameters:
        path: Directory holding the topic files.
        source: Registered source name or a source instance.

    Returns:
        The topic records, in source order.
    '''
    if isinstance(source, str):
        source = get_source(source)
    records: List[TopicRecord] = []
    files = source.get_source_files(path)
    logger.info(f'Located {len(files)} topic files')
    for file in files:
        try:
            records.append(source.parse(file))
        except TopicParsingError as e:
            logger.error(f'Skipping {Path(file).name}: {e}')
    return records
