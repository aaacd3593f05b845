'''
The topic index: which aliases render to which output files, which alias names each page,
and which pages are listed on the site index.
'''

from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pandas import DataFrame

from staticdocs.core import utils
from staticdocs.core.topic import IndexEntry, RenderedTopic, TopicRecord

logger = logging.getLogger('staticdocs')


def build_canonical_set(entries: Iterable[IndexEntry]) -> List[IndexEntry]:
    '''
    Selects one representative entry per output file.

    Parameters:
        entries: Index entries in their original order.

    Returns:
        The first entry encountered for every distinct output file, in first-occurrence order.
    '''
    seen: Dict[str, IndexEntry] = {}
    for entry in entries:
        seen.setdefault(entry.output_file, entry)
    return list(seen.values())


class TopicIndex(Mapping[str, TopicRecord]):
    '''
    Mapping of output files to the topic records rendered into them, along with the ordered
    alias entries that point at those files.
    '''

    def __init__(self, records: Iterable[TopicRecord] = ()) -> None:
        super().__init__()
        self._records: Dict[str, TopicRecord] = {}
        self._entries: List[IndexEntry] = []
        for record in records:
            self.add(record)

    def __getitem__(self, key: Union[str, IndexEntry]) -> TopicRecord:
        if isinstance(key, IndexEntry):
            return self[key.output_file]
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def entries(self) -> List[IndexEntry]:
        return list(self._entries)

    def add(self, record: TopicRecord) -> None:
        owner = self._records.setdefault(record.output_file, record)
        if owner is not record:
            logger.warning(f'"{record.name}" renders to {record.output_file}, which already '
                           f'belongs to "{owner.name}". Its aliases will link to that page')
        self._entries.extend(IndexEntry(alias, record.output_file)
                             for alias in record.aliases)

    def canonical_entries(self) -> List[IndexEntry]:
        return build_canonical_set(self._entries)

    def siblings(self, output_file: str) -> List[IndexEntry]:
        return [e for e in self._entries if e.output_file == output_file]

    def resolve(self, alias: str) -> Optional[str]:
        '''
        Looks up the page an alias renders to.

        Parameters:
            alias: Any alias of a topic, canonical or not.

        Returns:
            The output file of the first entry with that alias, or `None` if no topic has it.
        '''
        for entry in self._entries:
            if entry.alias == alias:
                return entry.output_file
        return None

    def apply_render(self, output_file: str, rendered: RenderedTopic) -> None:
        '''
        Folds a rendering outcome back into the index. The title and visibility are applied to
        the record and to every alias sharing its output file.

        Parameters:
            output_file: The page that was rendered.
            rendered: The result returned by the renderer.
        '''
        visibility = rendered.visibility
        record = self._records[output_file]
        record.title = rendered.title
        record.keywords = set(rendered.keywords)
        record.visibility = visibility
        for entry in self.siblings(output_file):
            entry.title = rendered.title
            entry.visibility = visibility

    def indexable_entries(self) -> List[IndexEntry]:
        return [e for e in self._entries if e.in_index]

    def to_df(self) -> DataFrame:
        entry_dicts: List[Dict[str, Any]] = []
        for entry in self._entries:
            entry_dict: Dict[str, Any] = dict(entry.to_json())
            entry_dict['topic'] = self[entry].name
            entry_dicts.append(entry_dict)
        try:
            return DataFrame(entry_dicts).set_index('alias')
        except KeyError:
            logger.debug('Could not set DataFrame index to "alias", returning an empty '
                         'DataFrame to assume that the index is empty')
            return DataFrame()

    def save_as(self, path: utils.PathLike) -> None:

        @utils.requires_extra('excel', 'Excel exports', 'openpyxl')
        def to_excel(df: DataFrame, path: Path) -> None:
            df.to_excel(path)

        @utils.requires_extra('xml', 'XML exports', 'lxml')
        def to_xml(df: DataFrame, path: Path) -> None:
            df.to_xml(path)

        @utils.requires_extra('markdown', 'Markdown exports', 'tabulate')
        def to_markdown(df: DataFrame, path: Path) -> None:
            df.to_markdown(path)

        path = Path(path)
        extension = path.suffix.casefold()
        df = self.to_df()
        if extension in ('.json', '.jsonl'):
            df.reset_index().to_json(path, lines=extension == '.jsonl', orient='records')
        elif extension in ('.csv', '.tsv'):
            df.to_csv(path, sep=',' if extension == '.csv' else '\t')
        elif extension in ('.xlsx', '.xls', '.xlsm'):
            to_excel(df, path)
        elif extension in ('.md', '.markdown'):
            to_markdown(df, path)
        elif extension == '.tex':
            df.to_latex(path)
        elif extension in ('.html', '.htm'):
            df.to_html(path)
        elif extension == '.xml':
            to_xml(df, path)
        else:
            raise ValueError(f'Unsupported file extension: {path.suffix}')
        logger.info(f'Successfully saved {path.name}')
