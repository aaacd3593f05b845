from pathlib import Path
from textwrap import dedent

import pytest

from staticdocs.core import source
from staticdocs.core.source import TopicSource
from staticdocs.core.topic import TopicDocument, TopicRecord
from staticdocs.exceptions import SourceNotFound, TopicParsingError
from staticdocs.sources.markdown import MarkdownTopicSource, extract_code, split_sections


@pytest.fixture
def restore_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(source, 'SOURCES', source.SOURCES.copy())


def test_source_files(package_dir: Path) -> None:
    files = MarkdownTopicSource().get_source_files(package_dir / 'man')
    assert [f.name for f in files] == ['helpers.md', 'mean.md', 'zeta.md']
    assert MarkdownTopicSource().get_source_files(package_dir / 'missing') == []


def test_parse_front_matter(package_dir: Path) -> None:
    record = MarkdownTopicSource().parse(package_dir / 'man' / 'mean.md')
    assert record.name == 'mean'
    assert record.aliases == ('mean', 'average')
    assert record.output_file == 'mean.html'
    document = record.payload
    assert isinstance(document, TopicDocument)
    assert document.title == 'Arithmetic mean'
    assert document.keywords == ('math',)
    assert [heading for heading, _ in document.sections] == ['', 'Usage', 'See also']
    assert document.get_section('') == 'Computes the arithmetic mean of numbers.'
    assert document.get_section('usage') == '`mean(xs)`'
    assert document.get_section('Examples') is None
    assert document.examples == 'from mypkg import mean\nmean([1, 2, 3])'


def test_parse_without_front_matter(package_dir: Path) -> None:
    record = MarkdownTopicSource().parse(package_dir / 'man' / 'zeta.md')
    assert record.aliases == ('zeta',)
    assert record.payload.title == 'Zeta function'
    assert record.payload.keywords == ()
    assert record.payload.sections == ()
    assert record.payload.examples == 'print(x)'


def test_comma_separated_fields(tmp_path: Path) -> None:
    file = tmp_path / 'stats.md'
    file.write_text('---\naliases: sd, var\nkeywords: internal, math\n---\nSpread.\n')
    record = MarkdownTopicSource().parse(file)
    assert record.aliases == ('sd', 'var')
    assert record.payload.keywords == ('internal', 'math')
    assert record.payload.title == ''


@pytest.mark.parametrize('contents', [
    '---\naliases: [mean\n---\nBody\n',
    '---\n- a list\n---\nBody\n',
    '---\naliases: [mean, mean]\n---\nBody\n',
    '---\nkeywords: {a: b}\n---\nBody\n',
])
def test_invalid_topic(tmp_path: Path, contents: str) -> None:
    file = tmp_path / 'bad.md'
    file.write_text(contents)
    with pytest.raises(TopicParsingError):
        MarkdownTopicSource().parse(file)


def test_split_sections_ignores_code_headings() -> None:
    preamble, sections = split_sections(dedent('''\
        # Title
        Intro
        ## Details
        ```python
        ## not a heading
        ```
        ## More ##
        Text
    '''))
    assert preamble == ['# Title', 'Intro']
    assert [heading for heading, _ in sections] == ['Details', 'More']
    assert '## not a heading' in sections[0][1]


def test_extract_code() -> None:
    assert extract_code('```python\na = 1\n```\nText\n~~~\nb = 2\n~~~') == 'a = 1\nb = 2'
    assert extract_code('\nplain = True\n') == 'plain = True'


def test_read_topics_skips_bad_files(package_dir: Path) -> None:
    (package_dir / 'man' / 'broken.md').write_text('---\n: [\n---\n')
    records = source.read_topics(package_dir / 'man')
    assert [r.name for r in records] == ['helpers', 'mean', 'zeta']


def test_read_topics_missing_directory(tmp_path: Path) -> None:
    assert source.read_topics(tmp_path / 'man') == []


def test_get_source() -> None:
    assert isinstance(source.get_source('markdown'), MarkdownTopicSource)
    with pytest.raises(SourceNotFound):
        source.get_source('rd')


def test_add_and_set_sources(restore_sources: None) -> None:
    source.add_source('rd', 'somewhere.RdSource', order='first')
    assert list(source.SOURCES) == ['rd', 'markdown']
    source.add_source('txt', 'somewhere.TextSource')
    assert list(source.SOURCES)[-1] == 'txt'
    source.set_sources({'only': 'somewhere.OnlySource'})
    assert list(source.SOURCES) == ['only']


def test_dynamic_source(tmp_path: Path, restore_sources: None) -> None:
    plugin = tmp_path / 'plain_source.py'
    plugin.write_text(dedent('''\
        from pathlib import Path

        from staticdocs.core.source import TopicSource
        from staticdocs.core.topic import TopicRecord


        class PlainSource(TopicSource):

            def get_source_files(self, path):
                return sorted(Path(path).glob('*.txt'))

            def parse(self, file):
                return TopicRecord(Path(file).stem, (Path(file).stem,),
                                   payload=Path(file).read_text())
    '''))
    (tmp_path / 'hello.txt').write_text('Hello')
    source.add_source('plain', (plugin, 'PlainSource'))
    plain = source.get_source('plain')
    assert isinstance(plain, TopicSource)
    records = source.read_topics(tmp_path, 'plain')
    assert records == [TopicRecord('hello', ('hello',), payload='Hello')]
