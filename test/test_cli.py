from pathlib import Path
from textwrap import dedent

import pytest
from typer.testing import CliRunner

from staticdocs import __version__
from staticdocs.cli import app
from staticdocs.core import source

RUNNER = CliRunner()


def test_check_version() -> None:
    assert __version__ in RUNNER.invoke(app, '--version').stdout


def test_build(package_dir: Path) -> None:
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress'])
    assert result.exit_code == 0, result.stdout
    assert 'Site written to' in result.stdout
    assert (package_dir / 'web' / 'index.html').is_file()


def test_build_options(package_dir: Path, tmp_path: Path) -> None:
    site = tmp_path / 'site'
    index = tmp_path / 'topics.json'
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress', '--no-examples',
                                 '--base-path', str(site), '--save-index', str(index)])
    assert result.exit_code == 0, result.stdout
    assert 'class="value"' not in (site / 'mean.html').read_text()
    assert index.is_file()


def test_unknown_source(package_dir: Path) -> None:
    result = RUNNER.invoke(app, [str(package_dir), '--source', 'rd'])
    assert result.exit_code != 0


def test_unsupported_index_format(package_dir: Path, tmp_path: Path) -> None:
    result = RUNNER.invoke(app, [str(package_dir), '--save-index',
                                 str(tmp_path / 'topics.pdf')])
    assert result.exit_code != 0


def test_build_error(package_dir: Path, tmp_path: Path) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('')
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress',
                                 '--base-path', str(blocker / 'site')])
    assert result.exit_code == 1
    assert 'Error:' in result.stdout


def test_source_class(package_dir: Path, tmp_path: Path,
                      monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(source, 'SOURCES', source.SOURCES.copy())
    plugin = tmp_path / 'text_source.py'
    plugin.write_text(dedent('''\
        from pathlib import Path

        from staticdocs.core.source import TopicSource
        from staticdocs.core.topic import TopicDocument, TopicRecord


        class TextSource(TopicSource):

            def get_source_files(self, path):
                return sorted(Path(path).glob('*.txt'))

            def parse(self, file):
                file = Path(file)
                document = TopicDocument(file, file.read_text().strip())
                return TopicRecord(file.stem, (file.stem,), payload=document)
    '''))
    (package_dir / 'man' / 'median.txt').write_text('Middle value\n')
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress',
                                 '--source-class', 'text', str(plugin), 'TextSource'])
    assert result.exit_code == 0, result.stdout
    site = package_dir / 'web'
    assert '<title>Middle value | mypkg</title>' in (site / 'median.html').read_text()
    assert not (site / 'mean.html').exists()


def test_build_empty_package(empty_package_dir: Path) -> None:
    result = RUNNER.invoke(app, [str(empty_package_dir), '--no-progress'])
    assert result.exit_code == 0, result.stdout
    assert (empty_package_dir / 'web' / 'index.html').is_file()


def test_stop_on_error(package_dir: Path) -> None:
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress', '--stop-on-error'])
    assert result.exit_code == 1
    assert 'Error:' in result.stdout
    assert '"zeta"' in result.stdout


def test_malformed_pyproject(package_dir: Path) -> None:
    (package_dir / 'pyproject.toml').write_text('[project\nname = ')
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress'])
    assert result.exit_code == 1
    assert 'Could not read' in result.stdout


def test_missing_source_class(package_dir: Path, tmp_path: Path,
                              monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(source, 'SOURCES', source.SOURCES.copy())
    result = RUNNER.invoke(app, [str(package_dir), '--no-progress', '--source-class', 'text',
                                 str(tmp_path / 'missing.py'), 'TextSource'])
    assert result.exit_code == 1
    assert 'Error:' in result.stdout
