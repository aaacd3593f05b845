'''
Builds the static documentation site of a package.
'''

from dataclasses import dataclass
import logging
from pathlib import Path
import shutil
from typing import Final, List, Optional, Union
import webbrowser

from staticdocs.ancillary import build_demos, build_vignettes, readme
from staticdocs.core import source as topic_source
from staticdocs.core.dashboard import Progress
from staticdocs.core.evaluate import ExampleContext
from staticdocs.core.index import TopicIndex
from staticdocs.core.render import Renderer
from staticdocs.core.source import TopicSource, read_topics
from staticdocs.core.topic import TopicResult
from staticdocs.core.utils import PathLike, write_page
from staticdocs.exceptions import BuildError, ExampleError
from staticdocs.package import PackageInfo, load_package, package_info

logger = logging.getLogger('staticdocs')

BOOTSTRAP_PATH: Final[Path] = Path(__file__).parent / 'assets' / 'bootstrap'


@dataclass(frozen=True)
class BuildConfig:
    source: Union[str, TopicSource] = 'markdown'
    stop_on_error: bool = False
    show_progress: bool = True
    templates_path: Optional[Path] = None
    save_index: Optional[Path] = None
    open_browser: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.source, str) and self.source not in topic_source.SOURCES:
            raise ValueError(f'"{self.source}" is not a known topic source')


@dataclass
class BuildResult:
    package: PackageInfo
    index: TopicIndex
    topics: List[TopicResult]

    @property
    def failures(self) -> List[TopicResult]:
        return [t for t in self.topics if not t.ok]

    @property
    def index_path(self) -> Path:
        return self.package.base_path / 'index.html'


def create_site_root(base_path: PathLike) -> None:
    try:
        Path(base_path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildError(f'Could not create site directory "{base_path}": {e}') from e


def copy_bootstrap(base_path: PathLike, bootstrap: PathLike = BOOTSTRAP_PATH) -> None:
    logger.debug(f'Copying static assets from "{bootstrap}"')
    try:
        shutil.copytree(bootstrap, base_path, dirs_exist_ok=True)
    except OSError as e:
        raise BuildError(f'Could not copy static assets to "{base_path}": {e}') from e


def build_topics(package: PackageInfo, index: TopicIndex, renderer: Renderer,
                 config: BuildConfig = BuildConfig()) -> List[TopicResult]:
    '''
    Generates the page of every topic, one output file at a time.

    Parameters:
        package: The package being documented.
        index: The topic index. Titles and visibility of its entries are updated in place.
        renderer: Renderer for the topic pages.
        config: Build configuration.

    Returns:
        One result per generated page. Failed pages carry the error that stopped them.

    Raises:
        ExampleError: If an example fails and `config.stop_on_error` is set.
    '''
    results: List[TopicResult] = []
    canonical = index.canonical_entries()
    with Progress('Generating topics...', total=len(canonical),
                  disable=not config.show_progress) as progress:
        for entry in canonical:
            path = package.base_path / entry.output_file
            topic_name = path.stem
            logger.info(f'Generating {path.name}')
            record = index[entry]
            context = ExampleContext(topic_name, figure_dir=package.base_path,
                                     stop_on_error=config.stop_on_error)
            try:
                rendered = renderer.render_topic(record.payload, context, topic_name, package,
                                                 resolve=index.resolve)
                write_page(path, rendered.html)
            except ExampleError:
                raise
            except Exception as e:
                logger.error(f'Could not generate {path.name} ("{entry.alias}"): '
                             f'{type(e).__name__}: {e}')
                results.append(TopicResult(entry.alias, path, error=e))
                progress.advance(errors=True)
                continue
            finally:
                context.close()
            index.apply_render(entry.output_file, rendered)
            results.append(TopicResult(entry.alias, path, rendered=rendered))
            progress.advance()
    return results


def build_index(package: PackageInfo, index: TopicIndex, renderer: Renderer) -> Path:
    '''
    Generates the site index listing every indexable alias, in index order.
    '''
    path = package.base_path / 'index.html'
    logger.info(f'Generating {path.name}')
    html = renderer.render_index(index.indexable_entries(), package)
    try:
        return write_page(path, html)
    except OSError as e:
        raise BuildError(f'Could not write "{path}": {e}') from e


def build_package(path: PathLike, base_path: Optional[PathLike] = None,
                  examples: Optional[bool] = None,
                  config: BuildConfig = BuildConfig()) -> BuildResult:
    '''
    Builds complete static documentation for a package: topic pages, vignettes, demos and
    the site index.

    Parameters:
        path: Root directory of the package.
        base_path: Directory to create the site in.
        examples: Whether to evaluate examples.
        config: Build configuration.

    Returns:
        The package metadata, the final topic index and the result of every topic page.

    Raises:
        BuildError: If the site directory or the site index cannot be written.
    '''
    package = package_info(path, base_path, examples)
    renderer = Renderer(config.templates_path or package.templates_path,
                        examples=package.examples)
    create_site_root(package.base_path)
    copy_bootstrap(package.base_path)
    with load_package(package):
        index = TopicIndex(read_topics(package.path / package.topic_dir, config.source))
        topics = build_topics(package, index, renderer, config)
        package.vignettes = build_vignettes(package, renderer)
        package.demos = build_demos(package, renderer, stop_on_error=config.stop_on_error)
    package.readme = readme(package)
    result = BuildResult(package, index, topics)
    build_index(package, index, renderer)
    if result.failures:
        logger.warning(f'{len(result.failures)} of {len(topics)} topic pages could not be '
                       'generated')
    if config.save_index:
        index.save_as(config.save_index)
    if config.open_browser:
        webbrowser.open(result.index_path.resolve().as_uri())
    return result
