'''
The staticdocs command line interface.
'''

from pathlib import Path
import logging

from click import BadParameter
from rich import print
from rich.markup import escape
from typer import Argument, Exit, Option, Typer
from typing import Final, Optional, Tuple

import staticdocs
from staticdocs.builder import BuildConfig, build_package
from staticdocs.core import source
from staticdocs.exceptions import StaticDocsError

logger = logging.getLogger('staticdocs')

app = Typer()

# Default configurations


DEFAULT_BUILD_CONFIG: Final[BuildConfig] = BuildConfig()

# Argument/option validation callbacks


def validate_index_format(path: Optional[Path]) -> Optional[Path]:
    if path and path.suffix.casefold() not in ['.json', '.jsonl', '.csv', '.tsv', '.xlsx',
                                               '.xls', '.xlsm', '.md', '.markdown', '.tex',
                                               '.html', '.htm', '.xml']:
        raise BadParameter(f'Unsupported index format: "{path.suffix}"')
    return path


def validate_source(name: str) -> str:
    if name not in source.SOURCES:
        raise BadParameter(f'Unknown topic source "{name}". Registered sources: '
                           f'{", ".join(source.SOURCES)}')
    return name

# Miscellaneous argument/option callbacks


def toggle_logging(enable: bool) -> None:
    if enable and logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    elif logger.level != logging.DEBUG:
        logging.disable()


def toggle_debug_logging(enable: bool) -> None:
    if enable:
        logger.setLevel(logging.DEBUG)


def show_version(show: bool) -> None:
    if show:
        print(f'[b]staticdocs {staticdocs.__version__}')
        raise Exit()


# Arguments
PACKAGE: Final[Path] = Argument(Path('.'), file_okay=False, exists=True,
                                help='Path to the source of the package.')

# Options
BASE_PATH: Final[Optional[Path]] = Option(None, '--base-path', '-o', file_okay=False,
                                          help='Directory to create the site in. Defaults to '
                                          'the package\'s "web" directory.')
DEBUG: Final[bool] = Option(False, '--debug', callback=toggle_debug_logging,
                            hidden=True)
EXAMPLES: Final[Optional[bool]] = Option(None, '--examples / --no-examples',
                                         show_default=False,
                                         help='Run topic examples and include their output. '
                                         'Turning examples off makes rebuilding much faster.')
OPEN: Final[bool] = Option(DEFAULT_BUILD_CONFIG.open_browser, '--open',
                           help='Open the site index in a browser once the site is built.')
PROGRESS: Final[bool] = Option(DEFAULT_BUILD_CONFIG.show_progress, '--progress / --no-progress',
                               help='Display a progress bar while topic pages are generated.')
SAVE_INDEX: Final[Optional[Path]] = Option(None, dir_okay=False,
                                           callback=validate_index_format,
                                           help='Also export the topic index to this file.')
SOURCE: Final[str] = Option('markdown', '--source', '-s', callback=validate_source,
                            help='Format of the topic files.')
SOURCE_CLASS: Final[Optional[Tuple[str, Path, str]]] = Option(None,
                                                              metavar='<NAME FILE CLASS>',
                                                              help='Register a custom topic '
                                                              'source class under NAME.')
STOP_ON_ERROR: Final[bool] = Option(DEFAULT_BUILD_CONFIG.stop_on_error, '--stop-on-error',
                                    help='Abort the build when an example raises, instead '
                                    'of showing the error on the page.')
TEMPLATES: Final[Optional[Path]] = Option(None, file_okay=False, exists=True,
                                          help='Directory of templates overriding the '
                                          'default ones.')
VERBOSE: Final[bool] = Option(False, '--verbose', '-v',
                              callback=toggle_logging,
                              help='Display verbose logging information.')
VERSION: Final[bool] = Option(False, '--version', is_eager=True, callback=show_version,
                              help='Shows the installed version of staticdocs and exit.')


@app.command()
def command(package: Path = PACKAGE, base_path: Optional[Path] = BASE_PATH,
            debug: bool = DEBUG, examples: Optional[bool] = EXAMPLES,
            open_browser: bool = OPEN, progress: bool = PROGRESS,
            save_index: Optional[Path] = SAVE_INDEX,
            source_name: str = SOURCE,
            source_class: Optional[Tuple[str, Path, str]] = SOURCE_CLASS,
            stop_on_error: bool = STOP_ON_ERROR,
            templates: Optional[Path] = TEMPLATES,
            verbose: bool = VERBOSE, version: bool = VERSION) -> None:
    '''
    Builds the static documentation site of a package.
    '''
    if source_class:
        # Register and use a custom topic source
        source_name, file, class_name = source_class
        source.add_source(source_name, (file, class_name), order='first')
    config = BuildConfig(source=source_name, stop_on_error=stop_on_error,
                         show_progress=progress, templates_path=templates,
                         save_index=save_index, open_browser=open_browser)
    try:
        result = build_package(package, base_path=base_path, examples=examples,
                               config=config)
    except StaticDocsError as e:
        print(f'[b red]Error:[/b red] {escape(str(e))}')
        raise Exit(code=1) from e
    for failure in result.failures:
        print(f'[yellow]Could not generate {failure.path.name} ("{failure.alias}"): '
              f'{escape(str(failure.error))}')
    print(f'[b green]Site written to {result.index_path}')
