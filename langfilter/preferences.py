"""
Collect the language whitelist, default language and target from CLI arguments or prompts
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from .file_utils import is_media_file
from .language_utils import COMMON_LANGUAGES, invalid_language_codes, parse_language_list
from .models import FilterConfig
from .rich_console import RichOutput, rich_output

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Invalid run configuration; the run is aborted before any file is touched"""


def collect_languages(value: Optional[str], output: RichOutput = rich_output) -> List[str]:
    """Languages to keep, prompting when none were given on the command line"""
    if value is None:
        common = ', '.join(f'{code} ({name})' for code, name in COMMON_LANGUAGES.items())
        output.print_info("Language Configuration")
        output.console.print("Enter the languages you want to keep (e.g. eng jpn fre)")
        output.console.print("Use 3-letter ISO 639-2 language codes separated by spaces")
        output.console.print(f"[dim]Common codes: {common}[/dim]")
        value = output.ask_text("Languages to keep")

    languages = parse_language_list(value)
    if not languages:
        raise ConfigurationError('No languages specified.')

    for code in invalid_language_codes(languages):
        output.print_warning(f"'{code}' is not a 3-letter ISO 639-2 code; kept as given")
    return languages


def collect_default_language(value: Optional[str], languages: List[str], ask: bool,
                             output: RichOutput = rich_output) -> Optional[str]:
    """Optional default language; one outside the whitelist is dropped with a warning"""
    if value is None and ask:
        if output.ask_confirmation("Do you want to set a default language?", default=False):
            output.console.print(f"Available languages: {' '.join(languages)}")
            value = output.ask_text("Default language")

    value = (value or '').strip().lower()
    if not value:
        return None
    if value not in languages:
        output.print_warning("Default language not in keep list. No default will be set.")
        logger.warning("Default language %r not in keep list, ignored", value)
        return None
    return value


def collect_target(value: Optional[Path], output: RichOutput = rich_output) -> Path:
    """Directory (or single media file) to process"""
    if value is None:
        output.print_info("Directory Selection")
        text = output.ask_text("Enter the path to process (e.g. /mnt/pools/media/movies)").strip()
        if not text:
            raise ConfigurationError('No directory specified.')
        value = Path(text)

    target = value.expanduser()
    if not target.exists():
        raise ConfigurationError(f'Directory does not exist: {target}')
    if target.is_file() and not is_media_file(target):
        raise ConfigurationError(f'{target} is not an MKV or MP4 file')
    if not target.is_file() and not target.is_dir():
        raise ConfigurationError(f'Directory does not exist: {target}')
    if not os.access(target, os.R_OK) or (target.is_dir() and not os.access(target, os.X_OK)):
        raise ConfigurationError(f'Cannot read directory: {target}')
    return target.resolve()


def build_config(args, output: RichOutput = rich_output) -> FilterConfig:
    """Build the validated run configuration from parsed arguments plus prompts"""
    languages = collect_languages(args.languages, output)
    default_language = collect_default_language(
        args.default_language, languages, ask=args.languages is None, output=output)
    target = collect_target(args.root, output)

    try:
        return FilterConfig(
            languages=languages,
            default_language=default_language,
            target=target,
            timeout=args.timeout,
            probe_timeout=args.probe_timeout,
            keep_backup=args.backup,
            dry_run=args.dry_run,
            debug=args.debug,
            workers=args.workers,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
