"""JSON loading for configuration files."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('lanebook.utils')


def _describe_errors(error: ValidationError) -> str:
    """One ``field: message`` entry per problem, e.g. ``recent_window: Input should be >= 1``."""
    problems = []
    for detail in error.errors():
        location = '.'.join(str(part) for part in detail['loc']) or '<root>'
        problems.append(f'{location}: {detail["msg"]}')
    return '; '.join(problems)


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load a JSON file, optionally parsing it straight into a pydantic model.

    With a schema the raw text goes through ``model_validate_json``, so
    malformed JSON and bad values are reported the same way.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If JSON is malformed (no schema)
        ValueError: If the file doesn't match the schema
    """
    path = Path(path)
    if not path.is_file():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    text = path.read_text(encoding='utf-8')
    logger.debug(f'Read {len(text)} bytes from {path}')

    if schema is None:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
            raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    try:
        return schema.model_validate_json(text)
    except ValidationError as e:
        problems = _describe_errors(e)
        logger.error(f'{path} is not a valid {schema.__name__}: {problems}')
        raise ValueError(f'Invalid {schema.__name__} in {path}: {problems}') from e
