"""Per-field rules for document generation payloads.

Every validator returns a bool. Optional fields pass when not supplied (see
``is_provided``). ``size`` is the only coroutine: it measures the decoded
template on disk.
"""
import logging
from typing import Any, Mapping, Optional, Sequence

import aiofiles.os
import aiofiles.tempfile

from docgen.core.encoding import ENCODING_TYPES, decode_content
from docgen.core.sizes import parse_size
from docgen.services.file_types import FILE_TYPES
from docgen.services.formatters import FormatterParseError, parse_formatters
from docgen.validation.primitives import (
    is_non_empty_string,
    is_plain_object,
    is_provided,
)

logger = logging.getLogger(__name__)

FileTypeTable = Mapping[str, Sequence[str]]


# --- conversion request -------------------------------------------------

def data(value: Any) -> bool:
    if isinstance(value, list):
        return len(value) > 0
    return is_plain_object(value)


def options(value: Any) -> bool:
    if is_provided(value):
        return is_plain_object(value)
    return True


def formatters(value: Any) -> bool:
    if is_provided(value):
        return is_non_empty_string(value)
    return True


def formatters_parse(value: str) -> bool:
    try:
        parse_formatters(value)
    except FormatterParseError as exc:
        logger.debug("Formatters could not be parsed: %s", exc)
        return False
    return True


def convert_to(value: Any, file_types: FileTypeTable = FILE_TYPES) -> bool:
    if is_provided(value):
        return is_non_empty_string(value) and (
            value.lower() == "pdf" or value.lower() in file_types
        )
    return True


def report_name(value: Any) -> bool:
    if is_provided(value):
        return is_non_empty_string(value)
    return True


# --- template upload ----------------------------------------------------

def template(value: Any) -> bool:
    return is_plain_object(value)


def template_mandatory(value: Mapping[str, Any]) -> bool:
    return (
        is_non_empty_string(value.get("content"))
        and is_non_empty_string(value.get("encodingType"))
        and is_non_empty_string(value.get("fileType"))
    )


def content(value: Any) -> bool:
    return is_non_empty_string(value)


def encoding_type(value: Any) -> bool:
    if is_provided(value):
        return is_non_empty_string(value) and value in ENCODING_TYPES
    return True


def file_type(value: Any, file_types: FileTypeTable = FILE_TYPES) -> bool:
    return is_non_empty_string(value) and value.lower() in file_types


async def size(content_value: Any, encoding: Any, limit: Any) -> bool:
    """Whether the decoded template fits within ``limit`` bytes.

    Bad content, encoding or limit fail without touching the disk. I/O errors
    are logged and reported as a failed check.
    """
    if not (content(content_value) and encoding_type(encoding)):
        return False

    attachment_limit = parse_size(limit)
    if not attachment_limit or attachment_limit < 1:
        return False

    decoded = decode_content(content_value, encoding)
    try:
        async with aiofiles.tempfile.NamedTemporaryFile("wb") as tmp:
            await tmp.write(decoded)
            await tmp.flush()
            stats = await aiofiles.os.stat(tmp.name)
    except OSError as exc:
        logger.warning("Error validating file size. %s", exc)
        return False

    return stats.st_size <= attachment_limit


def file_conversion(
    input_type: Optional[str],
    output_type: Optional[str],
    file_types: FileTypeTable = FILE_TYPES,
) -> bool:
    if input_type == "":
        return False
    if input_type and output_type:
        targets = file_types.get(input_type.lower())
        return bool(targets) and output_type.lower() in targets
    return True
