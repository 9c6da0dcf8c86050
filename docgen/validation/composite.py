"""Whole-request validation.

Each composite runs the field validators for one request shape and returns
every violation it finds; an empty list means the payload is valid.
"""
from typing import Any, Dict, List, Mapping

from docgen.core.sizes import format_size
from docgen.validation import fields
from docgen.validation.primitives import is_provided

Violation = Dict[str, Any]

FORMATTERS_PARSE_MESSAGE = (
    "Formatters could not be parsed into formatters object. "
    "Expected a JSON document; functions are encoded as '_function_<name>|<source>'."
)
MANDATORY_MESSAGE = (
    "Invalid template. Mandatory fields missing. Require content, encodingType and fileType."
)
CONVERSION_MESSAGE = (
    "Unsupported file type conversion. A dictionary of supported input and output "
    "file types can be found at API endpoint '/fileTypes'"
)


def output_type_of(payload: Mapping[str, Any]) -> str:
    """The requested output type, ``pdf`` unless ``options.convertTo`` says otherwise."""
    opts = payload.get("options")
    if is_provided(opts) and isinstance(opts, Mapping) and is_provided(opts.get("convertTo")):
        return opts["convertTo"]
    return "pdf"


async def validate_carbone_shape(payload: Any) -> List[Violation]:
    """Validate ``data``, ``options`` and ``formatters`` of a render request."""
    if not isinstance(payload, Mapping):
        payload = {}
    errors: List[Violation] = []

    data = payload.get("data")
    if not fields.data(data):
        errors.append({"value": data, "message": "Invalid value `data`."})

    opts = payload.get("options")
    if not fields.options(opts):
        errors.append({"value": opts, "message": "Invalid value `options`."})
    elif is_provided(opts):
        convert_to = opts.get("convertTo")
        if not fields.convert_to(convert_to):
            errors.append({"value": convert_to, "message": "Invalid value `options.convertTo`."})
        report_name = opts.get("reportName")
        if not fields.report_name(report_name):
            errors.append({"value": report_name, "message": "Invalid value `options.reportName`."})

    formatters = payload.get("formatters")
    if not fields.formatters(formatters):
        errors.append({"value": formatters, "message": "Invalid value `formatters`."})
    elif is_provided(formatters) and not fields.formatters_parse(formatters):
        errors.append({"value": formatters, "message": FORMATTERS_PARSE_MESSAGE})

    return errors


async def validate_template_upload(payload: Any, size_limit: int) -> List[Violation]:
    """Validate a render request that carries its own template.

    Template checks only run once the base payload is valid. Past that point
    all template problems are reported together; the size check is skipped
    when content, encoding or file type is already known to be bad.
    """
    errors = await validate_carbone_shape(payload)
    if errors:
        return errors

    tmpl = payload.get("template")
    if not fields.template(tmpl):
        errors.append({"value": tmpl, "message": "Invalid value `template`."})
        return errors

    if not fields.template_mandatory(tmpl):
        errors.append({"message": MANDATORY_MESSAGE})
        return errors

    content = tmpl.get("content")
    encoding = tmpl.get("encodingType")
    file_type = tmpl.get("fileType")
    validate_size = True

    if not fields.file_type(file_type):
        errors.append({"value": file_type, "message": "Invalid value `template.fileType`."})
        validate_size = False

    if not fields.content(content):
        errors.append({"value": content, "message": "Invalid value `template.content`."})
        validate_size = False

    if not fields.encoding_type(encoding):
        errors.append({"value": encoding, "message": "Invalid value `template.encodingType`."})
        validate_size = False

    if validate_size and not await fields.size(content, encoding, size_limit):
        errors.append({
            "value": "Template document too large",
            "message": f"Template exceeds size limit of {format_size(size_limit)}.",
        })

    output_type = output_type_of(payload)
    if not fields.file_conversion(file_type, output_type):
        errors.append({"values": [file_type, output_type], "message": CONVERSION_MESSAGE})

    return errors
