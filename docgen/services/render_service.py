import asyncio
import logging
import os
import re
import tempfile
import time
import zipfile
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, Optional

import aiofiles
from docx.opc.exceptions import PackageNotFoundError
from docxtpl import DocxTemplate
from jinja2 import Undefined
from jinja2.exceptions import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from docgen.core.config import settings
from docgen.core.errors import ConversionError, TemplateRenderError
from docgen.services.file_types import media_type_for

logger = logging.getLogger(__name__)

TEXT_TEMPLATE_TYPES = {"csv", "html", "md", "txt", "xml"}
DEFAULT_REPORT_NAME = "report"
_UNSAFE_NAME_CHARS = re.compile(r'[\\/"\r\n]')


@dataclass
class RenderedDocument:
    content: bytes
    filename: str
    output_type: str
    media_type: str
    generation_time: float  # milliseconds


def build_context(data: Any) -> Dict[str, Any]:
    """Template context: top-level keys of ``data`` plus ``d`` for the whole value."""
    context = dict(data) if isinstance(data, dict) else {}
    context["d"] = data
    return context


class RenderService:
    def __init__(self, soffice_path: str = "soffice", timeout: float = 60.0):
        self.soffice_path = soffice_path
        self.timeout = timeout
        self.env = SandboxedEnvironment(undefined=Undefined, autoescape=False)
        self.html_env = SandboxedEnvironment(undefined=Undefined, autoescape=True)

    async def render(
        self,
        template: bytes,
        file_type: str,
        data: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> RenderedDocument:
        """Render ``template`` with ``data`` and convert it to the requested type."""
        options = options or {}
        file_type = file_type.lower()
        output_type = (options.get("convertTo") or "pdf").lower()
        context = build_context(data)

        started = time.perf_counter()
        if file_type == "docx":
            rendered = await asyncio.to_thread(self.render_docx, template, context)
        elif file_type in TEXT_TEMPLATE_TYPES:
            rendered = self.render_text(template, context, html=file_type == "html")
        else:
            raise TemplateRenderError(
                message=f"Rendering of '{file_type}' templates is not supported",
                error_type="unsupported_template_type",
                details={"fileType": file_type},
            )

        if output_type != file_type:
            rendered = await self.convert(rendered, file_type, output_type)
        generation_time = (time.perf_counter() - started) * 1000

        filename = f"{self.report_name(options.get('reportName'), context)}.{output_type}"
        logger.info(
            "Rendered %s -> %s (%d bytes) in %.1f ms",
            file_type, output_type, len(rendered), generation_time,
        )
        return RenderedDocument(
            content=rendered,
            filename=filename,
            output_type=output_type,
            media_type=media_type_for(output_type),
            generation_time=generation_time,
        )

    def render_docx(self, template: bytes, context: Dict[str, Any]) -> bytes:
        try:
            doc = DocxTemplate(BytesIO(template))
            doc.render(context, jinja_env=self.env)
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as exc:
            raise TemplateRenderError(
                message="Template is not a valid docx document",
                error_type="invalid_template",
                details={"error": str(exc)},
            ) from exc
        except TemplateError as exc:
            raise TemplateRenderError(
                message=f"Template error: {exc}",
                error_type="template_syntax_error",
                details={"line": getattr(exc, "lineno", None)},
            ) from exc
        output = BytesIO()
        doc.save(output)
        return output.getvalue()

    def render_text(self, template: bytes, context: Dict[str, Any], html: bool = False) -> bytes:
        try:
            source = template.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateRenderError(
                message="Text template must be UTF-8 encoded",
                error_type="invalid_template",
                details={"error": str(exc)},
            ) from exc
        env = self.html_env if html else self.env
        try:
            return env.from_string(source).render(context).encode("utf-8")
        except TemplateError as exc:
            raise TemplateRenderError(
                message=f"Template error: {exc}",
                error_type="template_syntax_error",
                details={"line": getattr(exc, "lineno", None)},
            ) from exc

    def report_name(self, report_name: Optional[str], context: Dict[str, Any]) -> str:
        """Output file stem; ``reportName`` may itself reference the data."""
        if not report_name:
            return DEFAULT_REPORT_NAME
        try:
            name = self.env.from_string(report_name).render(context)
        except TemplateError as exc:
            raise TemplateRenderError(
                message=f"Invalid reportName template: {exc}",
                error_type="report_name_error",
                details={"reportName": report_name},
            ) from exc
        name = _UNSAFE_NAME_CHARS.sub("_", name).strip()
        return name or DEFAULT_REPORT_NAME

    async def convert(self, content: bytes, input_type: str, output_type: str) -> bytes:
        """Convert a rendered document with LibreOffice in a scratch directory."""
        with tempfile.TemporaryDirectory(prefix="docgen-") as workdir:
            source = os.path.join(workdir, f"document.{input_type}")
            target = os.path.join(workdir, f"document.{output_type}")
            async with aiofiles.open(source, "wb") as f:
                await f.write(content)

            try:
                proc = await asyncio.create_subprocess_exec(
                    self.soffice_path, "--headless", "--convert-to", output_type,
                    "--outdir", workdir, source,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                logger.error("Could not start %s: %s", self.soffice_path, exc)
                raise ConversionError(
                    message="Document converter is unavailable",
                    error_type="converter_unavailable",
                    details={"converter": self.soffice_path},
                ) from exc

            try:
                _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError as exc:
                proc.kill()
                await proc.wait()
                raise ConversionError(
                    message=f"Conversion {input_type} -> {output_type} timed out",
                    error_type="conversion_timeout",
                    details={"timeout": self.timeout},
                ) from exc

            if proc.returncode != 0 or not os.path.exists(target):
                logger.error(
                    "Conversion %s -> %s failed (exit %s): %s",
                    input_type, output_type, proc.returncode,
                    stderr.decode("utf-8", errors="ignore")[:500],
                )
                raise ConversionError(
                    message=f"Conversion {input_type} -> {output_type} failed",
                    error_type="conversion_failed",
                    details={"returncode": proc.returncode},
                )

            async with aiofiles.open(target, "rb") as f:
                return await f.read()

render_service = RenderService(settings.SOFFICE_PATH, settings.CONVERSION_TIMEOUT_SECONDS)
