from typing import Any, Dict, List, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting cannot be resolved."""


class ValidationFailed(Exception):
    """Request payload failed validation; carries every violation found."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__("Validation failed")


class DocumentProcessingError(Exception):
    """Base class for document processing errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_type: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class TemplateRenderError(DocumentProcessingError):
    """Template could not be rendered against the supplied data"""
    status_code = 422


class ConversionError(DocumentProcessingError):
    """Rendered document could not be converted to the requested type"""
    status_code = 500


class TemplateNotFoundError(DocumentProcessingError):
    status_code = 404

    def __init__(self, template_id: str):
        super().__init__(
            message=f"Template '{template_id}' not found",
            error_type="template_not_found",
            details={"templateId": template_id},
        )
