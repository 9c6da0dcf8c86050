from typing import Dict, List

# Template input type -> output types it can be rendered/converted to.
# Every target is itself requestable: "pdf" or one of the input types.
FILE_TYPES: Dict[str, List[str]] = {
    "csv": ["csv", "pdf", "txt"],
    "docx": ["docx", "html", "pdf", "txt"],
    "html": ["html", "pdf", "txt"],
    "md": ["html", "md", "pdf", "txt"],
    "txt": ["docx", "html", "pdf", "txt"],
    "xml": ["pdf", "txt", "xml"],
}

MEDIA_TYPES: Dict[str, str] = {
    "csv": "text/csv",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "html": "text/html",
    "md": "text/markdown",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "xml": "application/xml",
}


def media_type_for(file_type: str) -> str:
    return MEDIA_TYPES.get(file_type.lower(), "application/octet-stream")
