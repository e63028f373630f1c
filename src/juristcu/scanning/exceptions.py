"""
Scan request exceptions.

Both are raised before any provider call is made. `title` is the short
error label the API reports next to the message.
"""

from typing import Any


class ScanError(Exception):
    """Base exception for scan request errors."""

    title = "Erro na análise"

    def __init__(self, message: str, details: dict[str, Any] | None = None, title: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if title:
            self.title = title


class InputValidationError(ScanError):
    """Case description missing, not a string, or too short."""

    title = "Parâmetro inválido"


class CorpusEmpty(ScanError):
    """No processable document to scan."""

    title = "Nenhum acórdão encontrado"

    def __init__(self, message: str = "Não há acórdãos com texto processado no banco de dados"):
        super().__init__(message)
