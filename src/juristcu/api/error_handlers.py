"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Bodies follow the public
contract: {"erro": <short label>, "mensagem": <explanation>, ...}.
"""

import logging
from datetime import datetime

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from juristcu.api.exceptions import AuthenticationError
from juristcu.persistence.exceptions import DocumentStoreError
from juristcu.scanning.exceptions import CorpusEmpty, InputValidationError

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/v1/health",
    "GET /api/v1/info",
    "GET /api/v1/estatisticas",
    "POST /api/v1/analisar-caso",
]


def _error_body(title: str, message: str, **extra) -> dict:
    return {
        "erro": title,
        "mensagem": message,
        **extra,
        "timestamp": datetime.utcnow().isoformat(),
    }


async def input_validation_error_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    """
    Handle invalid case descriptions.

    Maps to 400 Bad Request.
    """
    logger.info(
        "Rejected scan request",
        extra={"error": exc.message, "details": exc.details},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc.title, exc.message),
    )


async def corpus_empty_handler(request: Request, exc: CorpusEmpty) -> JSONResponse:
    """
    Handle an empty corpus.

    Maps to 404 Not Found.
    """
    logger.warning("Scan requested on an empty corpus")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body(exc.title, exc.message),
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """
    Handle missing/invalid API keys.

    Maps to 401 (missing) or 403 (invalid).
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.title, exc.message),
    )


async def document_store_error_handler(request: Request, exc: DocumentStoreError) -> JSONResponse:
    """
    Handle document store failures.

    Maps to 502 Bad Gateway (upstream database unavailable).
    """
    logger.error(
        "Document store error",
        extra={"error": exc.message, "details": exc.details},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body("Erro ao acessar o banco de dados", exc.message),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle malformed request bodies (invalid JSON, wrong field types).

    Maps to 400 Bad Request.
    """
    logger.warning(
        "Invalid request format",
        extra={"errors": exc.errors()},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            "Parâmetro inválido",
            "Corpo da requisição inválido",
            detalhes=[
                {"campo": ".".join(str(p) for p in error.get("loc", ())), "erro": error.get("msg")}
                for error in exc.errors()
            ],
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle routing errors.

    Unknown routes get a 404 listing the available endpoints.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                "Endpoint não encontrado",
                f"O endpoint {request.method} {request.url.path} não existe",
                endpoints_disponiveis=AVAILABLE_ENDPOINTS,
            ),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("Erro na requisição", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        extra={"error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Erro interno do servidor", "Ocorreu um erro inesperado"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    InputValidationError: input_validation_error_handler,
    CorpusEmpty: corpus_empty_handler,
    AuthenticationError: authentication_error_handler,
    DocumentStoreError: document_store_error_handler,
    RequestValidationError: request_validation_error_handler,
    StarletteHTTPException: http_exception_handler,
    Exception: generic_error_handler,
}
