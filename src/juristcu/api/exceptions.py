"""API-level exceptions."""

from fastapi import status


class AuthenticationError(Exception):
    """Missing (401) or wrong (403) API key."""

    def __init__(self, title: str, message: str, status_code: int):
        super().__init__(message)
        self.title = title
        self.message = message
        self.status_code = status_code

    @classmethod
    def missing(cls) -> "AuthenticationError":
        return cls(
            "API Key não fornecida",
            "Inclua a chave no header X-API-Key ou Authorization: Bearer <key>",
            status.HTTP_401_UNAUTHORIZED,
        )

    @classmethod
    def invalid(cls) -> "AuthenticationError":
        return cls(
            "API Key inválida",
            "A chave fornecida não é válida",
            status.HTTP_403_FORBIDDEN,
        )
