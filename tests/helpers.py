"""Test helpers: scripted provider clients, document factory, canned replies."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from juristcu.llm.exceptions import ProviderCallError
from juristcu.models.domain import Document
from juristcu.models.enums import ProviderId


YES = '{"atende": true, "justificativa": "Critério atendido"}'
NO = '{"atende": false, "justificativa": "Critério não atendido"}'

CASE_TEXT = (
    "Prefeitura municipal contratou empresa de engenharia por dispensa de licitação "
    "sem justificativa de emergência, com sobrepreço identificado pela auditoria."
)

# Small taxonomy: one 5-criterion and one 3-criterion subcategory
SMALL_TAXONOMY = {
    "Categoria A": {
        "Subcategoria A1": (
            "CRITERIO_A_1",
            "CRITERIO_A_2",
            "CRITERIO_A_3",
            "CRITERIO_A_4",
            "CRITERIO_A_5",
        ),
    },
    "Categoria B": {
        "Subcategoria B1": (
            "CRITERIO_B_1",
            "CRITERIO_B_2",
            "CRITERIO_B_3",
        ),
    },
}
SMALL_TAXONOMY_CRITERIA = 8


Reply = Union[str, Exception]


@dataclass
class RecordedCall:
    provider: ProviderId
    credential: str
    prompt: str


class FakeProviderClient:
    """
    Scripted stand-in for a provider client.

    Replies are consumed from `replies` first, then produced by `responder`
    (called with prompt and credential), then `default`. An Exception reply
    is raised instead of returned.
    """

    def __init__(
        self,
        provider: ProviderId,
        call_log: list,
        replies: tuple = (),
        responder: Optional[Callable[[str, str], Reply]] = None,
        default: Reply = YES,
    ):
        self.provider = provider
        self.call_log = call_log
        self.replies = list(replies)
        self.responder = responder
        self.default = default
        self.closed = False

    async def complete(self, prompt: str, temperature: float, max_tokens: int, credential: str) -> str:
        self.call_log.append(RecordedCall(self.provider, credential, prompt))
        if self.replies:
            reply = self.replies.pop(0)
        elif self.responder is not None:
            reply = self.responder(prompt, credential)
        else:
            reply = self.default
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self):
        self.closed = True


def call_error(provider: ProviderId, status_code: Optional[int] = 429, message: str = "Too Many Requests") -> ProviderCallError:
    return ProviderCallError(provider, message, status_code=status_code)


def make_document(index: int = 1, **overrides: Any) -> Document:
    data = {
        "id": index,
        "numero_acordao": 1000 + index,
        "ano_acordao": 2024,
        "titulo": f"Acórdão {1000 + index}/2024 - Plenário",
        "sumario": "Representação. Contratação direta. Ausência de justificativa de preço.",
        "texto_pdf": "RELATÓRIO. Trata-se de representação acerca de contratação direta. " * 50,
        "data_sessao": f"2024-06-{30 - index:02d}" if index < 30 else "2024-01-01",
        "relator": "Ministro Relator",
        "colegiado": "Plenário",
        "url_acordao": f"https://pesquisa.apps.tcu.gov.br/documento/acordao-completo/{1000 + index}",
    }
    data.update(overrides)
    return Document(**data)
