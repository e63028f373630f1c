"""
Static classification taxonomy.

Category -> Subcategory -> ordered criteria. Each criterion is a yes/no rule
an LLM judges against a ruling; a subcategory's score is the share of its
criteria judged satisfied. The taxonomy is fixed at build time and wrapped in
read-only mappings so no code path can mutate it during a scan.
"""

from types import MappingProxyType
from typing import Iterator, Mapping

Taxonomy = Mapping[str, Mapping[str, tuple[str, ...]]]


def _freeze(raw: dict[str, dict[str, tuple[str, ...]]]) -> Taxonomy:
    return MappingProxyType(
        {category: MappingProxyType(dict(subs)) for category, subs in raw.items()}
    )


CRITERIOS: Taxonomy = _freeze({
    "Licitações e Contratos": {
        "Irregularidades no processo licitatório": (
            "Envolve um procedimento de compra pública ou contratação regido pela Lei de Licitações",
            "Há indícios de violação aos princípios licitatórios (legalidade, isonomia, seleção da melhor proposta)",
            "O caso descreve alguma falha procedimental ou ilegalidade formal durante a licitação",
            "Resultou ou poderia resultar em prejuízo à competitividade ou à vantajosidade da contratação",
        ),
        "Dispensa ou inexigibilidade indevida": (
            "O caso refere-se a uma contratação direta (sem licitação)",
            "Não se comprovam os requisitos legais exigidos para justificar a contratação direta",
            "O objeto contratado e as circunstâncias indicam que seria cabível licitação",
            "Existe potencial dano ao erário ou favoritismo decorrente dessa contratação direta irregular",
        ),
        "Execução contratual e superfaturamento": (
            "O caso envolve um contrato administrativo já firmado e sua fase de execução",
            "Relata-se inadimplemento, defeito ou alteração irregular na execução do contrato",
            "Há indícios de sobrepreço ou superfaturamento",
            "A situação gerou ou pode gerar prejuízo financeiro à administração",
            "Falhas de supervisão contratual estão presentes",
        ),
    },
    "Gestão de Pessoal (Atos de Pessoal)": {
        "Admissão irregular de servidores (incluindo nepotismo)": (
            "Trata de preenchimento de cargo, emprego ou função pública",
            "Não foi observado o rito legal correto para provimento",
            "Há indicação de pessoal não qualificado ou com vínculo proibido (nepotismo)",
            "O princípio da impessoalidade/isonomia foi violado",
            "A decisão esperada do TCU seria pela ilegalidade do ato de admissão",
        ),
        "Concessão irregular de aposentadorias e pensões": (
            "O caso envolve a análise de um ato concessório de aposentadoria ou pensão",
            "Existe descumprimento de requisitos legais para o benefício",
            "Identifica-se pagamento indevido ou benefício mais vantajoso do que o devido",
            "Há indicação de potencial dano ao erário futuro",
            "O caso aponta para a necessidade de correção ou cancelamento do ato",
        ),
        "Acumulação indevida de cargos ou pagamentos irregulares": (
            "Descreve um agente público ocupando dois ou mais cargos simultaneamente",
            "A acumulação não se enquadra nas exceções constitucionais permitidas",
            "Pode envolver pagamentos indevidos acima do teto constitucional",
            "O caso sinaliza ofensa aos princípios da legalidade e moralidade administrativa",
            "A situação requer cessação de um dos vínculos ou devolução de valores",
        ),
    },
    "Prestação de Contas e Tomada de Contas Especial": {
        "Omissão ou não prestação de contas": (
            "Refere-se a recursos públicos com dever formal de prestar contas",
            "Constata-se que as contas não foram apresentadas no prazo legal",
            "A não prestação de contas é injustificada",
            "Existe potencial de dano ou irregularidade não esclarecida",
            "O desfecho típico é a instauração de Tomada de Contas Especial",
        ),
        "Prestação de contas irregular ou incompleta": (
            "O responsável apresentou as contas mas com falhas materiais",
            "Há despesas não comprovadas adequadamente ou fora do objeto previsto",
            "Auditoria identificou irregularidades quantitativas/qualitativas",
            "As falhas configuram violação a normas financeiras",
            "É necessário imputar responsabilidades ou ajustes",
        ),
    },
    "Convênios e Transferências Voluntárias": {
        "Execução não realizada ou deficiente do objeto conveniado": (
            "Trata-se de recursos federais transferidos via convênio ou instrumento similar",
            "O objeto pactuado não foi totalmente executado conforme previsto",
            "Não houve justificativa aceitável para a não execução integral",
            "Há indícios de responsabilidade do convenente pela falha",
            "O resultado é potencial prejuízo ao erário federal",
        ),
        "Desvio de finalidade ou uso indevido dos recursos transferidos": (
            "Refere-se a dinheiro público transferido com destinação vinculada",
            "Os recursos foram empregados em finalidade diversa da pactuada",
            "Tal desvio não foi autorizado formalmente pelo concedente",
            "A situação implicou benefício indevido ou prejuízo ao fim público",
            "Espera-se responsabilização com restituição dos valores desviados",
        ),
        "Prestação de contas do convênio irregular": (
            "A prestação de contas do convênio foi julgada irregular",
            "Pode haver omissão do convenente em prestar contas",
            "Não comprovação dos gastos conforme pactuado",
            "A consequência típica é a instauração de tomada de contas especial",
            "Responsabilização do gestor local omisso",
        ),
    },
    "Gestão Administrativa e Controle Interno": {
        "Falhas de controles internos e auditoria": (
            "Irregularidades que poderiam ter sido evitadas com controles eficazes",
            "Identifica-se ausência ou insuficiência de procedimentos de controle",
            "Há menção a procedimentos obrigatórios não realizados",
            "A falha de controle contribuiu diretamente para o prejuízo",
            "A correção requer reforço dos controles pela entidade",
        ),
        "Descumprimento de normas e deveres administrativos": (
            "Envolve não cumprimento de mandamento expresso em lei ou norma",
            "Exemplos típicos podem ser identificados (planos, relatórios, limites)",
            "A inação gerou ou pode gerar consequências negativas",
            "Há responsabilidade do gestor em cumprir aquele dever legal",
            "O caso se alinha a decisões em que o TCU emite determinações corretivas",
        ),
        "Uso inapropriado de recursos públicos (descontrole)": (
            "Uso indevido de verbas dentro da própria administração",
            "Despesas fora da competência do órgão ou alheia ao interesse público",
            "Falta de economicidade ou desperdícios",
            "Despesas irregulares por falha de gestão",
            "Deficiência de controle interno que permitiu o gasto errado",
        ),
    },
})


def iter_subcategories(taxonomy: Taxonomy = CRITERIOS) -> Iterator[tuple[str, str, tuple[str, ...]]]:
    """Yield (category, subcategory, criteria) in declaration order."""
    for category, subcategories in taxonomy.items():
        for subcategory, criteria in subcategories.items():
            yield category, subcategory, criteria


def categories(taxonomy: Taxonomy = CRITERIOS) -> list[str]:
    return list(taxonomy.keys())


def count_criteria(taxonomy: Taxonomy = CRITERIOS) -> int:
    """Number of LLM evaluations one document costs."""
    return sum(len(criteria) for _, _, criteria in iter_subcategories(taxonomy))
