"""Prompt construction for the external transaction classifier.

This module builds:
- The system instructions listing the available categories, the obvious
  merchants and the JSON reply format.
- The user content describing one transaction plus two worked examples per
  category.
"""

from typing import Sequence

from fintrack.domain.classifier import ClassifierPrompt
from fintrack.domain.entities import Category, Transaction

# Worked examples shown to the classifier, two per category are used.
CATEGORY_EXAMPLES: dict[str, tuple[str, ...]] = {
    "Alimentação": (
        "Supermercado Extra - São Paulo",
        "McDonald's - Delivery",
        "Padaria do João - Centro",
        "iFood - Restaurante Italiano",
    ),
    "Transporte": (
        "Uber - Corrida",
        "Posto Shell - Gasolina",
        "Pedágio AutoBAn",
        "99 Pop - Viagem",
    ),
    "Saúde": (
        "Drogaria São Paulo",
        "Clínica Médica Dr. Silva",
        "Laboratório Fleury",
        "Farmácia Pague Menos",
    ),
    "Lazer": (
        "Cinemark Shopping",
        "Netflix Assinatura",
        "Spotify Premium",
        "Parque Ibirapuera",
    ),
    "Compras Online": (
        "Mercado Livre - Eletrônicos",
        "Amazon Brasil",
        "Magazine Luiza",
        "Shopee Brasil",
    ),
    "Vestuário": (
        "Zara - Shopping Center",
        "Nike Store",
        "Riachuelo Moda",
        "C&A Departamento",
    ),
    "Casa & Utilidades": (
        "Leroy Merlin",
        "Casa Bahia Móveis",
        "Tok&Stok Decoração",
        "Supermercado Limpeza",
    ),
    "Serviços": (
        "Google Drive Storage",
        "Microsoft Office 365",
        "Adobe Creative Cloud",
        "Dropbox Premium",
    ),
    "Educação": (
        "Udemy Curso Online",
        "Universidade Mensalidade",
        "Livros Amazon",
        "Coursera Assinatura",
    ),
}

EXAMPLES_PER_CATEGORY = 2

_OBVIOUS_MERCHANTS = """\
- AUTO POSTO, POSTO, SHELL, PETROBRAS, IPIRANGA = Transporte
- CARREFOUR, EXTRA, WALMART, ATACADÃO, MERCADO, SUPERMERCADO = Alimentação
- FARMACODE, DROGASIL, PACHECO, FARMÁCIA, DROGARIA = Saúde
- SUSHI BAR, RESTAURANTE, LANCHONETE, PIZZARIA = Alimentação
- CINEMA, CINEMARK, NETFLIX, SPOTIFY = Lazer
- UBER, 99, TAXI = Transporte
- ZARA, C&A, RIACHUELO = Vestuário"""


def build_system_instructions(categories: Sequence[Category]) -> str:
    """Return the system instructions for single-transaction classification."""
    categories_text = "\n".join(f"- {c.name}: {c.description or ''}".rstrip() for c in categories)

    return f"""Você é um especialista em categorização de gastos financeiros brasileiros.

Categorias disponíveis:
{categories_text}

ESTABELECIMENTOS ÓBVIOS (alta confiança 0.9+):
{_OBVIOUS_MERCHANTS}

Responda SEMPRE no formato JSON:
{{
    "category_name": "nome_da_categoria",
    "confidence": 0.95,
    "reasoning": "explicação_breve"
}}

Regras:
- Para estabelecimentos óbvios, use confidence 0.9 ou maior
- confidence deve ser um número entre 0.0 e 1.0
- Se não tiver certeza (confidence < 0.7), use "Outros"
- Seja preciso e considere o contexto brasileiro
- Analise tanto a descrição quanto o estabelecimento
- Priorize o nome do estabelecimento sobre a descrição da transação"""


def build_examples() -> str:
    lines: list[str] = []
    for category, examples in CATEGORY_EXAMPLES.items():
        lines.append(f"**{category}:**")
        lines.extend(f"- {example}" for example in examples[:EXAMPLES_PER_CATEGORY])
    return "\n".join(lines)


def build_user_content(transaction: Transaction) -> str:
    """Describe one transaction and ask for its category."""
    return f"""Analise esta transação e classifique na categoria mais apropriada:

Descrição: {transaction.description}
Estabelecimento: {transaction.establishment or ''}
Valor: R$ {transaction.amount}
Data: {transaction.date.strftime('%d/%m/%Y')}

Exemplos de classificações similares:
{build_examples()}

Classifique esta transação:"""


def build_prompt(transaction: Transaction, categories: Sequence[Category]) -> ClassifierPrompt:
    """Build the full classifier prompt for one transaction."""
    return ClassifierPrompt(
        system=build_system_instructions(categories),
        user=build_user_content(transaction),
    )
