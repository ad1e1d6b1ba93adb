"""Keyword table used when the external classifier gives no usable answer.

Keywords are matched as substrings of the lower-cased description and
establishment. The longest keyword found wins, so "mercado livre" beats
"mercado" and "barbearia" beats "bar"; ties go to the earlier entry.
"""

from typing import Container, Optional

KEYWORD_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Alimentação",
        (
            # supermercados
            "supermercado", "mercado", "carrefour", "extra", "pao de acucar", "walmart",
            "atacadao", "assai", "makro", "tenda", "guanabara", "mondial",
            # mercearias
            "mercearia", "emporio", "hortifruti", "frutaria", "quitanda", "mercadinho",
            "minimercado",
            "acougue", "peixaria", "avicola", "casa de carnes",
            "padaria", "panificadora", "confeitaria", "bakery",
            # restaurantes
            "restaurante", "lanchonete", "lancheria", "pizzaria", "hamburgueria", "sorveteria",
            "doceria", "cafeteria", "cafe", "bistrô", "bistro",
            "sushi", "japonesa", "pizza", "hamburguer", "burger", "pastel", "tapioca", "açai",
            "milk shake",
            # fast food
            "mcdonald", "burger king", "subway", "kfc", "pizza hut", "dominos", "bobs",
            "giraffas", "habib",
            # delivery
            "delivery", "ifood", "uber eats", "rappi", "zé delivery", "james delivery",
        ),
    ),
    (
        "Transporte",
        (
            "posto", "auto posto", "combustivel", "gasolina", "etanol", "diesel", "shell",
            "petrobras", "ipiranga", "alesat", "esso", "texaco", "raizen",
            "metro", "onibus", "viacao", "rodoviaria", "terminal", "bilhete unico",
            "cartao transporte",
            "uber", "cabify", "99", "taxi", "moto taxi", "bla bla car",
            "pedagio", "estacionamento", "valet", "zona azul", "rotativo", "oficina",
            "auto center", "pneu", "oleo",
        ),
    ),
    (
        "Saúde",
        (
            "farmacia", "drogaria", "farmacode", "drogasil", "pacheco", "pague menos",
            "ultrafarma", "droga raia", "sao joao", "nissei", "venancio", "popular", "indiana",
            "hospital", "clinica", "medico", "dentista", "odontologo", "oftalmologista",
            "cardiologista", "dermatologista", "psicólogo", "fisioterapeuta",
            "laboratorio", "fleury", "dasa", "sabin", "hermes pardini", "exame", "raio x",
            "ultrassom", "ressonancia",
            "unimed", "hapvida", "sulamerica", "bradesco saude", "amil", "golden cross",
            "prevent senior",
        ),
    ),
    (
        "Lazer",
        (
            "cinema", "cinemark", "uci", "movie", "ingresso", "teatro", "show", "espetaculo",
            "concerto",
            "netflix", "spotify", "amazon prime", "disney", "globoplay", "paramount", "hbo",
            "apple tv", "youtube premium", "deezer",
            "bar", "pub", "balada", "festa", "clube", "boteco", "choperia", "cervejaria",
            "parque", "shopping", "playland", "game", "boliche", "sinuca", "bilhar", "karaoke",
        ),
    ),
    (
        "Compras Online",
        (
            "mercado livre", "amazon", "magazine luiza", "magalu", "americanas", "shopee",
            "aliexpress", "netshoes", "submarino", "casas bahia.com", "pontofrio.com",
        ),
    ),
    (
        "Vestuário",
        (
            "zara", "c&a", "riachuelo", "renner", "marisa", "leader", "cea", "youcom",
            "forever 21", "hering", "malwee",
            "nike", "adidas", "puma", "havaianas", "melissa", "grendene", "olympikus",
            "mizuno", "arezzo", "schutz",
            "roupa", "calcado", "sapato", "tenis", "sandalia", "bota", "chinelo", "moda",
            "boutique",
        ),
    ),
    (
        "Casa & Utilidades",
        (
            "leroy merlin", "telhanorte", "dicico", "construcao", "material", "tinta",
            "eletrico", "hidraulica", "ferragem", "parafuso",
            "tok stok", "etna", "casa bahia", "ponto frio", "fast shop", "mobly",
            "madeira madeira", "moveis", "decoracao", "estofado",
            "limpeza", "detergente", "sabao", "amaciante", "desinfetante", "utilidades",
            "bazar", "armarinho",
        ),
    ),
    (
        "Serviços",
        (
            "google", "microsoft", "office 365", "adobe", "dropbox", "icloud", "onedrive",
            "correios", "sedex", "envio", "frete",
            "cartorio", "despachante", "advogado", "contador", "contabilidade", "juridico",
            "barbeiro", "barbearia", "cabeleireiro", "salao", "estetica", "manicure", "pedicure",
            "massagem", "spa",
        ),
    ),
    (
        "Educação",
        ("escola", "faculdade", "curso", "livro", "udemy", "coursera"),
    ),
)


def match_keyword(text: str, category_names: Optional[Container[str]] = None) -> Optional[tuple[str, str]]:
    """Return ``(category_name, keyword)`` for the longest keyword found in ``text``.

    ``text`` is lower-cased before matching. When ``category_names`` is given,
    rules for categories outside it are skipped.
    """
    text = text.lower()
    best: Optional[tuple[str, str]] = None
    for category_name, keywords in KEYWORD_RULES:
        if category_names is not None and category_name not in category_names:
            continue
        for keyword in keywords:
            if keyword in text and (best is None or len(keyword) > len(best[1])):
                best = (category_name, keyword)
    return best
