"""Localized messages for moneta (pt-BR, en-US, es-ES).

Messages are looked up by resource key. A missing translation falls back to
en-US, and an unknown key is returned as-is.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Language(str, Enum):
    PT_BR = "pt-BR"
    EN_US = "en-US"
    ES_ES = "es-ES"


DEFAULT_LANGUAGE = Language.PT_BR
FALLBACK_LANGUAGE = Language.EN_US

_LANGUAGE_BY_TAG = {language.value.lower(): language for language in Language}
_LANGUAGE_BY_PRIMARY_SUBTAG = {
    "en": Language.EN_US,
    "es": Language.ES_ES,
    "pt": Language.PT_BR,
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

MESSAGES: dict[Language, dict[str, str]] = {
    Language.EN_US: {
        "ACCOUNT_NOT_FOUND": "Account {id} not found.",
        "CREDIT_CARD_NOT_FOUND": "Credit card {id} not found.",
        "CATEGORY_NOT_FOUND": "Category {id} not found.",
        "CATEGORY_NOT_FOUND_OR_INACTIVE": "Category {id} not found or inactive.",
        "SUBCATEGORY_NOT_FOUND": "Subcategory {id} not found.",
        "SUBCATEGORY_NOT_FOUND_OR_INACTIVE": "Subcategory {id} not found or inactive.",
        "TAG_NOT_FOUND": "Tag not found or inactive: {id}.",
        "TRANSACTION_NOT_FOUND": "Transaction {id} not found.",
        "CATEGORY_OR_SUBCATEGORY_REQUIRED": "A category or subcategory is required.",
        "DATA_ALREADY_EXISTS": "A record named '{name}' already exists.",
        "RESOURCE_IN_USE": "Cannot delete: {count} transaction(s) still reference it.",
        "INVALID_MONETARY_AMOUNT": "Invalid amount: {value}. Use digits with at most two decimals.",
        "INVALID_DATE": "Invalid date: {value}.",
        "INVALID_OPTION": "Invalid value '{value}' for {field}. Choose one of: {choices}.",
        "NOTHING_TO_UPDATE": "Nothing to update.",
        "NO_RECORDS_FOUND": "No records found.",
        "DATABASE_NOT_FOUND": "Database not found. Run 'moneta init' first.",
        "DATABASE_ERROR": "Database error: {error}",
        "CREATED": "Created {entity} {id}.",
        "UPDATED": "Updated {entity} {id}.",
        "DELETED": "Deleted {entity} {id}.",
        "PROFILE_UPDATED": "Profile updated.",
        "LOGS_PURGED": "Removed {count} log entries.",
    },
    Language.PT_BR: {
        "ACCOUNT_NOT_FOUND": "Conta {id} não encontrada.",
        "CREDIT_CARD_NOT_FOUND": "Cartão de crédito {id} não encontrado.",
        "CATEGORY_NOT_FOUND": "Categoria {id} não encontrada.",
        "CATEGORY_NOT_FOUND_OR_INACTIVE": "Categoria {id} não encontrada ou inativa.",
        "SUBCATEGORY_NOT_FOUND": "Subcategoria {id} não encontrada.",
        "SUBCATEGORY_NOT_FOUND_OR_INACTIVE": "Subcategoria {id} não encontrada ou inativa.",
        "TAG_NOT_FOUND": "Tag não encontrada ou inativa: {id}.",
        "TRANSACTION_NOT_FOUND": "Transação {id} não encontrada.",
        "CATEGORY_OR_SUBCATEGORY_REQUIRED": "Informe uma categoria ou subcategoria.",
        "DATA_ALREADY_EXISTS": "Já existe um registro chamado '{name}'.",
        "RESOURCE_IN_USE": "Não é possível excluir: {count} transação(ões) ainda fazem referência a ele.",
        "INVALID_MONETARY_AMOUNT": "Valor inválido: {value}. Use dígitos com no máximo duas casas decimais.",
        "INVALID_DATE": "Data inválida: {value}.",
        "INVALID_OPTION": "Valor '{value}' inválido para {field}. Escolha entre: {choices}.",
        "NOTHING_TO_UPDATE": "Nada para atualizar.",
        "NO_RECORDS_FOUND": "Nenhum registro encontrado.",
        "DATABASE_NOT_FOUND": "Banco de dados não encontrado. Execute 'moneta init' primeiro.",
        "DATABASE_ERROR": "Erro no banco de dados: {error}",
        "CREATED": "{entity} {id} criado(a).",
        "UPDATED": "{entity} {id} atualizado(a).",
        "DELETED": "{entity} {id} excluído(a).",
        "PROFILE_UPDATED": "Perfil atualizado.",
        "LOGS_PURGED": "{count} registro(s) de log removido(s).",
    },
    Language.ES_ES: {
        "ACCOUNT_NOT_FOUND": "Cuenta {id} no encontrada.",
        "CREDIT_CARD_NOT_FOUND": "Tarjeta de crédito {id} no encontrada.",
        "CATEGORY_NOT_FOUND": "Categoría {id} no encontrada.",
        "CATEGORY_NOT_FOUND_OR_INACTIVE": "Categoría {id} no encontrada o inactiva.",
        "SUBCATEGORY_NOT_FOUND": "Subcategoría {id} no encontrada.",
        "SUBCATEGORY_NOT_FOUND_OR_INACTIVE": "Subcategoría {id} no encontrada o inactiva.",
        "TAG_NOT_FOUND": "Etiqueta no encontrada o inactiva: {id}.",
        "TRANSACTION_NOT_FOUND": "Transacción {id} no encontrada.",
        "CATEGORY_OR_SUBCATEGORY_REQUIRED": "Se requiere una categoría o subcategoría.",
        "DATA_ALREADY_EXISTS": "Ya existe un registro llamado '{name}'.",
        "RESOURCE_IN_USE": "No se puede eliminar: {count} transacción(es) todavía lo referencian.",
        "INVALID_MONETARY_AMOUNT": "Importe inválido: {value}. Use dígitos con como máximo dos decimales.",
        "INVALID_DATE": "Fecha inválida: {value}.",
        "INVALID_OPTION": "Valor '{value}' inválido para {field}. Elija uno de: {choices}.",
        "NOTHING_TO_UPDATE": "Nada que actualizar.",
        "NO_RECORDS_FOUND": "No se encontraron registros.",
        "DATABASE_NOT_FOUND": "Base de datos no encontrada. Ejecute 'moneta init' primero.",
        "DATABASE_ERROR": "Error de base de datos: {error}",
        "CREATED": "{entity} {id} creado(a).",
        "UPDATED": "{entity} {id} actualizado(a).",
        "DELETED": "{entity} {id} eliminado(a).",
        "PROFILE_UPDATED": "Perfil actualizado.",
        "LOGS_PURGED": "{count} registro(s) de log eliminado(s).",
    },
}


@dataclass(frozen=True)
class LanguageRange:
    """One entry of an Accept-Language style list."""

    tag: str
    quality: float
    position: int


def _parse_quality(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        return 0.0
    if parsed != parsed or parsed < 0:
        return 0.0
    return min(parsed, 1.0)


def _parse_range(raw: str, position: int) -> LanguageRange | None:
    raw_tag, *params = raw.strip().split(";")
    # POSIX locales look like pt_BR.UTF-8
    tag = raw_tag.strip().split(".")[0].replace("_", "-").lower()
    if not tag:
        return None

    quality = 1.0
    for param in params:
        normalized = param.strip().lower()
        if normalized.startswith("q="):
            quality = _parse_quality(normalized[2:])
            break

    return LanguageRange(tag=tag, quality=quality, position=position)


def parse_language_ranges(value: str) -> list[LanguageRange]:
    """Parse a comma-separated language list, best quality first.

    Args:
        value: Header-style value such as "es;q=0.5, pt-BR".

    Returns:
        Ranges sorted by quality (descending) then declaration order.
    """
    ranges = []
    for position, part in enumerate(value.split(",")):
        parsed = _parse_range(part, position)
        if parsed is not None:
            ranges.append(parsed)
    return sorted(ranges, key=lambda r: (-r.quality, r.position))


def _supported(tag: str) -> Language | None:
    if tag == "*":
        return DEFAULT_LANGUAGE
    exact = _LANGUAGE_BY_TAG.get(tag)
    if exact:
        return exact
    return _LANGUAGE_BY_PRIMARY_SUBTAG.get(tag.split("-")[0])


def resolve_language(value: str | list[str] | None) -> Language:
    """Resolve a supported language from a language preference value.

    Args:
        value: Accept-Language style text, a POSIX locale, or a list of them.

    Returns:
        The best supported language, or DEFAULT_LANGUAGE.
    """
    if not value:
        return DEFAULT_LANGUAGE

    raw = ",".join(value) if isinstance(value, list) else value
    for language_range in parse_language_ranges(raw):
        if language_range.quality <= 0:
            continue
        resolved = _supported(language_range.tag)
        if resolved:
            return resolved

    return DEFAULT_LANGUAGE


def translate(key: str, language: Language | str | None = None, **params: Any) -> str:
    """Translate a resource key and interpolate named params.

    Args:
        key: Resource key, e.g. "ACCOUNT_NOT_FOUND".
        language: Target language; unknown values use the en-US table.
        **params: Values for {name} placeholders. Unknown placeholders are left intact.

    Returns:
        Localized message.
    """
    try:
        table = MESSAGES[Language(language)] if language else MESSAGES[FALLBACK_LANGUAGE]
    except ValueError:
        table = MESSAGES[FALLBACK_LANGUAGE]

    message = table.get(key) or MESSAGES[FALLBACK_LANGUAGE].get(key) or key
    if not params:
        return message

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        return str(params[name]) if name in params and params[name] is not None else match.group(0)

    return _PLACEHOLDER.sub(_replace, message)
