from typing import Optional

from playwright.async_api import ElementHandle, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from maps_places.utils import log_debug

DEFAULT_TIMEOUT_MS = 1000


def aria_label_query(label: str) -> str:
    """
    Monta a consulta XPath para elementos cujo aria-label contém o texto
    """
    return f"xpath=//*[contains(@aria-label,'{label}')]"


async def find_optional(page: Page, selector: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Optional[ElementHandle]:
    """
    Procura o seletor na página por no máximo timeout_ms.

    Retorna None apenas quando o tempo se esgota; qualquer outro erro do
    Playwright (seletor inválido, página fechada) é propagado.
    """
    try:
        return await page.wait_for_selector(selector, timeout=timeout_ms, state="attached")
    except PlaywrightTimeoutError:
        log_debug(f"Elemento não encontrado em {timeout_ms}ms: {selector}")
        return None


async def element_is_available(page: Page, selector: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    return await find_optional(page, selector, timeout_ms) is not None


async def aria_with_label(page: Page, label: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    """
    Retorna o aria-label do primeiro elemento que contém o texto, ou "" se
    nenhum aparecer dentro do tempo limite
    """
    element = await find_optional(page, aria_label_query(label), timeout_ms)
    if element is None:
        return ""
    return await element.get_attribute("aria-label") or ""


async def aria_without_label(page: Page, label: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    """
    Como aria_with_label, mas remove o próprio rótulo do valor
    (ex.: "Address: Rua X, 10" -> "Rua X, 10")
    """
    text = await aria_with_label(page, label, timeout_ms)
    return text.replace(label, "").strip()
