import asyncio
from typing import Optional

from playwright.async_api import Page

from maps_places.config import CrawlSettings
from maps_places.models import ResolveOutcome, ResolverState
from maps_places.utils import (
    log_info, log_warning, log_debug, format_search_url, first_two_words_match,
    is_search_url, is_place_url, PLACE_URL_MARKER
)

RESULT_LINKS_QUERY = f"xpath=//*[contains(@href,'{PLACE_URL_MARKER}')]"


async def navigate(page: Page, url: str, settings: CrawlSettings) -> None:
    """
    Navega até a URL e espera o carregamento da página
    """
    await page.goto(url, timeout=settings.navigation_timeout_ms)
    await page.wait_for_load_state("load", timeout=settings.navigation_timeout_ms)


async def follow_matching_result(page: Page, query: str, settings: CrawlSettings) -> Optional[str]:
    """
    Percorre os links de resultado e abre o primeiro cujo aria-label começa
    com as mesmas duas palavras da busca. Retorna o href visitado, se houver.
    """
    links = await page.query_selector_all(RESULT_LINKS_QUERY)
    log_debug(f"{len(links)} links de resultado para '{query}'")

    for link in links:
        label = await link.get_attribute("aria-label")
        if not first_two_words_match(query, label or ""):
            continue

        href = await link.get_attribute("href")
        if not href:
            continue

        log_info(f"Abrindo resultado '{label}' para a busca '{query}'")
        await navigate(page, href, settings)
        return href

    return None


async def resolve_listing(page: Page, query: str, settings: CrawlSettings) -> ResolveOutcome:
    """
    Abre a busca do Google Maps e tenta chegar à página de um único local.

    A página de busca às vezes abre o local sozinha e às vezes precisa de um
    clique no resultado, então o laço observa a URL a cada segundo até sair da
    busca ou atingir o limite de iterações.
    """
    search_url = format_search_url(query, settings.language)
    log_info(f"Visitando: {search_url}")
    await navigate(page, search_url, settings)

    state = ResolverState.SEARCHING
    current_url = page.url
    iterations = 0

    while is_search_url(current_url):
        iterations += 1
        current_url = page.url

        # A página já reagiu à busca: procura o resultado correspondente
        if current_url != search_url and is_search_url(current_url):
            state = ResolverState.NAVIGATING
            await follow_matching_result(page, query, settings)

        if is_place_url(current_url):
            state = ResolverState.RESOLVED
            break

        if iterations > settings.resolve_max_iterations:
            state = ResolverState.ABORTED
            log_warning(f"Limite de {settings.resolve_max_iterations} iterações atingido para '{query}'")
            break

        await asyncio.sleep(settings.resolve_delay)

    if is_search_url(current_url):
        log_info(f"Pulando: {query}, local não encontrado.")
        return ResolveOutcome(query=query, state=ResolverState.NOT_FOUND, url=current_url, iterations=iterations)

    if state != ResolverState.RESOLVED:
        log_debug(f"Busca '{query}' saiu do estado {state.value} direto para o local")

    log_info(f"URL atual: {current_url}")
    return ResolveOutcome(query=query, state=ResolverState.RESOLVED, url=current_url, iterations=iterations)
