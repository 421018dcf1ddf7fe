import asyncio
from typing import List

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from maps_places.config import CrawlSettings
from maps_places.crawler import resolve_listing
from maps_places.extractor import extract_place_details
from maps_places.models import CrawlResult, CrawlSummary
from maps_places.utils import (
    log_info, log_exception, handle_exceptions, output_results, print_summary
)


@handle_exceptions(message="Erro ao fechar a página", default_return=None)
async def close_page(page: Page) -> None:
    await page.close()


@handle_exceptions(message="Erro ao fechar o navegador", default_return=None)
async def close_browser(browser: Browser) -> None:
    await browser.close()


async def crawl_place(context: BrowserContext, query: str, settings: CrawlSettings) -> CrawlResult:
    """
    Executa uma busca completa em uma página própria: resolve o local e extrai
    os detalhes. Qualquer erro vira um CrawlResult com status "failed" para não
    derrubar as outras tarefas.
    """
    page = None
    try:
        page = await context.new_page()
        await page.set_viewport_size({"width": 1366, "height": 768})

        outcome = await resolve_listing(page, query, settings)
        if not outcome.resolved:
            return CrawlResult.not_found(query)

        place = await extract_place_details(page, outcome.url, settings)
        log_info(f"Local extraído para '{query}': {place.name} ({len(place.reviews)} avaliações lidas)")
        return CrawlResult.ok(query, place)
    except Exception as e:
        log_exception(f"Erro ao processar a busca '{query}': {str(e)}")
        return CrawlResult.failed(query, str(e) or e.__class__.__name__)
    finally:
        if page is not None:
            await close_page(page)


async def gather_results(context: BrowserContext, settings: CrawlSettings) -> List[CrawlResult]:
    """
    Cria uma tarefa por busca, todas ao mesmo tempo, e coleta exatamente uma
    resposta por tarefa na ordem em que terminam.
    """
    tasks = [
        asyncio.create_task(crawl_place(context, query, settings))
        for query in settings.queries
    ]
    log_info(f"Iniciadas {len(tasks)} tarefas de busca")

    results: List[CrawlResult] = []
    for finished in asyncio.as_completed(tasks):
        result = await finished
        results.append(result)
        log_info(f"Tarefas concluídas: {len(results)}/{len(tasks)}")

    return results


async def crawl_places(settings: CrawlSettings) -> CrawlSummary:
    """
    Abre um navegador compartilhado por todas as buscas e executa o crawl
    """
    if not settings.queries:
        log_info("Nenhuma busca informada")
        return CrawlSummary()

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=settings.headless)
        try:
            context = await browser.new_context(user_agent=settings.user_agent, locale=settings.language)
            results = await gather_results(context, settings)
        finally:
            await close_browser(browser)

    return CrawlSummary.from_results(results)


async def run_crawl(settings: CrawlSettings, write_output: bool = True) -> CrawlSummary:
    """
    Executa o crawl, imprime o resumo das buscas puladas e grava o places.json.
    Um erro na gravação interrompe a execução.
    """
    summary = await crawl_places(settings)

    print_summary(summary.not_found, summary.failed)
    log_info(
        f"{len(summary.places)} locais extraídos, {len(summary.not_found)} não encontrados, "
        f"{len(summary.failed)} com erro"
    )

    if write_output:
        output_results(summary.places, settings.output_path)

    return summary
