import asyncio
from typing import List

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from maps_places.config import CrawlSettings
from maps_places.models import Place
from maps_places.page_queries import aria_label_query, aria_with_label, aria_without_label, find_optional
from maps_places.utils import (
    log_info, log_warning, log_debug, parse_int, get_stars_value, get_lat_lon,
    extract_stars_value, clean_review_text
)

TITLE_SELECTOR = "h1"
CATEGORY_SELECTOR = "button[jsaction='pane.rating.category']"
MORE_REVIEWS_QUERY = aria_label_query("More reviews")
REVIEW_ITEM_SELECTOR = "[jsaction='mouseover:pane.review.in; mouseout:pane.review.out']"
REVIEW_TEXT_CONTAINER = "div.MyEned"
EXPAND_REVIEW_SELECTOR = "[jsaction='pane.review.expandReview']"

STAR_LABELS = {
    "five_stars": "5 stars",
    "four_stars": "4 stars",
    "three_stars": "3 stars",
    "two_stars": "2 stars",
    "one_star": "1 star",
}


class MandatoryFieldError(RuntimeError):
    """Título ou categoria do local não encontrados na página."""


async def extract_mandatory_text(page: Page, selector: str, field: str, settings: CrawlSettings) -> str:
    try:
        element = await page.wait_for_selector(selector, timeout=settings.mandatory_timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise MandatoryFieldError(f"Campo obrigatório '{field}' não encontrado ({selector})") from exc
    if element is None:
        raise MandatoryFieldError(f"Campo obrigatório '{field}' não encontrado ({selector})")
    return (await element.inner_text()).strip()


async def load_all_reviews(page: Page, review_count: int, settings: CrawlSettings) -> int:
    """
    Clica em "More reviews" e rola a lista até renderizar review_count avaliações.

    O laço também para quando a contagem não muda por review_stall_rounds
    rodadas seguidas ou após review_max_scrolls rolagens; nesses casos as
    avaliações já carregadas são mantidas. Retorna a contagem renderizada.
    """
    more_reviews = await find_optional(page, MORE_REVIEWS_QUERY, settings.element_timeout_ms)
    if more_reviews is None:
        return 0

    await more_reviews.click()
    count = len(await page.query_selector_all(REVIEW_ITEM_SELECTOR))

    log_info("Rolando páginas de avaliações...")
    # A primeira recontagem acontece antes de qualquer rolagem e não conta como parada
    previous_count = None
    stalled_rounds = 0
    scrolls = 0

    while count < review_count:
        if scrolls >= settings.review_max_scrolls:
            log_warning(f"Limite de {settings.review_max_scrolls} rolagens atingido: {count}/{review_count} avaliações")
            break
        if stalled_rounds >= settings.review_stall_rounds:
            log_warning(f"Nenhuma avaliação nova após {stalled_rounds} rolagens: {count}/{review_count} avaliações")
            break

        items = await page.query_selector_all(REVIEW_ITEM_SELECTOR)
        count = len(items)
        log_info(f"Rolando avaliações: {count}/{review_count}")

        # Posiciona o mouse sobre a lista para que a rolagem aconteça no painel
        try:
            if items:
                await items[-1].hover()
            await page.mouse.wheel(0, settings.review_scroll_offset)
        except PlaywrightError as e:
            log_warning(f"Erro ao rolar avaliações, mantendo {count}/{review_count}: {str(e)}")
            break
        scrolls += 1

        if previous_count is None or count > previous_count:
            stalled_rounds = 0
        else:
            stalled_rounds += 1
        previous_count = count

        await asyncio.sleep(settings.review_scroll_delay)

    return count


async def parse_reviews(page: Page, settings: CrawlSettings) -> List[str]:
    """
    Expande e lê o texto de cada avaliação renderizada, na ordem da página.
    Uma avaliação com erro é ignorada sem interromper as demais.
    """
    reviews: List[str] = []
    containers = await page.query_selector_all(REVIEW_TEXT_CONTAINER)
    if not containers:
        return reviews

    log_info("Processando avaliações...")
    for container in containers:
        try:
            expand = await container.query_selector(EXPAND_REVIEW_SELECTOR)
            if expand is not None:
                await expand.click()
                await asyncio.sleep(settings.review_expand_delay)

            span = await container.query_selector("span")
            if span is None:
                continue

            reviews.append(clean_review_text(await span.inner_text()))
        except PlaywrightError as e:
            log_warning(f"Erro ao ler avaliação, ignorando: {str(e)}")

    return reviews


async def extract_place_details(page: Page, current_url: str, settings: CrawlSettings) -> Place:
    """
    Extrai os dados do local aberto na página.

    Título e categoria são obrigatórios e geram MandatoryFieldError; os demais
    campos ficam vazios ou zerados quando não aparecem a tempo.
    """
    timeout = settings.element_timeout_ms

    name = await extract_mandatory_text(page, TITLE_SELECTOR, "name", settings)
    category = await extract_mandatory_text(page, CATEGORY_SELECTOR, "category", settings)

    address = await aria_without_label(page, "Address: ", timeout)
    website = await aria_without_label(page, "Website: ", timeout)
    phone = await aria_without_label(page, "Phone: ", timeout)
    review_count = max(parse_int(await aria_without_label(page, " reviews", timeout)), 0)

    stars = extract_stars_value(await aria_with_label(page, " stars", timeout))

    buckets = {}
    for field, label in STAR_LABELS.items():
        buckets[field] = max(get_stars_value(await aria_with_label(page, label, timeout)), 0)

    latlon = get_lat_lon(current_url)
    log_debug(f"'{name}' ({category}): {review_count} avaliações, nota {stars}")

    await load_all_reviews(page, review_count, settings)
    reviews = await parse_reviews(page, settings)

    return Place(
        name=name,
        category=category,
        address=address,
        website=website,
        phone=phone,
        review_count=review_count,
        stars=stars,
        reviews=reviews,
        latlon=latlon,
        **buckets,
    )
