import json
import sys
import logging
import os
import re
import functools
import tempfile
from typing import Any, Iterable, Optional

# Padrões usados na conversão de textos extraídos da página
INT_PATTERN = re.compile(r"[+-]?\d+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
STARS_PATTERN = re.compile(r"\d+(?:\.\d+)?")

SEARCH_URL_TEMPLATE = "https://www.google.com/maps/search/{query}/?hl={language}"
SEARCH_URL_MARKER = "maps/search"
PLACE_URL_MARKER = "maps/place"


# Configuração do logging
def setup_logging(level=None):
    """
    Configura o sistema de logging com um formato consistente
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )
    return logging.getLogger()

# Decorador para tratamento padronizado de exceções em funções assíncronas
def handle_exceptions(message=None, default_return=None):
    """
    Decorador que envolve a função com tratamento padronizado de exceções.

    Exemplo de uso:

    @handle_exceptions(message="Erro ao fechar a página", default_return=False)
    async def fechar_pagina(page):
        await page.close()
        return True
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                error_message = f"{message or func.__name__}: {str(e)}"
                log_exception(error_message)
                return default_return
        return wrapper
    return decorator

# Funções para tratamento de erros
def log_exception(message: str = "Erro não esperado:", exc_info=True) -> None:
    """
    Registra uma exceção no log com traceback completo
    """
    logging.error(message, exc_info=exc_info)

def handle_error(error: Exception) -> None:
    """
    Trata um erro de forma padronizada, imprimindo um JSON na saída padrão
    """
    error_msg = {
        "error": "Erro durante a execução",
        "message": str(error)
    }
    print(json.dumps(error_msg, ensure_ascii=False))

# Funções para trabalhar com logs em diferentes níveis

def log_debug(message: str) -> None:
    logging.debug(message)

def log_info(message: str) -> None:
    logging.info(message)

def log_warning(message: str) -> None:
    logging.warning(message)

# Funções de utilidade para manipulação/formatação de dados

def parse_int(value: Optional[str]) -> int:
    """
    Converte um texto para inteiro, removendo as vírgulas usadas como
    separador de milhar. Retorna 0 quando o texto não é um inteiro válido.
    """
    if not value:
        return 0

    cleaned = value.replace(",", "")
    if not INT_PATTERN.fullmatch(cleaned):
        return 0

    return int(cleaned)

def parse_float(value: Optional[str]) -> float:
    """
    Converte um texto decimal para float. Retorna 0.0 quando o texto é inválido.
    """
    if not value or not FLOAT_PATTERN.fullmatch(value):
        return 0.0

    return float(value)

def extract_stars_value(label: Optional[str]) -> float:
    """
    Isola a nota média de um rótulo como "4.8 stars" e converte para float
    """
    match = STARS_PATTERN.search(label or "")
    if not match:
        return 0.0
    return parse_float(match.group(0))

def get_stars_value(label: Optional[str]) -> int:
    """
    Extrai a contagem de uma faixa de estrelas a partir de rótulos como
    "5 stars, 1,234 reviews": o número fica sempre no terceiro campo.
    """
    fields = (label or "").split(" ")
    if len(fields) < 3:
        return 0
    return parse_int(fields[2])

def get_lat_lon(url: Optional[str]) -> str:
    """
    Extrai "lat,lon" do trecho "@lat,lon,zoom/" da URL do Google Maps.
    Retorna string vazia quando o trecho não existe.
    """
    if not url:
        return ""

    at_index = url.find("@")
    if at_index == -1:
        return ""

    slash_index = url.find("/", at_index)
    if slash_index == -1:
        return ""

    parts = url[at_index + 1:slash_index].split(",")
    if len(parts) < 2:
        return ""

    return f"{parts[0]},{parts[1]}"

def format_search_url(query: str, language: str = "en") -> str:
    """
    Monta a URL de busca do Google Maps substituindo espaços por +
    """
    return SEARCH_URL_TEMPLATE.format(query=query.replace(" ", "+"), language=language)

def first_two_words_match(first: str, second: str) -> bool:
    """
    Compara as duas primeiras palavras de dois textos, ignorando maiúsculas.
    Textos com menos de duas palavras nunca correspondem.
    """
    words1 = (first or "").split()
    words2 = (second or "").split()

    if len(words1) < 2 or len(words2) < 2:
        return False

    return (
        words1[0].casefold() == words2[0].casefold()
        and words1[1].casefold() == words2[1].casefold()
    )

def is_search_url(url: Optional[str]) -> bool:
    return SEARCH_URL_MARKER in (url or "")

def is_place_url(url: Optional[str]) -> bool:
    return PLACE_URL_MARKER in (url or "")

def clean_review_text(text: Optional[str]) -> str:
    """
    Remove os "&" residuais do HTML escapado e espaços das bordas
    """
    return (text or "").replace("&", "").strip()

# Funções de saída

def output_results(places: Iterable[Any], path: str = "places.json") -> str:
    """
    Serializa os locais como um array JSON e grava no caminho indicado,
    sobrescrevendo o arquivo existente.

    O conteúdo é gravado em um arquivo temporário no mesmo diretório e depois
    movido para o destino, então um erro de escrita nunca deixa um arquivo
    JSON pela metade. Erros de escrita são propagados para quem chamou.
    """
    data = [
        place.model_dump(by_alias=True) if hasattr(place, "model_dump") else place
        for place in places
    ]

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".places-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    log_info(f"{len(data)} locais gravados em {path}")
    return path

def print_summary(not_found: Iterable[str], failed: Iterable[Any]) -> None:
    """
    Imprime no stderr o resumo das buscas que não geraram resultado
    """
    not_found = list(not_found)
    if not_found:
        print(f"Buscas não encontradas ({len(not_found)}):", file=sys.stderr)
        for query in not_found:
            print(f"  - {query}", file=sys.stderr)

    failed = list(failed)
    if failed:
        print(f"Buscas com erro ({len(failed)}):", file=sys.stderr)
        for entry in failed:
            print(f"  - {entry.query}: {entry.reason}", file=sys.stderr)
