import json
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Carrega variáveis do arquivo .env
load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(RuntimeError):
    """Configuração do crawl ausente ou inválida."""


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


class CrawlSettings(BaseModel):
    """
    Configuração de uma execução do crawler.

    Os valores padrão vêm das variáveis de ambiente (ou do .env); a lista de
    buscas vem do arquivo de parâmetros ou da entrada padrão.
    """

    model_config = ConfigDict(validate_default=True)

    queries: List[str] = Field(default_factory=list)
    output_path: str = Field(default_factory=lambda: os.getenv("PLACES_OUTPUT_PATH", "places.json"))
    headless: bool = Field(default_factory=lambda: _env_bool("PLACES_HEADLESS", True))
    language: str = Field(default_factory=lambda: os.getenv("PLACES_LANGUAGE", "en"))
    user_agent: str = Field(default_factory=lambda: os.getenv("PLACES_USER_AGENT", DEFAULT_USER_AGENT))

    # Tempos de espera em milissegundos (Playwright)
    element_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("PLACES_ELEMENT_TIMEOUT_MS", "1000")), gt=0)
    mandatory_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("PLACES_MANDATORY_TIMEOUT_MS", "30000")), gt=0)
    navigation_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("PLACES_NAVIGATION_TIMEOUT_MS", "120000")), gt=0)

    # Busca do local na lista de resultados
    resolve_max_iterations: int = Field(default_factory=lambda: int(os.getenv("PLACES_RESOLVE_MAX_ITERATIONS", "30")), gt=0)
    resolve_delay: float = Field(default_factory=lambda: float(os.getenv("PLACES_RESOLVE_DELAY", "1.0")), ge=0)

    # Paginação das avaliações
    review_scroll_offset: int = Field(default_factory=lambda: int(os.getenv("PLACES_REVIEW_SCROLL_OFFSET", "10000")), gt=0)
    review_scroll_delay: float = Field(default_factory=lambda: float(os.getenv("PLACES_REVIEW_SCROLL_DELAY", "1.0")), ge=0)
    review_expand_delay: float = Field(default_factory=lambda: float(os.getenv("PLACES_REVIEW_EXPAND_DELAY", "2.0")), ge=0)
    review_max_scrolls: int = Field(default_factory=lambda: int(os.getenv("PLACES_REVIEW_MAX_SCROLLS", "200")), gt=0)
    review_stall_rounds: int = Field(default_factory=lambda: int(os.getenv("PLACES_REVIEW_STALL_ROUNDS", "10")), gt=0)

    @field_validator("queries")
    @classmethod
    def strip_queries(cls, value: List[str]) -> List[str]:
        queries = [query.strip() for query in value]
        if any(not query for query in queries):
            raise ValueError("queries must not contain blank entries")
        return queries


def read_input_params() -> Dict[str, Any]:
    """
    Lê os parâmetros da execução como JSON da entrada padrão
    """
    raw = sys.stdin.read()
    if not raw.strip():
        return {}
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Parâmetros inválidos na entrada padrão: {exc}") from exc
    if not isinstance(params, dict):
        raise ConfigError("Os parâmetros devem ser um objeto JSON")
    return params


def read_params_file(path: str) -> Dict[str, Any]:
    """
    Lê os parâmetros da execução de um arquivo JSON
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            params = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Não foi possível ler o arquivo de parâmetros {path}: {exc}") from exc
    if not isinstance(params, dict):
        raise ConfigError(f"O arquivo {path} deve conter um objeto JSON")
    return params


def build_settings(params: Optional[Dict[str, Any]] = None, **overrides: Any) -> CrawlSettings:
    """
    Valida os parâmetros e devolve as configurações da execução
    """
    values = dict(params or {})
    values.update(overrides)
    try:
        return CrawlSettings(**values)
    except (ValidationError, ValueError) as exc:
        raise ConfigError(f"Configuração inválida: {exc}") from exc


def load_settings(params_file: Optional[str] = None, **overrides: Any) -> CrawlSettings:
    """
    Carrega as configurações a partir de um arquivo de parâmetros, se informado,
    ou do JSON recebido na entrada padrão.
    """
    if params_file:
        params = read_params_file(params_file)
    else:
        params = read_input_params()
    return build_settings(params, **overrides)
