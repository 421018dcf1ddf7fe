from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
import uvicorn
from typing import List, Dict, Any
from maps_places.config import ConfigError, build_settings
from maps_places.orchestrator import run_crawl
from maps_places.utils import setup_logging
from contextlib import asynccontextmanager

@asynccontextmanager
async def lifespan(app: FastAPI):
    # No início da aplicação
    setup_logging()
    print(f"\n{'='*60}")
    print(f" API pronta para receber requisições")
    print(f"{'='*60}\n")
    yield

app = FastAPI(
    title="Google Maps Places Crawler API",
    description="API para extrair dados de locais e avaliações do Google Maps",
    version="1.0.0",
    lifespan=lifespan
)

class CrawlParams(BaseModel):
    queries: List[str] = Field(min_length=1)
    write_output: bool = False

@app.get("/healthz")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}

@app.post("/crawl")
async def crawl(params: CrawlParams) -> Dict[str, Any]:
    """
    Executa o crawl das buscas informadas e retorna os locais encontrados,
    as buscas não encontradas e as que falharam.

    Com write_output=true o resultado também é gravado no places.json.
    """
    try:
        settings = build_settings(queries=params.queries)
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        summary = await run_crawl(settings, write_output=params.write_output)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return summary.model_dump(mode="json", by_alias=True)

if __name__ == "__main__":
    uvicorn.run("api:app", host="0.0.0.0", port=8000, reload=True)
