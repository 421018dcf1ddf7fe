import asyncio
import sys
from maps_places.config import load_settings
from maps_places.orchestrator import run_crawl
from maps_places.utils import setup_logging, handle_error

async def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        # Verifica se foi passado um arquivo de parâmetros como argumento
        params_file = argv[0] if argv else None
        settings = load_settings(params_file)

        await run_crawl(settings)
        print("Concluído!")
        return 0
    except Exception as e:
        handle_error(e)
        return 1

if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(main()))
