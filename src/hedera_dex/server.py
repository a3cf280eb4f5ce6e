"""HTTP read endpoints for the Hedera DEX integration."""

import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from .actions import describe_dex
from .config_loader import get_config, load_settings
from .config_models import DexSettings
from .errors import ConfigurationError
from .tools.pools import PoolQueryService

logger = logging.getLogger(__name__)

app = FastAPI(title="Hedera DEX")


def get_settings() -> DexSettings:
    return load_settings()


def get_pool_service() -> PoolQueryService:
    return PoolQueryService(get_config())


@app.get("/")
def health() -> dict:
    return {
        "service": "hedera-dex",
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/status")
def status(settings: DexSettings = Depends(get_settings)) -> dict:
    description = describe_dex(settings, get_config())
    return {"success": True, "text": description["text"], **description["values"]}


@app.get("/pools")
def pools(
    settings: DexSettings = Depends(get_settings),
    service: PoolQueryService = Depends(get_pool_service),
):
    """List pools. Mirror node failures fall back to demo data; bad settings are a 500."""
    try:
        listing = service.list_pools(
            settings.network,
            mirror_node_url=settings.mirror_node_url,
            demo_mode=settings.demo_mode,
        )
    except ConfigurationError as exc:
        logger.error(f"Error serving /pools: {exc.message}")
        return JSONResponse(status_code=500, content={"success": False, "error": exc.message})

    max_pools = service.config.query.max_display_pools
    return {
        "success": True,
        "network": listing.network,
        "demoMode": listing.demo_mode,
        "totalPools": len(listing.pools),
        "pools": [pool.model_dump() for pool in listing.pools[:max_pools]],
        "dataSource": listing.data_source,
        "mirrorNodeUrl": listing.mirror_node_url,
        "factoryContract": listing.factory_contract,
    }


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
