"""LotShoppr API entry point."""

import logging

import uvicorn
from lotshoppr.config.settings import get_settings

settings = get_settings()

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "lotshoppr.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
