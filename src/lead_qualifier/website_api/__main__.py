"""Run with: python -m lead_qualifier.website_api"""

import logging

import uvicorn
from .main import create_app
from .config import settings

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port)
