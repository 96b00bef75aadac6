"""FastAPI application - Extension Update Service.

Answers Omaha-style update checks for the extensions in the catalog:

- POST /extensions  batch XML update check (component updater)
- GET  /extensions  single extension check (webstore style, ``x`` parameter)

Requests for extensions we don't serve are redirected upstream.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel

from .catalog.loader import load_catalog
from .catalog.registry import ExtensionCatalog
from .config import Config
from .extension.types import CatalogEntry
from .protocol.codec import ResponseEncodeError
from .protocol.parser import MissingExtensionIdError, UpdateRequestParseError
from .service import UpdateService


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "UPDATE_SVC_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"
SAMPLE_CATALOG_FILE = "sample_catalog.yaml"

XML_MEDIA_TYPE = "application/xml"


# Response models
class HealthResponse(BaseModel):
    status: str
    catalog: dict[str, Any]


class CatalogEntryModel(BaseModel):
    id: str
    version: str
    title: str
    sha256: str
    blacklisted: bool = False


class ReloadResponse(BaseModel):
    success: bool
    extensions: int
    source: str


def create_default_catalog() -> ExtensionCatalog:
    """Create the built-in catalog used when no catalog file is configured."""
    return load_catalog({
        "bfdgpgibhagkpdlnjonhkabjoijopoge": {
            "title": "Brave Dark Theme",
            "version": "1.0.0",
            "sha256": "ae517d6273a4fc126961cb026e02946db4f9dbb58e3d9bc29f5e1270e3ce9834",
        },
        "ldimlcelhnjgpjjemdjokpgeeikdinbm": {
            "title": "Brave Light Theme",
            "version": "1.0.0",
            "sha256": "1c714fadd4208c63f74b707e4c12b81b3ad0153c37de1348fa810dd47cfc5618",
        },
    })


def load_config() -> Config:
    """Load config from $UPDATE_SVC_CONFIG, ./config.yaml, or defaults."""
    config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        logger.info(f"Loading config from {config_path}")
        return Config.from_file(config_path)
    if Path(DEFAULT_CONFIG_FILE).exists():
        logger.info(f"Loading config from {DEFAULT_CONFIG_FILE}")
        return Config.from_yaml(DEFAULT_CONFIG_FILE)
    return Config()


def catalog_source(config: Config) -> str | None:
    """Path of the catalog file to load, if any."""
    if config.catalog.definition_file:
        return config.catalog.definition_file
    if Path(SAMPLE_CATALOG_FILE).exists():
        return SAMPLE_CATALOG_FILE
    return None


def build_catalog(config: Config) -> ExtensionCatalog:
    """Build the catalog from the configured file, or the built-in default."""
    source = catalog_source(config)
    if source is None:
        logger.info("No catalog file configured, using built-in catalog")
        return create_default_catalog()
    logger.info(f"Loading catalog from {source}")
    return load_catalog(source, download_root=config.catalog.download_root)


def configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format,
    )


def create_app(service: UpdateService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Pre-built service (tests); when omitted, config and catalog
            are loaded at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown."""
        if service is None:
            config = load_config()
            configure_logging(config)
            logger.info("Starting extension update service...")
            app.state.service = UpdateService(catalog=build_catalog(config), config=config)
        else:
            app.state.service = service

        logger.info(f"Extension update service started ({len(app.state.service.catalog)} extensions)")
        yield
        logger.info("Extension update service stopped")

    app = FastAPI(
        title="Extension Update Service",
        description="Answers Omaha update checks for the extensions in the catalog.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service
    _register_exception_handlers(app)
    _register_routes(app)
    return app


def _get_service(request: Request) -> UpdateService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(UpdateRequestParseError)
    async def parse_error_handler(request: Request, exc: UpdateRequestParseError):
        logger.warning(f"Bad update request: {exc}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid update request", "detail": str(exc)},
        )

    @app.exception_handler(MissingExtensionIdError)
    async def missing_id_error_handler(request: Request, exc: MissingExtensionIdError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid update request", "detail": str(exc)},
        )

    @app.exception_handler(ResponseEncodeError)
    async def encode_error_handler(request: Request, exc: ResponseEncodeError):
        logger.error(f"Failed to encode update response: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Encoding error", "detail": str(exc)},
        )


def _register_routes(app: FastAPI) -> None:

    @app.post("/extensions", tags=["Updates"])
    async def update_extensions(request: Request):
        """Batch update check: the body is an Omaha protocol 3.0 request."""
        service = _get_service(request)
        body = await request.body()

        result = service.handle_update_request(body)
        if result.is_redirect:
            return RedirectResponse(result.redirect_url, status_code=307)
        return Response(content=result.to_xml(), media_type=XML_MEDIA_TYPE)

    @app.get("/extensions", tags=["Updates"])
    async def webstore_update_extension(request: Request):
        """
        Single extension update check.

        Requests look like:
        /extensions?os=mac&arch=x64&prod=chromiumcrx&prodversion=69.0.54.0&x=id%3Doemmndcbldboiebfnladdacbdfmadadm%26v%3D0.0.0.0%26uc

        The ``x`` parameter holds the encoded extension id and version.
        """
        service = _get_service(request)
        # First value wins when a client repeats x
        values = request.query_params.getlist("x")
        x = values[0] if values else ""

        result = service.handle_webstore_request(x, raw_query=request.url.query)
        if result.is_redirect:
            return RedirectResponse(result.redirect_url, status_code=307)
        return Response(content=result.to_xml(), media_type=XML_MEDIA_TYPE)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health(request: Request):
        """Health check endpoint."""
        service = _get_service(request)
        return HealthResponse(status="healthy", catalog=service.catalog.stats)

    @app.get("/catalog", response_model=list[CatalogEntryModel], tags=["Catalog"])
    async def list_catalog(request: Request):
        """List the extensions offered by this server."""
        service = _get_service(request)
        return [_entry_to_model(e) for e in service.catalog.all_entries()]

    @app.post("/catalog/reload", response_model=ReloadResponse, tags=["Catalog"])
    async def reload_catalog(request: Request):
        """Reload the catalog file and swap it in atomically."""
        service = _get_service(request)
        source = catalog_source(service.config)
        if source is None:
            raise HTTPException(status_code=400, detail="No catalog file configured")

        try:
            fresh = load_catalog(source, download_root=service.config.catalog.download_root)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Catalog reload from {source} failed: {e}")
            raise HTTPException(status_code=400, detail=f"Catalog reload failed: {e}")

        service.catalog.atomic_replace(fresh.all_entries())
        return ReloadResponse(success=True, extensions=len(service.catalog), source=source)


def _entry_to_model(entry: CatalogEntry) -> CatalogEntryModel:
    return CatalogEntryModel(
        id=entry.identifier,
        version=entry.version,
        title=entry.title,
        sha256=entry.sha256,
        blacklisted=entry.blacklisted,
    )


app = create_app()
