"""Shared test fixtures for the extension update service."""

import pytest
from fastapi.testclient import TestClient

from update_svc.catalog.registry import ExtensionCatalog
from update_svc.config import Config
from update_svc.extension.types import CatalogEntry
from update_svc.main import create_app
from update_svc.service import UpdateService


DARK_THEME_ID = "bfdgpgibhagkpdlnjonhkabjoijopoge"
LIGHT_THEME_ID = "ldimlcelhnjgpjjemdjokpgeeikdinbm"
ONE_PASSWORD_ID = "aomjjhallfgjeglblehebfpbcfeobpgk"  # nosec
PDF_JS_ID = "jdbefljfgobbmcidnmpjamcbhnbphjnb"
UNKNOWN_ID = "oemmndcbldboiebfnladdacbdfmadadm"

DOWNLOAD_ROOT = "https://s3.amazonaws.com/brave-extensions/release"


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def dark_theme() -> CatalogEntry:
    return CatalogEntry(
        identifier=DARK_THEME_ID,
        version="1.0.0",
        sha256="ae517d6273a4fc126961cb026e02946db4f9dbb58e3d9bc29f5e1270e3ce9834",
        title="Brave Dark Theme",
        download_base=f"{DOWNLOAD_ROOT}/{DARK_THEME_ID}",
    )


@pytest.fixture
def light_theme() -> CatalogEntry:
    return CatalogEntry(
        identifier=LIGHT_THEME_ID,
        version="1.0.0",
        sha256="1c714fadd4208c63f74b707e4c12b81b3ad0153c37de1348fa810dd47cfc5618",
        title="Brave Light Theme",
        download_base=f"{DOWNLOAD_ROOT}/{LIGHT_THEME_ID}",
    )


@pytest.fixture
def one_password() -> CatalogEntry:
    """Blacklisted extension, newer than anything clients report."""
    return CatalogEntry(
        identifier=ONE_PASSWORD_ID,
        version="9.0.0",
        sha256="3d17b5a0f2ef1bd67fa3cd7eac5a5ea2d1c0c0a07ce6e04d7e8fff38baf8d48b",
        title="1Password",
        download_base=f"{DOWNLOAD_ROOT}/{ONE_PASSWORD_ID}",
        blacklisted=True,
    )


@pytest.fixture
def pdf_js() -> CatalogEntry:
    return CatalogEntry(
        identifier=PDF_JS_ID,
        version="1.1.0",
        sha256="6e7f3d1c0a5b8e1d7a5c2b9f3e4d1a0c8b7f6e5d4c3b2a1908f7e6d5c4b3a291",
        title="PDF Viewer",
        download_base=f"{DOWNLOAD_ROOT}/{PDF_JS_ID}",
    )


@pytest.fixture
def catalog(dark_theme, light_theme, one_password, pdf_js) -> ExtensionCatalog:
    return ExtensionCatalog.from_entries([dark_theme, light_theme, one_password, pdf_js])


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def config() -> Config:
    """Default test configuration."""
    return Config()


@pytest.fixture
def service(catalog, config) -> UpdateService:
    return UpdateService(catalog=catalog, config=config)


@pytest.fixture
def client(service):
    """HTTP client for the app, wired to the test service."""
    app = create_app(service)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Request Builders
# =============================================================================

REQUEST_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<request protocol="{protocol}" version="chrome-53.0.2785.116" prodversion="53.0.2785.116" '
    'requestid="{{b4f77b70-af29-462b-a637-8a3e4be5ecd9}}" lang="" updaterchannel="stable" '
    'prodchannel="stable" os="mac" arch="x64" nacl_arch="x86-64">\n'
    '  <hw physmemory="16"/>\n'
    '  <os platform="Mac OS X" version="10.11.6" arch="x86_64"/>\n'
)

APP_ELEMENT = (
    '  <app appid="{appid}" version="{version}" installsource="ondemand">\n'
    '    <updatecheck />\n'
    '    <ping rd="-2" ping_freshness="" />\n'
    '  </app>\n'
)


def build_request(*apps: tuple[str, str], protocol: str = "3.0") -> str:
    """Build an update request the way Chromium's component updater sends it."""
    body = "".join(APP_ELEMENT.format(appid=appid, version=version) for appid, version in apps)
    return REQUEST_HEADER.format(protocol=protocol) + body + "</request>"


@pytest.fixture
def update_request():
    """Request builder: update_request((id, version), ...)."""
    return build_request


# =============================================================================
# Test Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks as integration test")
