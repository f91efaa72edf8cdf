"""
Pytest configuration and shared fixtures for the facet catalog tests.
"""
import os
import sys
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

# Required settings; api.app builds the application at import time
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")


# ============================================================================
# Fixtures: Row Factories
# ============================================================================

def make_product_row(
    product_id: Any,
    dress_type_ids: Optional[List[Any]] = None,
    vendor_id: Any = "v1",
    total: Optional[float] = None,
    per_meter: Optional[float] = None,
    created_at: Optional[str] = "2024-05-01T10:00:00Z",
    **spec_ids: List[Any],
) -> Dict[str, Any]:
    """
    Build a raw ``products`` row the way Supabase returns it.

    ``spec_ids`` take the spec JSON key names, e.g. fabricTypeIds=["silk"].
    """
    spec: Dict[str, Any] = {"dressTypeIds": dress_type_ids or []}
    spec.update(spec_ids)
    mode = "unstitched_per_meter" if total is None and per_meter is not None else "stitched_total"
    return {
        "id": product_id,
        "vendor_id": vendor_id,
        "product_code": f"P-{product_id}",
        "title": f"Product {product_id}",
        "created_at": created_at,
        "inventory_qty": 3,
        "spec": spec,
        "price": {
            "currency": "PKR",
            "mode": mode,
            "cost_pkr_total": total,
            "cost_pkr_per_meter": per_meter,
            "available_sizes": [],
        },
    }


@pytest.fixture
def product_row_factory():
    """Factory for raw product rows."""
    return make_product_row


@pytest.fixture
def sample_product_rows() -> List[Dict[str, Any]]:
    """
    Three products used across matching scenarios.

    A: kurta (1), silk, red, 5,000 total
    B: kurta (1), cotton, red + blue, 12,000 total
    C: saree (2), silk, 800 per meter
    """
    return [
        make_product_row("A", [1], total=5000, fabricTypeIds=["silk"], colorShadeIds=["red"],
                         created_at="2024-05-03T10:00:00Z"),
        make_product_row("B", [1], vendor_id="v2", total=12000, fabricTypeIds=["cotton"],
                         colorShadeIds=["red", "blue"], created_at="2024-05-01T10:00:00Z"),
        make_product_row("C", [2], per_meter=800, fabricTypeIds=["silk"],
                         created_at="2024-05-02T10:00:00Z"),
    ]


@pytest.fixture
def sample_band_rows() -> List[Dict[str, Any]]:
    """Raw ``price_bands`` rows (deliberately out of sort order)."""
    return [
        {"id": 2, "name": "Mid", "min_pkr": 3001, "max_pkr": 10000, "sort_order": 2},
        {"id": 1, "name": "Budget", "min_pkr": 0, "max_pkr": 3000, "sort_order": 1},
        {"id": 3, "name": "Premium", "min_pkr": 10001, "max_pkr": None, "sort_order": 3},
    ]


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

class FakeQuery:
    """
    Chainable stand-in for a postgrest query builder.

    Records the calls made on it and returns ``data`` from execute().
    """

    def __init__(self, data: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.data = data if data is not None else []
        self.error = error
        self.calls: List[tuple] = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def execute(self):
        if self.error is not None:
            raise self.error
        result = MagicMock()
        result.data = self.data
        return result


class FakeSupabase:
    """Supabase client stand-in serving canned rows per table."""

    def __init__(self, tables: Optional[Dict[str, Any]] = None):
        self.tables: Dict[str, Any] = tables or {}
        self.queries: Dict[str, List[FakeQuery]] = {}

    def table(self, name: str) -> FakeQuery:
        canned = self.tables.get(name, [])
        if isinstance(canned, Exception):
            query = FakeQuery(error=canned)
        else:
            query = FakeQuery(data=canned)
        self.queries.setdefault(name, []).append(query)
        return query


@pytest.fixture
def fake_supabase_factory():
    """The FakeSupabase class, for tests that need a custom table set."""
    return FakeSupabase


@pytest.fixture
def fake_supabase(sample_product_rows, sample_band_rows) -> FakeSupabase:
    """Supabase stand-in holding the sample catalog and lookup tables."""
    return FakeSupabase({
        "products": sample_product_rows,
        "price_bands": sample_band_rows,
        "vendor": [
            {"id": "v1", "name": "Ayesha", "shop_name": "Ayesha Couture", "location": "Lahore"},
            {"id": "v2", "name": "Bilal", "shop_name": "", "location": "Karachi"},
        ],
        "dress_type": [{"id": 1, "name": "Kurta"}, {"id": 2, "name": "Saree"}],
        "fabric_types": [{"id": "silk", "name": "Silk"}, {"id": "cotton", "name": "Cotton"}],
        "work_types": [{"id": "emb", "name": "Embroidery"}],
        "work_densities": [{"id": "heavy", "name": "Heavy"}],
        "origin_cities": [{"id": "lhr", "name": "Lahore"}],
        "wear_states": [{"id": "new", "name": "New"}],
    })


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations
    mock_client.table.return_value.select.return_value.order.return_value.execute.return_value.data = []
    mock_client.table.return_value.select.return_value.order.return_value.limit.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value.data = [
        {"id": "new-1", "product_code": "P-NEW1"}
    ]

    return mock_client


@pytest.fixture
def test_settings():
    """Settings instance that bypasses the cache."""
    from config.settings import get_settings_for_testing
    return get_settings_for_testing()


@pytest.fixture
def catalog_repository(fake_supabase, test_settings):
    """Repository over the fake Supabase catalog."""
    from facets.repository import CatalogRepository
    return CatalogRepository(client=fake_supabase, settings=test_settings)


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app(catalog_repository):
    """FastAPI application with the repository dependency overridden."""
    from api.app import create_app
    from api.routes.catalog import get_catalog_repository

    application = create_app()
    application.dependency_overrides[get_catalog_repository] = lambda: catalog_repository
    return application


@pytest.fixture
def client(app):
    """Synchronous HTTP client for the FastAPI app."""
    from fastapi.testclient import TestClient
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require a live Supabase)"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )
