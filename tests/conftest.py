"""
Test configuration and fixtures for dominant color extraction tests.
"""
import numpy as np
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from dominant_colors.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def rng():
    """Seeded generator for reproducible K-means++ seeding."""
    return np.random.default_rng(42)
