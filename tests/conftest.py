# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Swaps the MongoDB client for an in-memory mongomock client per test
# - Provides FastAPI test clients with and without an admin token
# - Provides sample request payloads
# =============================================================================

import os
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

_TMP_ROOT = tempfile.mkdtemp(prefix="hkvidya-tests-")

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB_NAME", "hk_vidya_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TMP_ROOT, "uploads"))
os.environ.setdefault("EXPORT_DIR", os.path.join(_TMP_ROOT, "exports"))

from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser
from app.auth.models import UserRole
from app.auth.security import create_access_token
from app.config import settings
from lib.mongo_client import MongoClient
from lib.utils import utcnow


# =============================================================================
# Database & Filesystem
# =============================================================================

@pytest.fixture(autouse=True)
def mongo():
    """Fresh in-memory MongoDB for every test."""
    client = mongomock.MongoClient(tz_aware=True)
    MongoClient._instance = client
    yield client[settings.MONGO_DB_NAME]
    MongoClient._instance = None


@pytest.fixture
def storage_dirs(tmp_path, monkeypatch):
    """Point uploads and exports at a per-test temp directory."""
    uploads = tmp_path / "uploads"
    exports = tmp_path / "exports"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(uploads))
    monkeypatch.setattr(settings, "EXPORT_DIR", str(exports))
    return {"uploads": uploads, "exports": exports}


# =============================================================================
# API Clients
# =============================================================================

@pytest.fixture
def admin_user():
    return AuthUser(id="65a000000000000000000001", email="admin@harekrishnavidya.org", role=UserRole.ADMIN)


@pytest.fixture
def admin_token(admin_user):
    return create_access_token(admin_user.id, email=admin_user.email, role=admin_user.role.value)


@pytest.fixture
def client(admin_token, storage_dirs):
    """Test client whose requests carry an admin bearer token."""
    from app.main import app

    return TestClient(app, headers={"Authorization": f"Bearer {admin_token}"})


@pytest.fixture
def anon_client(storage_dirs):
    """Test client without credentials."""
    from app.main import app

    return TestClient(app)


# =============================================================================
# Sample Payloads
# =============================================================================

@pytest.fixture
def campaign_payload():
    """Valid campaign create body."""
    return {
        "title": "Build A School Kitchen",
        "description": "Help us build a kitchen for 500 children.",
        "category": "Education",
        "image": "/uploads/images/kitchen.jpg",
        "goal_amount": 500000,
        "deadline": (utcnow() + timedelta(days=30)).isoformat(),
    }


@pytest.fixture
def donation_payload():
    """Valid seva donation form body."""
    return {
        "seva_name": "Annadaan Seva",
        "seva_type": "Annadaan",
        "seva_amount": 1000,
        "donor_name": "Asha Rao",
        "donor_email": "Asha.Rao@Example.com",
        "donor_phone": "9876543210",
        "donor_type": "Indian Citizen",
        "utm_source": "newsletter",
    }


@pytest.fixture
def grocery_line_items():
    return [
        {"name": "Rice", "amount": "5 kg", "price": 350, "quantity": 2},
        {"name": "Dal", "amount": "1 kg", "price": 125, "quantity": 1},
    ]


@pytest.fixture
def volunteer_form_payload():
    """Form with a conditional field: `college` only when status == student."""
    return {
        "title": "Volunteer Sign-up",
        "page": "volunteer",
        "fields": [
            {"name": "full_name", "label": "Full Name", "type": "text", "order": 1,
             "validation": {"required": True, "min_length": 2}},
            {"name": "email", "label": "Email", "type": "email", "order": 2,
             "validation": {"required": True}},
            {"name": "status", "label": "Status", "type": "select", "order": 3,
             "options": [{"label": "Student", "value": "student"}, {"label": "Working", "value": "working"}],
             "validation": {"required": True}},
            {"name": "college", "label": "College", "type": "text", "order": 4,
             "validation": {"required": True},
             "conditional": {"depends_on": "status", "show_when": "student"}},
        ],
    }
