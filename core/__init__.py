# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the CMS business logic:
# - models/: Pydantic schemas for request validation
# - services/: One service class per resource, backed by MongoDB
#
# Routers call services; services never touch the HTTP request.
# =============================================================================
