# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - mongo_client.py: MongoDB client singleton, collection names, indexes
# - form_engine.py: Dynamic form visibility and validation rules
# - payments.py: Razorpay REST client and signature checks
# - receipts.py: Donation receipt formatting (HTML + PDF)
# - mailer.py: SMTP email delivery
# - exporter.py: CSV exports
# - utils.py: Shared helpers (ObjectIds, serialization, pagination)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.mongo_client import Collections, MongoClient, MongoClientError
from lib.utils import ApplicationError, build_pagination, serialize_document, to_object_id

__all__ = [
    # MongoDB
    "Collections",
    "MongoClient",
    "MongoClientError",
    # Utils
    "ApplicationError",
    "build_pagination",
    "serialize_document",
    "to_object_id",
]
