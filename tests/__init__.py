# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the CMS API:
# - test_form_engine.py / test_models.py / test_utils.py: unit tests
# - test_receipts.py / test_payments.py: receipts, Razorpay client, mailer
# - test_<resource>.py: endpoint tests against an in-memory MongoDB
#
# Run tests with: pytest
# =============================================================================
