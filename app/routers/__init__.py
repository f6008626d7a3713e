# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - campaigns.py: Fundraising campaigns and pledges
# - donations.py: Seva donation checkout, receipts and reports
# - donor_wall.py: Donor wall entries and the public wall
# - photo_gallery.py / video_gallery.py: Media galleries
# - grocery.py: Grocery kit catalogue, selections and donations
# - forms.py: Dynamic forms and submissions
# - careers.py: Job applications
# - uploads.py: Generic image upload
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import campaigns
from . import donations
from . import donor_wall
from . import photo_gallery
from . import video_gallery
from . import grocery
from . import forms
from . import careers
from . import uploads

__all__ = [
    "health",
    "campaigns",
    "donations",
    "donor_wall",
    "photo_gallery",
    "video_gallery",
    "grocery",
    "forms",
    "careers",
    "uploads",
]
