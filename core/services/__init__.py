# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .campaign_service import CampaignService
from .career_service import CareerService
from .donation_service import DonationService
from .donor_wall_service import DonorWallService
from .form_service import FormService
from .gallery_service import PhotoService, VideoService
from .grocery_service import GroceryService
from .storage_service import StorageService
from .user_service import UserService

__all__ = [
    "CampaignService",
    "CareerService",
    "DonationService",
    "DonorWallService",
    "FormService",
    "PhotoService",
    "VideoService",
    "GroceryService",
    "StorageService",
    "UserService",
]
