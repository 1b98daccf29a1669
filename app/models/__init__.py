"""SQLAlchemy models for Seller Desk."""

from .profile import Profile
from .admin_profile import AdminProfile
from .seller_code import SellerCode
from .listing import Listing
from .report import Report
from .rate_limit_window import RateLimitWindow

__all__ = [
    "Profile",
    "AdminProfile",
    "SellerCode",
    "Listing",
    "Report",
    "RateLimitWindow",
]
