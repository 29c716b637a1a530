# API endpoints
from . import auth, users, activities, health

__all__ = ["auth", "users", "activities", "health"]
