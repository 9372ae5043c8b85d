from inkpost.services.auth import AuthService
from inkpost.services.blog import BlogService, LikeToggle
from inkpost.services.cover_image import CoverImageService

__all__ = ["AuthService", "BlogService", "CoverImageService", "LikeToggle"]
