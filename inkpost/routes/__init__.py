from inkpost.routes.auth import router as auth_router
from inkpost.routes.blog import router as blog_router
from inkpost.routes.category import router as category_router

__all__ = [
    "auth_router",
    "blog_router",
    "category_router",
]
