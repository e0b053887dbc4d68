from fastapi import APIRouter
from app.api.apps import categories, roles, settings, users

router = APIRouter()
router.include_router(categories.router, prefix="/ecommerce/categories", tags=["EcommerceCategories"])
router.include_router(users.router, prefix="/user/users", tags=["Users"])
router.include_router(roles.router, prefix="/user/roles", tags=["UserRoles"])
router.include_router(settings.router, prefix="/system/settings", tags=["SystemSettings"])
