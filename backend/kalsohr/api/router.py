from fastapi import APIRouter

from . import permissions

router = APIRouter(prefix="/api")

_permission_routers = [
    permissions.router,
]

for _router in _permission_routers:
    router.include_router(_router)
