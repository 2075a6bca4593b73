from fastapi import APIRouter, Depends, Request
from autoapply.api.deps import get_entitlement_service
from autoapply.auth import require_user
from autoapply.schemas import CurrentUser, Entitlement, CheckoutResponse
from autoapply.services.entitlement import EntitlementService

router = APIRouter()


@router.get("/subscription", response_model=Entitlement)
async def get_subscription(
    user: CurrentUser = Depends(require_user),
    service: EntitlementService = Depends(get_entitlement_service),
):
    return await service.check_entitlement(user)


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    request: Request,
    user: CurrentUser = Depends(require_user),
    service: EntitlementService = Depends(get_entitlement_service),
):
    url = await service.create_checkout(user, origin=request.headers.get("origin"))
    return CheckoutResponse(url=url)
