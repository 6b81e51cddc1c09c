from fastapi import APIRouter, Depends

from cart_reconciler.core.domain.session import SignedIn, SignedOut
from cart_reconciler.infrastructure.entrypoints.api.dependencies import get_cart_session
from cart_reconciler.infrastructure.entrypoints.api.dtos import SignInRequest
from cart_reconciler.infrastructure.resolution import CartSession

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/sign-in")
async def sign_in(body: SignInRequest, session: CartSession = Depends(get_cart_session)) -> dict:
    await session.events.publish(SignedIn(owner_id=body.owner_id, access_token=body.access_token))
    report = session.view_model.last_merge
    return {
        "status": "signed_in",
        "owner_id": session.view_model.owner_id,
        "merged_line_item_ids": list(report.merged) if report else [],
        "failed_line_item_ids": list(report.failed) if report else [],
    }


@router.post("/sign-out")
async def sign_out(session: CartSession = Depends(get_cart_session)) -> dict[str, str]:
    await session.events.publish(SignedOut())
    return {"status": "signed_out"}
