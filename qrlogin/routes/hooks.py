# Change-notification hook for deployments whose store has no native change
# feed: a queue or webhook relays each post-update login snapshot here.
# Delivery is at-least-once and may be duplicated or out of order.

from fastapi import APIRouter, Depends

from qrlogin.routes.deps import get_watcher
from qrlogin.schemas import LoginUpdatedReq, WatchResult
from qrlogin.services.confirmation_watcher import ConfirmationWatcher

router = APIRouter(prefix="/hooks", tags=["hooks"])


@router.post("/login-updated", response_model=WatchResult, response_model_exclude_none=True)
def login_updated(req: LoginUpdatedReq, watcher: ConfirmationWatcher = Depends(get_watcher)):
    return watcher.handle(req.login_token, req.data)
