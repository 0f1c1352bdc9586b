# Login challenge routes: issuance, confirmation by the scanning device,
# and a status read for the waiting caller.

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from qrlogin.core.errors import DocumentNotFoundError, PreconditionFailedError
from qrlogin.db import DocumentStore, LOGINS
from qrlogin.routes.deps import get_issuer, get_store
from qrlogin.schemas import ChallengeReq, ChallengeResponse, ConfirmReq, LoginStatusResp, is_confirmed
from qrlogin.services.challenge_service import ChallengeIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _status_of(doc: dict) -> LoginStatusResp:
    if is_confirmed(doc):
        return LoginStatusResp(status="CONFIRMED", user_id=doc["user"], confirmed_at=doc["confirmedAt"])
    return LoginStatusResp(status="PENDING")


@router.post("/challenge", response_model=ChallengeResponse)
def issue_challenge(req: ChallengeReq, issuer: ChallengeIssuer = Depends(get_issuer)):
    # ChallengeError is rendered by the handler registered in main
    return issuer.issue(req.api_key)


@router.post("/confirm", response_model=LoginStatusResp)
def confirm_login(req: ConfirmReq, store: DocumentStore = Depends(get_store)):
    # Stands in for the identity-confirmation flow on the scanning device
    if not req.user:
        raise HTTPException(status_code=400, detail="User not provided")

    changes = {"user": req.user, "confirmedAt": datetime.now(timezone.utc)}
    try:
        doc = store.collection(LOGINS).update(
            req.login_token, changes, only_if=lambda d: not is_confirmed(d)
        )
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Login attempt not found")
    except PreconditionFailedError:
        raise HTTPException(status_code=409, detail="Login already confirmed")

    logger.info(f"Login confirmed by device: token={req.login_token[:12]}..., user={req.user}")
    return _status_of(doc)


@router.get("/login/{login_token}", response_model=LoginStatusResp)
def login_status(login_token: str, store: DocumentStore = Depends(get_store)):
    doc = store.collection(LOGINS).get(login_token)
    if doc is None:
        raise HTTPException(status_code=404, detail="Login attempt not found")
    return _status_of(doc)
