# Accessors for the components created once in main.create_app().

from fastapi import Request

from qrlogin.db import DocumentStore
from qrlogin.services.challenge_service import ChallengeIssuer
from qrlogin.services.confirmation_watcher import ConfirmationWatcher


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_issuer(request: Request) -> ChallengeIssuer:
    return request.app.state.issuer


def get_watcher(request: Request) -> ConfirmationWatcher:
    return request.app.state.watcher
