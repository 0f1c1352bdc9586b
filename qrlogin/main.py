# FastAPI application entry point that wires the document store,
# issuer, watcher and janitor together and registers API routes.

import html
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from qrlogin.core.config import settings
from qrlogin.core.errors import ChallengeError
from qrlogin.db import DocumentStore, LOGINS, seed_partners
from qrlogin.routes.auth import router as auth_router
from qrlogin.routes.hooks import router as hooks_router
from qrlogin.services.challenge_service import ChallengeIssuer
from qrlogin.services.confirmation_watcher import ConfirmationWatcher
from qrlogin.services.janitor import LoginJanitor

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(store: DocumentStore | None = None, janitor_enabled: bool | None = None) -> FastAPI:
    store = store or DocumentStore()
    seed_partners(store, settings.PARTNER_API_KEYS)

    issuer = ChallengeIssuer(store)
    watcher = ConfirmationWatcher()
    janitor = LoginJanitor(store)
    # The store calls the watcher on every update of a login document
    store.collection(LOGINS).on_update(watcher.handle)

    if janitor_enabled is None:
        janitor_enabled = settings.JANITOR_ENABLED

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if janitor_enabled:
            janitor.start()
        yield
        janitor.stop()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.store = store
    app.state.issuer = issuer
    app.state.watcher = watcher
    app.state.janitor = janitor

    app.include_router(auth_router)
    app.include_router(hooks_router)

    @app.exception_handler(ChallengeError)
    async def challenge_error_handler(request: Request, exc: ChallengeError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/login", response_class=HTMLResponse)
    def login_page(api_key: str = ""):
        # Demo page for a partner: shows the challenge and waits for confirmation
        try:
            challenge = issuer.issue(api_key)
        except ChallengeError as e:
            return HTMLResponse(
                content=f"""
                <html>
                <head><title>Login Unavailable</title></head>
                <body style="font-family: Arial; text-align: center; padding: 2rem;">
                    <h1 style="color: #dc3545;">✗ Login Unavailable</h1>
                    <p>{html.escape(e.message)}</p>
                </body>
                </html>
                """,
                status_code=e.status_code,
            )

        return HTMLResponse(content=_render_login_page(
            challenge.payload.qr_code, challenge.payload.login_token
        ))

    return app


def _render_login_page(qr_code: str, login_token: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>QR Login</title>
        <style>
            body {{
                font-family: Arial, sans-serif;
                display: flex;
                flex-direction: column;
                align-items: center;
                justify-content: center;
                min-height: 100vh;
                margin: 0;
                background: #f5f5f5;
            }}
            .container {{
                background: white;
                padding: 2rem;
                border-radius: 10px;
                box-shadow: 0 2px 10px rgba(0,0,0,0.1);
                text-align: center;
            }}
            #status {{
                margin-top: 1rem;
                padding: 0.5rem;
                border-radius: 5px;
                font-weight: bold;
            }}
            .pending {{
                color: #666;
                background: #f0f0f0;
            }}
            .confirmed {{
                color: #28a745;
                background: #d4edda;
            }}
            .error {{
                color: #dc3545;
                background: #f8d7da;
            }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1>QR Code Login</h1>
            <p>Scan this QR code with the app to log in</p>
            <div id="qr-code">
                <img src="{qr_code}" alt="QR Code" />
            </div>
            <div id="status" class="pending">Waiting for confirmation...</div>
        </div>
        <script>
            const loginToken = '{login_token}';
            const pollInterval = {settings.POLL_MIN_INTERVAL_MS};
            let pollTimer = null;

            function updateStatus(status, message) {{
                const statusEl = document.getElementById('status');
                statusEl.className = status;
                statusEl.textContent = message;
            }}

            async function checkStatus() {{
                try {{
                    const response = await fetch(`/auth/login/${{loginToken}}`);
                    if (response.status === 404) {{
                        updateStatus('error', '✗ Login expired. Please refresh the page.');
                        clearInterval(pollTimer);
                        return;
                    }}
                    const data = await response.json();
                    if (data.status === 'CONFIRMED') {{
                        updateStatus('confirmed', '✓ Logged in as ' + data.userId);
                        clearInterval(pollTimer);
                    }}
                }} catch (error) {{
                    console.error('Status error:', error);
                    updateStatus('error', '✗ Error checking status');
                }}
            }}

            pollTimer = setInterval(checkStatus, pollInterval);
        </script>
    </body>
    </html>
    """


app = create_app()
