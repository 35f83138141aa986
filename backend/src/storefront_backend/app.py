"""
HTTP surface for the storefront's protected and per-user endpoints.

'create_app' wires a 'ReactionLedger' and a 'RequestSessionProvider' into a
FastAPI application:

    GET  /admin/overview            - admin-only; 303 to login / landing otherwise
    GET  /me/likes/{kind}           - the caller's liked products or brands
    POST /likes/{kind}/{subject_id} - toggle the caller's like on a subject
"""

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import BaseModel

from storefront_toolkit.api.auth.base import RequestSessionProvider, TrustedHeaderSessionProvider, require_role
from storefront_toolkit.config import StorefrontSettings
from storefront_toolkit.reactions import (
    Reaction,
    ReactionLedger,
    ReactionState,
    ReactionSubject,
    SubjectKind,
    ToggleRejection,
)
from storefront_toolkit.session import Session


class ToggleInput(BaseModel):
    liked: bool = False
    count: int = 0


class ToggleOutput(BaseModel):
    liked: bool
    count: int


_REJECTION_STATUS = {
    ToggleRejection.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ToggleRejection.INVALID_SUBJECT: status.HTTP_400_BAD_REQUEST,
    ToggleRejection.ALREADY_PENDING: status.HTTP_409_CONFLICT,
    ToggleRejection.TOGGLE_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def create_app(
    ledger: ReactionLedger,
    settings: StorefrontSettings | None = None,
    sessions: RequestSessionProvider | None = None,
) -> FastAPI:
    settings = settings or StorefrontSettings()
    sessions = sessions or TrustedHeaderSessionProvider()
    admin_only = require_role(
        sessions,
        settings.admin_role,
        login_path=settings.login_path,
        landing_path=settings.landing_path,
    )

    async def current_session(request: Request) -> Session:
        return await sessions.get_session(request)

    app = FastAPI(title="Storefront")

    @app.get("/admin/overview")
    async def admin_overview(session: Session = Depends(admin_only)) -> dict[str, str | None]:
        return {"admin": session.identity}

    @app.get("/me/likes/{kind}")
    async def my_likes(kind: SubjectKind, session: Session = Depends(current_session)) -> list[Reaction]:
        if session.actor is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
        return await ledger.liked_items(session.actor, kind, limit=settings.liked_items_limit)

    @app.post("/likes/{kind}/{subject_id}")
    async def toggle_like(
        kind: SubjectKind,
        subject_id: str,
        body: ToggleInput,
        session: Session = Depends(current_session),
    ) -> ToggleOutput:
        result = await ledger.toggle(
            ReactionSubject(kind=kind, id=subject_id),
            session.actor,
            ReactionState(liked=body.liked, count=max(0, body.count)),
        )
        if result.rejection is not None:
            raise HTTPException(status_code=_REJECTION_STATUS[result.rejection], detail=str(result.rejection))
        return ToggleOutput(liked=result.state.liked, count=result.state.count)

    return app
