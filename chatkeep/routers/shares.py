from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from chatkeep.database import get_db
from chatkeep.schemas.share import ShareCreate, ShareOut, SharedSnapshot
from chatkeep.services import share_service
from chatkeep.views.boundary import ErrorBoundary
from chatkeep.views.pages import render_shared_conversation

router = APIRouter(tags=["Sharing"])


@router.post(
    "/api/conversations/{conversation_id}/share",
    response_model=ShareOut,
    status_code=status.HTTP_201_CREATED,
)
def create_share(conversation_id: int, body: Optional[ShareCreate] = None, db: Session = Depends(get_db)):
    share = share_service.create_share(db, conversation_id, body.expires_in_days if body else None)
    return share_service.serialize_share(share)


@router.get("/api/conversations/{conversation_id}/shares", response_model=List[ShareOut])
def list_shares(conversation_id: int, db: Session = Depends(get_db)):
    return [share_service.serialize_share(s) for s in share_service.list_shares(db, conversation_id)]


@router.get("/api/share/{token}", response_model=SharedSnapshot)
def get_shared_conversation(token: str, db: Session = Depends(get_db)):
    """
    Read a shared conversation snapshot.

    Raises:
        404: Unknown token
        410: Expired link
    """
    return share_service.open_share(db, token)


@router.delete("/api/share/{token}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_share(token: str, db: Session = Depends(get_db)):
    share_service.revoke_share(db, token)


@router.get("/share/{token}", response_class=HTMLResponse, include_in_schema=False)
def shared_conversation_page(token: str, db: Session = Depends(get_db)):
    snapshot = share_service.open_share(db, token)
    boundary = ErrorBoundary(render_shared_conversation)
    page = boundary.render(snapshot)
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR if boundary.last_failure else status.HTTP_200_OK
    return HTMLResponse(page, status_code=status_code)
