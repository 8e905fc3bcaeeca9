from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from chatkeep.database import get_db
from chatkeep.services.conversation_service import recount_messages

router = APIRouter(prefix="/api/maintenance", tags=["Maintenance"])


@router.post("/recount-messages")
def recount(conversation_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    """Recompute cached message/token counters and report the conversations that were off."""
    repaired = recount_messages(db, conversation_id)
    return {"repaired": repaired, "count": len(repaired)}
