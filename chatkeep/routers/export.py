from datetime import date

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.export import FullExport
from chatkeep.services.export_service import build_full_export
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api/export", tags=["Export"])


@router.get("/full-data", response_model=FullExport)
def export_full_data(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """
    Export the whole account as one JSON document, served as a download.

    Read-only: nothing is modified.
    """
    export = build_full_export(db, user)
    filename = f"chatkeep-export-{date.today().isoformat()}.json"
    return JSONResponse(
        content=jsonable_encoder(export),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
