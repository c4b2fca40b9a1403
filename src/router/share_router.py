from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlmodel import Session

from core.config import Settings
from core.dependencies import get_settings, get_storage
from core.exceptions import RecordNotFound
from model.database import get_session
from service import share_service
from storage.base import ObjectStorage

router = APIRouter(tags=["share"])


@router.get("/share/{record_id}", response_class=HTMLResponse)
def share_page(
    record_id: int,
    request: Request,
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    try:
        record, image_url = share_service.get_shared_image(
            record_id, session, storage, settings
        )
    except RecordNotFound:
        return HTMLResponse(share_service.NOT_FOUND_PAGE, status_code=404)
    page = share_service.render_share_page(record, image_url, str(request.url))
    return HTMLResponse(page)
