"""
Protected image endpoint (ticket and training uploads)
"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, get_current_actor
from skillstrack.schemas.auth import Actor
from skillstrack.services.image_service import get_image

router = APIRouter()


@router.get("/{file_path:path}")
async def get_image_endpoint(
    file_path: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Serve a stored image if the actor may access its owning employee"""
    full_path, content_type = get_image(db, file_path, actor)
    return FileResponse(
        full_path,
        media_type=content_type,
        headers={"Cache-Control": "private, max-age=3600"},
    )
