from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from dailydiary import diaries
from dailydiary.database import get_db
from dailydiary.dependencies import get_current_user
from dailydiary.exceptions import NotFoundOrForbidden
from dailydiary.models import User
from dailydiary.schemas import (
    DiaryCreate, DiaryUpdate, DiaryResponse, DashboardResponse, MessageResponse
)

router = APIRouter(prefix="/diary", tags=["diary"])


def _not_found(e: NotFoundOrForbidden) -> HTTPException:
    # Same 404 whether the entry is missing or belongs to someone else
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    search: Optional[str] = None,
    page: int = Query(1, le=diaries.MAX_PAGE),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Paginated list of the user's diaries, newest first.

    page is one-based; values below 1 are treated as 1.
    """
    keyword = search.strip() if search and search.strip() else None

    diary_page = diaries.search(db, user, keyword, diaries.to_page_index(page), diaries.PAGE_SIZE)

    return DashboardResponse(
        diaries=[DiaryResponse.model_validate(d) for d in diary_page.items],
        search=keyword,
        current_page=diary_page.number,
        total_pages=diary_page.total_pages,
        has_previous=diary_page.has_previous,
        has_next=diary_page.has_next,
        page_size=diary_page.page_size,
        total_elements=diary_page.total_elements,
        total_diaries=diaries.count_by_owner(db, user),
        username=user.username
    )


@router.post("/create", response_model=DiaryResponse, status_code=status.HTTP_201_CREATED)
async def create_diary(
    entry: DiaryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return diaries.create(db, entry, user)


@router.get("/view/{diary_id}", response_model=DiaryResponse)
async def view_diary(
    diary_id: int = Path(..., ge=1, le=diaries.MAX_ID),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    diary = diaries.find_by_id_for_owner(db, diary_id, user)
    if diary is None:
        raise _not_found(NotFoundOrForbidden())
    return diary


@router.get("/edit/{diary_id}", response_model=DiaryResponse)
async def edit_form(
    diary_id: int = Path(..., ge=1, le=diaries.MAX_ID),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current values to prefill the edit form."""
    diary = diaries.find_by_id_for_owner(db, diary_id, user)
    if diary is None:
        raise _not_found(NotFoundOrForbidden())
    return diary


@router.post("/edit/{diary_id}", response_model=DiaryResponse)
async def update_diary(
    changes: DiaryUpdate,
    diary_id: int = Path(..., ge=1, le=diaries.MAX_ID),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return diaries.update(db, diary_id, changes, user)
    except NotFoundOrForbidden as e:
        raise _not_found(e)


@router.post("/delete/{diary_id}", response_model=MessageResponse)
async def delete_diary(
    diary_id: int = Path(..., ge=1, le=diaries.MAX_ID),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        diaries.delete(db, diary_id, user)
    except NotFoundOrForbidden as e:
        raise _not_found(e)

    return MessageResponse(message="Diary entry deleted successfully!")
