"""
Diary store: ownership-scoped CRUD, keyword search and pagination.

Every function takes the owning User explicitly. There is no lookup
by id alone outside this module.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, Query

from dailydiary.config import get_settings
from dailydiary.exceptions import NotFoundOrForbidden
from dailydiary.models import Diary, User
from dailydiary.schemas import DiaryCreate, DiaryUpdate

logger = logging.getLogger(__name__)

PAGE_SIZE = get_settings().page_size

# Largest value an integer key or OFFSET can hold in the database
MAX_ID = 2**63 - 1
MAX_PAGE = MAX_ID // PAGE_SIZE


@dataclass
class Page:
    """One slice of an ordered result set plus the counts pagination controls need."""
    items: List[Diary]
    page_index: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.page_size) if self.page_size else 0

    @property
    def number(self) -> int:
        # One-based page number for display, 0 when there is nothing to page through
        return 0 if self.total_pages == 0 else self.page_index + 1

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.total_pages


def to_page_index(page_number: Optional[int]) -> int:
    """Convert a one-based page number from the client to a zero-based index, clamping to page 1."""
    if page_number is None or page_number < 1:
        return 0
    return page_number - 1


def _owned_by(db: Session, owner: User) -> Query:
    return db.query(Diary).filter(Diary.user_id == owner.id)


def _paginate(query: Query, page_index: int, page_size: int) -> Page:
    page_index = max(page_index, 0)
    total = query.order_by(None).count()
    items = (
        query.order_by(Diary.created_at.desc(), Diary.id.desc())
        .offset(page_index * page_size)
        .limit(page_size)
        .all()
    )
    return Page(items=items, page_index=page_index, page_size=page_size, total_elements=total)


def create(db: Session, entry: DiaryCreate, owner: User) -> Diary:
    """
    Store a new entry for owner.

    entry_date defaults to today; created_at and updated_at are both
    set to the current time.
    """
    now = datetime.now(timezone.utc)
    diary = Diary(
        user_id=owner.id,
        title=entry.title,
        content=entry.content,
        entry_date=entry.entry_date or date.today(),
        created_at=now,
        updated_at=now
    )

    db.add(diary)
    db.commit()
    db.refresh(diary)

    logger.info("Diary id=%s created by user id=%s", diary.id, owner.id)
    return diary


def find_by_id_for_owner(db: Session, diary_id: int, owner: User) -> Optional[Diary]:
    """Return the entry only if it exists and belongs to owner."""
    if not -MAX_ID <= diary_id <= MAX_ID:
        return None
    return _owned_by(db, owner).filter(Diary.id == diary_id).first()


def update(db: Session, diary_id: int, changes: DiaryUpdate, owner: User) -> Diary:
    """
    Apply title, content and (if given) entry_date to an owned entry.

    Owner and created_at never change.

    Raises:
        NotFoundOrForbidden: entry missing or owned by another user
    """
    diary = find_by_id_for_owner(db, diary_id, owner)
    if diary is None:
        raise NotFoundOrForbidden()

    diary.title = changes.title
    diary.content = changes.content
    if changes.entry_date is not None:
        diary.entry_date = changes.entry_date
    diary.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(diary)

    logger.info("Diary id=%s updated by user id=%s", diary.id, owner.id)
    return diary


def delete(db: Session, diary_id: int, owner: User) -> None:
    """
    Permanently remove an owned entry.

    Raises:
        NotFoundOrForbidden: entry missing, already deleted or owned by another user
    """
    diary = find_by_id_for_owner(db, diary_id, owner)
    if diary is None:
        raise NotFoundOrForbidden()

    db.delete(diary)
    db.commit()

    logger.info("Diary id=%s deleted by user id=%s", diary_id, owner.id)


def list_by_owner(db: Session, owner: User, page_index: int, page_size: int = PAGE_SIZE) -> Page:
    """Owner's entries, newest first."""
    return _paginate(_owned_by(db, owner), page_index, page_size)


def search(db: Session, owner: User, keyword: Optional[str], page_index: int,
           page_size: int = PAGE_SIZE) -> Page:
    """
    Owner's entries whose title or content contains keyword, ignoring case.

    A blank keyword lists everything, same as list_by_owner.
    """
    if keyword is None or not keyword.strip():
        return list_by_owner(db, owner, page_index, page_size)

    needle = keyword.strip().lower()
    query = _owned_by(db, owner).filter(
        or_(
            func.lower(Diary.title).contains(needle, autoescape=True),
            func.lower(Diary.content).contains(needle, autoescape=True),
        )
    )
    return _paginate(query, page_index, page_size)


def count_by_owner(db: Session, owner: User) -> int:
    """Total entries for owner regardless of any search filter."""
    return _owned_by(db, owner).count()
