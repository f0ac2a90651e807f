# backend/linglix/repositories/tutor_profile_repository.py
"""Data access for tutor profiles."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ..core.exceptions import RepositoryException
from ..models.tutor import TutorProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorProfileRepository(BaseRepository[TutorProfile]):
    """Repository for tutor profiles."""

    def __init__(self, db: Session):
        super().__init__(db, TutorProfile)

    def lock_for_booking(self, tutor_id: str) -> bool:
        """
        Hold a write lock on the tutor's row until the current transaction ends.

        Booking writes for one tutor queue up behind this lock, so the
        overlap re-check that follows sees every booking committed before it.
        The row is written rather than selected FOR UPDATE because SQLite
        only serialises writers.

        Returns:
            False if the tutor row does not exist
        """
        try:
            touched = (
                self._build_query()
                .filter(TutorProfile.id == tutor_id)
                .update({TutorProfile.updated_at: func.now()}, synchronize_session=False)
            )
            return touched > 0
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking tutor {tutor_id} for booking: {str(e)}")
            raise RepositoryException(f"Failed to lock tutor schedule: {str(e)}") from e
