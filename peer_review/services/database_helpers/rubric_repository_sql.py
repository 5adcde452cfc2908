# /peer-review-backend/peer_review/services/database_helpers/rubric_repository_sql.py

from typing import List, Dict
from sqlalchemy.orm import Session

from peer_review.db.models.review_models import RubricItem


class RubricRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_items(self, assignment_record_id: str) -> List[RubricItem]:
        return (
            self.db.query(RubricItem)
            .filter(RubricItem.assignment_record_id == assignment_record_id)
            .order_by(RubricItem.position.asc())
            .all()
        )

    def replace_items(self, assignment_record_id: str, records: List[Dict]) -> List[RubricItem]:
        """Drops the record's current rubric and inserts `records` in order."""
        (
            self.db.query(RubricItem)
            .filter(RubricItem.assignment_record_id == assignment_record_id)
            .delete(synchronize_session=False)
        )
        new_items = [RubricItem(assignment_record_id=assignment_record_id, **record) for record in records]
        self.db.add_all(new_items)
        self.db.flush()
        return new_items
