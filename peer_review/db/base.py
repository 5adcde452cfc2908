# /peer-review-backend/peer_review/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic runs its auto-generation scan.

from .base_class import Base

from .models.course_models import Task, Student, Team, TeamMember, Submission
from .models.review_models import AssignmentRecord, Review, MetaReview, RubricItem
