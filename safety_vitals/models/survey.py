"""
Safety Vitals
Survey domain models.

Models:
    - Survey: a questionnaire run for one organization / target company
    - SurveyQuestion: one question, tagged with the dimension it scores
    - Response: a respondent's answer to one question
    - Dimension: catalog of named question categories ("Communication", ...)

Architecture chain: Organization → Survey → SurveyQuestion → Response
"""

from safety_vitals.models import db
from safety_vitals.models.base import OrgScopedModel, isoformat, new_uuid, utcnow


# ── Constants ────────────────────────────────────────────────────────────────

# System-wide "Safety Vitals" survey; never removed with its organization.
DEFAULT_SURVEY_ID = "00000000-0000-0000-0000-000000000000"

SCORING_TYPES = {"likert", "binary", "text"}

DEFAULT_MIN_ACCEPTABLE_SCORE = 3.0


class Survey(db.Model):
    __tablename__ = "surveys"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    org_id = db.Column(
        db.String(36),
        db.ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    target_company = db.Column(db.String(200), default="")
    min_acceptable_score = db.Column(
        db.Float, default=DEFAULT_MIN_ACCEPTABLE_SCORE, nullable=False,
        comment="0-5 scale; dimensions at or below it are critical",
    )
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)

    organization = db.relationship("Organization")
    questions = db.relationship(
        "SurveyQuestion",
        back_populates="survey",
        order_by="SurveyQuestion.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "org_id": self.org_id,
            "title": self.title,
            "target_company": self.target_company,
            "min_acceptable_score": self.min_acceptable_score,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Survey {self.title[:40]}>"


class SurveyQuestion(db.Model):
    __tablename__ = "survey_questions"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    survey_id = db.Column(
        db.String(36),
        db.ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_text = db.Column(db.Text, nullable=False)
    dimension = db.Column(db.String(200), nullable=False, default="Unknown")
    scoring_type = db.Column(db.String(20), default="likert")
    min_score = db.Column(db.Integer, default=1)
    max_score = db.Column(db.Integer, default=5)
    reverse_score = db.Column(db.Boolean, default=False)
    order_index = db.Column(db.Integer, default=0)

    survey = db.relationship("Survey", back_populates="questions")

    def to_dict(self):
        return {
            "id": self.id,
            "survey_id": self.survey_id,
            "question_text": self.question_text,
            "dimension": self.dimension,
            "scoring_type": self.scoring_type,
            "min_score": self.min_score,
            "max_score": self.max_score,
            "reverse_score": self.reverse_score,
            "order_index": self.order_index,
        }


class Response(OrgScopedModel):
    """One answer. ``answer`` keeps the raw submitted text, e.g. "Agree (4)"."""

    __tablename__ = "responses"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    user_id = db.Column(db.String(36), nullable=False, index=True)
    question_id = db.Column(
        db.String(36),
        db.ForeignKey("survey_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    answer = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "question_id": self.question_id,
            "answer": self.answer,
            "org_id": self.org_id,
            "created_at": isoformat(self.created_at),
        }


class Dimension(db.Model):
    __tablename__ = "dimensions"

    code = db.Column(db.String(50), primary_key=True)
    dimension_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "code": self.code,
            "dimension_name": self.dimension_name,
            "description": self.description,
        }
