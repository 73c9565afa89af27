# models/scholarship.py
from extensions import db
from models.base import EntityMixin, search_index
from services.storage_base import SEARCH_FIELDS


class Scholarship(EntityMixin, db.Model):
    __tablename__ = "scholarships"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    overview = db.Column(db.Text, default="")
    highlights = db.Column(db.JSON, default=list)
    amount = db.Column(db.String(120), nullable=False)
    deadline = db.Column(db.String(80), nullable=False)
    duration = db.Column(db.String(80), default="")
    level = db.Column(db.String(80), default="")
    fields_covered = db.Column(db.JSON, default=list)
    eligibility = db.Column(db.Text, default="")
    is_renewable = db.Column(db.Boolean, default=False, nullable=False)
    benefits = db.Column(db.JSON, default=list)
    application_procedure = db.Column(db.Text, default="")
    country = db.Column(db.String(120), nullable=False, index=True)
    tags = db.Column(db.JSON, default=list)
    link = db.Column(db.String(500))

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    PUBLIC_FIELDS = (
        "title", "slug", "overview", "description", "highlights", "amount", "deadline",
        "duration", "level", "fields_covered", "eligibility", "is_renewable", "benefits",
        "application_procedure", "country", "tags", "link",
    )


search_index(Scholarship, SEARCH_FIELDS["scholarships"])
