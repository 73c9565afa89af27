# models/university.py
from extensions import db
from models.base import EntityMixin, search_index
from services.storage_base import SEARCH_FIELDS


class University(EntityMixin, db.Model):
    __tablename__ = "universities"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    overview = db.Column(db.Text, default="")
    country = db.Column(db.String(120), nullable=False, index=True)
    location = db.Column(db.String(160), default="")
    founded_year = db.Column(db.Integer)
    ranking = db.Column(db.Integer, index=True)
    acceptance_rate = db.Column(db.String(80))
    student_population = db.Column(db.String(80))
    international_students = db.Column(db.String(80))
    academic_calendar = db.Column(db.String(120))
    programs_offered = db.Column(db.JSON, default=list)
    tuition_fees = db.Column(db.String(160), default="")
    admission_requirements = db.Column(db.JSON, default=list)
    application_deadlines = db.Column(db.String(200), default="")
    scholarships_available = db.Column(db.Boolean, default=False, nullable=False)
    campus_life = db.Column(db.Text, default="")
    notable_alumni = db.Column(db.JSON, default=list)
    facilities = db.Column(db.JSON, default=list)
    image = db.Column(db.String(500))
    logo = db.Column(db.String(500))
    website = db.Column(db.String(500))
    features = db.Column(db.JSON, default=list)

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    PUBLIC_FIELDS = (
        "name", "description", "overview", "country", "location", "founded_year", "ranking",
        "acceptance_rate", "student_population", "international_students", "academic_calendar",
        "programs_offered", "tuition_fees", "admission_requirements", "application_deadlines",
        "scholarships_available", "campus_life", "notable_alumni", "facilities", "image",
        "logo", "website", "slug", "features",
    )


search_index(University, SEARCH_FIELDS["universities"])
