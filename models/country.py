# models/country.py
from extensions import db
from models.base import EntityMixin, search_index
from services.storage_base import SEARCH_FIELDS


class Country(EntityMixin, db.Model):
    __tablename__ = "countries"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    overview = db.Column(db.Text, default="")
    description = db.Column(db.Text, nullable=False)
    highlights = db.Column(db.JSON, default=list)
    universities = db.Column(db.Integer, nullable=False, default=0)   # 高校数量
    acceptance_rate = db.Column(db.String(80), nullable=False)
    language = db.Column(db.String(80), default="")
    currency = db.Column(db.String(40), default="")
    average_tuition = db.Column(db.String(120), default="")
    average_living_cost = db.Column(db.String(120), default="")
    visa_requirement = db.Column(db.Text, default="")
    popular_cities = db.Column(db.JSON, default=list)
    top_universities = db.Column(db.JSON, default=list)
    education_system = db.Column(db.Text, default="")
    image = db.Column(db.String(500))
    flag = db.Column(db.String(500))

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    PUBLIC_FIELDS = (
        "name", "slug", "overview", "description", "highlights", "universities",
        "acceptance_rate", "language", "currency", "average_tuition", "average_living_cost",
        "visa_requirement", "popular_cities", "top_universities", "education_system",
        "image", "flag",
    )


search_index(Country, SEARCH_FIELDS["countries"])
