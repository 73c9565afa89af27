# models/news.py
from extensions import db
from models.base import EntityMixin, search_index
from services.storage_base import SEARCH_FIELDS


class News(EntityMixin, db.Model):
    __tablename__ = "news"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    summary = db.Column(db.Text, nullable=False)
    publish_date = db.Column(db.String(40), nullable=False, index=True)
    image = db.Column(db.String(500))
    category = db.Column(db.String(80), nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False, index=True)

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    PUBLIC_FIELDS = (
        "title", "content", "summary", "publish_date", "image", "category", "is_featured", "slug",
    )


search_index(News, SEARCH_FIELDS["news"])
