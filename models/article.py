# models/article.py
from extensions import db
from models.base import EntityMixin, search_index
from services.storage_base import SEARCH_FIELDS


class Article(EntityMixin, db.Model):
    __tablename__ = "articles"
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    summary = db.Column(db.Text, nullable=False)
    publish_date = db.Column(db.String(40), nullable=False)
    author = db.Column(db.String(120), nullable=False)
    author_title = db.Column(db.String(120))
    author_image = db.Column(db.String(500))
    image = db.Column(db.String(500))
    category = db.Column(db.String(80), nullable=False, index=True)

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    likes = db.relationship("ArticleLike", cascade="all, delete-orphan", lazy="selectin")
    comments = db.relationship("Comment", cascade="all, delete-orphan", backref="article")

    PUBLIC_FIELDS = (
        "title", "content", "summary", "slug", "publish_date", "author",
        "author_title", "author_image", "image", "category",
    )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["likes"] = sorted(l.user_id for l in self.likes)
        return data


class ArticleLike(db.Model):
    __tablename__ = "article_likes"
    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=False)

    # 同一用户对同一文章最多一条
    __table_args__ = (db.UniqueConstraint("article_id", "user_id", name="uq_article_like"),)


search_index(Article, SEARCH_FIELDS["articles"])
