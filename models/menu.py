# models/menu.py
from extensions import db
from models.base import EntityMixin


class MenuItem(EntityMixin, db.Model):
    __tablename__ = "menu_items"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False)
    url = db.Column(db.String(255), nullable=False)
    # 二级导航：[{id, title, url}]，不再往下嵌套
    children = db.Column(db.JSON, default=list)

    version_id = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}

    PUBLIC_FIELDS = ("title", "url", "children")
