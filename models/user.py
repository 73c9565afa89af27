# models/user.py
from datetime import datetime

from extensions import db


class User(db.Model):
    """后台管理员账号（用户名 + 密码）"""
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "passwordHash": self.password_hash,
            "isAdmin": self.is_admin,
        }


class ActiveUser(db.Model):
    """前台注册用户（邮箱密码 / Google 登录）"""
    __tablename__ = "active_users"
    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    # Google 账号可以没有密码
    password_hash = db.Column(db.String(255), nullable=True)
    profile_image = db.Column(db.String(500), default="")
    google_id = db.Column(db.String(64), index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    saved = db.relationship("SavedItem", cascade="all, delete-orphan", lazy="selectin")

    def saved_ids(self, kind: str) -> list[int]:
        return sorted(s.item_id for s in self.saved if s.kind == kind)

    def to_dict(self):
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "passwordHash": self.password_hash,
            "profileImage": self.profile_image or "",
            "googleId": self.google_id,
            "savedArticles": self.saved_ids("articles"),
            "savedScholarships": self.saved_ids("scholarships"),
        }


class SavedItem(db.Model):
    __tablename__ = "saved_items"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("active_users.id"), nullable=False, index=True)
    kind = db.Column(db.String(20), nullable=False)      # articles / scholarships
    item_id = db.Column(db.Integer, nullable=False)

    __table_args__ = (db.UniqueConstraint("user_id", "kind", "item_id", name="uq_saved_item"),)
