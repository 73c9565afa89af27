# models/base.py
from datetime import datetime

from pydantic.alias_generators import to_camel
from sqlalchemy import func, literal_column

from extensions import db

# 常量直接写进 SQL，索引表达式和查询表达式逐字一致，规划器才能命中索引
_TS_CONFIG = literal_column("'simple'")
_EMPTY = literal_column("''")
_SPACE = literal_column("' '")


def search_vector(*cols):
    """to_tsvector('simple', coalesce(a, '') || ' ' || coalesce(b, '') ...)

    concat_ws 不是 IMMUTABLE，不能用在索引表达式里。
    """
    doc = None
    for c in cols:
        part = func.coalesce(c, _EMPTY)
        doc = part if doc is None else doc.op("||")(_SPACE).op("||")(part)
    return func.to_tsvector(_TS_CONFIG, doc)


def search_index(model, fields):
    """只在 PostgreSQL 上建的 GIN 全文索引，sqlite 等跳过"""
    cols = [getattr(model, f) for f in fields]
    idx = db.Index(f"ix_{model.__tablename__}_search", search_vector(*cols), postgresql_using="gin")
    idx.ddl_if(dialect="postgresql")
    return idx


class EntityMixin:
    """
    内容表的公共部分：
    - PUBLIC_FIELDS 列出对外字段（snake_case 属性名），to_dict 时转成 camelCase
    - created_at / updated_at / version_id 只在库内使用，不对外暴露
    """
    PUBLIC_FIELDS: tuple = ()

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        data = {"id": self.id}
        for f in self.PUBLIC_FIELDS:
            data[to_camel(f)] = getattr(self, f)
        return data

    def apply(self, data: dict):
        for f in self.PUBLIC_FIELDS:
            key = to_camel(f)
            if key in data:
                setattr(self, f, data[key])
        return self
