# schemas.py
"""
各内容类型的入参校验（pydantic）。

对外字段一律 camelCase（与前端 / 原有 JSON 保持一致），
内部属性用 snake_case，依靠 alias_generator 自动映射。
校验失败统一转换成 ValidationFailure，路由层据此返回 400。
"""
from __future__ import annotations

import re
import unicodedata
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from services.errors import ValidationFailure

Text = Annotated[str, Field(min_length=1)]
StrList = list[str]


def slugify(text: str) -> str:
    """'Test Grant!' -> 'test-grant'，'Études à Paris' -> 'etudes-a-paris'"""
    # 先去掉变音符号，再丢弃剩下的非 ASCII 字符，保证 slug 能直接放进 URL
    s = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    s = re.sub(r"[^\w\s-]", "", s.lower()).strip()
    s = re.sub(r"[\s_-]+", "-", s)
    return s.strip("-")


class _Entity(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


# ========== 内容类型 ==========

class ScholarshipIn(_Entity):
    title: Text
    description: Text
    amount: Text
    deadline: Text
    country: Text
    tags: StrList
    slug: Optional[str] = None
    overview: str = ""
    highlights: StrList = []
    duration: str = ""
    level: str = ""
    fields_covered: StrList = []
    eligibility: str = ""
    is_renewable: bool = False
    benefits: StrList = []
    application_procedure: str = ""
    link: Optional[str] = None


class ArticleIn(_Entity):
    title: Text
    content: Text
    summary: Text
    publish_date: Text
    author: Text
    category: Text
    slug: Optional[str] = None
    author_title: Optional[str] = None
    author_image: Optional[str] = None
    image: Optional[str] = None


class CountryIn(_Entity):
    name: Text
    description: Text
    universities: int = Field(ge=0)
    acceptance_rate: Text
    slug: Optional[str] = None
    overview: str = ""
    highlights: StrList = []
    language: str = ""
    currency: str = ""
    average_tuition: str = ""
    average_living_cost: str = ""
    visa_requirement: str = ""
    popular_cities: StrList = []
    top_universities: StrList = []
    education_system: str = ""
    image: Optional[str] = None
    flag: Optional[str] = None


class UniversityIn(_Entity):
    name: Text
    description: Text
    country: Text
    slug: Optional[str] = None
    overview: str = ""
    location: str = ""
    founded_year: Optional[int] = None
    ranking: Optional[int] = Field(default=None, ge=1)
    acceptance_rate: Optional[str] = None
    student_population: Optional[str] = None
    international_students: Optional[str] = None
    academic_calendar: Optional[str] = None
    programs_offered: StrList = []
    tuition_fees: str = ""
    admission_requirements: StrList = []
    application_deadlines: str = ""
    scholarships_available: bool = False
    campus_life: str = ""
    notable_alumni: StrList = []
    facilities: StrList = []
    image: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    features: StrList = []


class NewsIn(_Entity):
    title: Text
    content: Text
    summary: Text
    publish_date: Text
    category: Text
    slug: Optional[str] = None
    image: Optional[str] = None
    is_featured: bool = False


class MenuChild(_Entity):
    # 子菜单只有一层，不允许再挂 children
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    id: int
    title: Text
    url: Text


class MenuItemIn(_Entity):
    title: Text
    url: Text
    children: list[MenuChild] = []


# ========== 身份 ==========

class UserIn(_Entity):
    username: Text
    password_hash: Text
    is_admin: bool = False


class ActiveUserIn(_Entity):
    full_name: Text
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password_hash: Optional[str] = None
    profile_image: str = ""
    google_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def _need_credential(self):
        if not self.password_hash and not self.google_id:
            raise ValueError("password is required unless the account is Google-linked")
        return self


class ActiveUserPatch(_Entity):
    full_name: Optional[Text] = None
    profile_image: Optional[str] = None
    google_id: Optional[str] = None
    password_hash: Optional[str] = None


class CommentIn(_Entity):
    content: str = Field(min_length=1, max_length=2000)


CONTENT_SCHEMAS: dict[str, type[_Entity]] = {
    "scholarships": ScholarshipIn,
    "articles": ArticleIn,
    "countries": CountryIn,
    "universities": UniversityIn,
    "news": NewsIn,
    "menu": MenuItemIn,
}

# 生成 slug 用的标题字段
TITLE_FIELD = {
    "scholarships": "title",
    "articles": "title",
    "countries": "name",
    "universities": "name",
    "news": "title",
}

# 服务端维护、不接受外部写入的字段
SERVER_FIELDS = ("id", "likes")


def _errors(exc: ValidationError) -> list[dict]:
    out = []
    for e in exc.errors():
        field = ".".join(str(p) for p in e.get("loc", ())) or "__root__"
        out.append({"field": field, "message": e.get("msg", "invalid")})
    return out


def parse(model: type[_Entity], payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object")
    try:
        obj = model.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailure("Validation failed", _errors(exc)) from exc
    return obj.model_dump(by_alias=True)


def validate(kind: str, payload: Any) -> dict:
    """校验新建入参，返回干净的 camelCase 字典；缺 slug 时由标题生成"""
    model = CONTENT_SCHEMAS.get(kind)
    if model is None:
        raise ValidationFailure(f"Unknown content kind: {kind}")
    if isinstance(payload, dict):
        payload = {k: v for k, v in payload.items() if k not in SERVER_FIELDS}
    data = parse(model, payload)

    title_field = TITLE_FIELD.get(kind)
    if title_field:
        slug = slugify(data.get("slug") or data[title_field])
        if not slug:
            raise ValidationFailure(
                "Validation failed",
                [{"field": "slug", "message": "cannot derive a URL-safe slug"}],
            )
        data["slug"] = slug
    return data


def validate_patch(kind: str, current: dict, patch: Any) -> dict:
    """更新 = 当前值 + 补丁，整体重新校验"""
    if not isinstance(patch, dict):
        raise ValidationFailure("Request body must be a JSON object")
    merged = {k: v for k, v in current.items() if k not in SERVER_FIELDS}
    merged.update({k: v for k, v in patch.items() if k not in SERVER_FIELDS})
    return validate(kind, merged)
