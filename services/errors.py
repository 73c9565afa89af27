# services/errors.py
"""
存储层 / 鉴权层的异常分类。

- NotFound 不是异常：查询不到时返回 None，由路由层转成 404
- BackendUnavailable 只在存储层内部流转，由可用性路由器消化
"""


class StorageError(Exception):
    status_code = 500

    def __init__(self, msg: str = "", errors: list | None = None):
        super().__init__(msg)
        self.msg = msg or self.__class__.__name__
        self.errors = errors or []

    def to_dict(self) -> dict:
        data = {"msg": self.msg}
        if self.errors:
            data["errors"] = self.errors
        return data


class BackendUnavailable(StorageError):
    """持久存储连不上 / 基础设施层面查询失败"""
    status_code = 503


class ValidationFailure(StorageError):
    status_code = 400


class ConflictError(StorageError):
    status_code = 409


class AuthFailure(StorageError):
    status_code = 401

    def __init__(self, msg: str = "Invalid token.", status: int = 401):
        super().__init__(msg)
        self.status_code = status


class AuthNotConfigured(StorageError):
    status_code = 500


class SeedDisabled(StorageError):
    status_code = 403
