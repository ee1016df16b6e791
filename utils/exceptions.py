# utils/exceptions.py
from typing import Any, Optional
from werkzeug.exceptions import HTTPException


class BizError(HTTPException):
    code: int  # HTTP 状态码
    message: str  # 业务提示
    data: Optional[Any]  # 附加数据

    def __init__(self, message: str = "业务异常", code: int = 400, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(description=message)


class SyncError(Exception):
    """同步引擎异常基类"""

    def __init__(self, message: str = "同步异常"):
        self.message = message
        super().__init__(message)


class FatalStoreError(SyncError):
    """存储不可用 / 表不存在 / 文件无法解析：整次同步中止"""


class RecordSkipped(SyncError):
    """单条记录无法处理：记录日志并计数，继续下一条"""

    def __init__(self, key: Any, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"记录 {key} 已跳过: {reason}")


class ValidationError(RecordSkipped):
    """待创建记录缺少必填字段或字段格式错误"""


class DuplicateConstraintViolation(SyncError):
    """唯一约束冲突；对关联关系而言目标状态已满足，调用方按成功处理"""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} 已存在")
