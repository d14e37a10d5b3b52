"""Core 异常体系

- ValidationError: 写入前的参数校验失败，不产生任何写入
- StoreError: 底层存储失败，事务已回滚
- 操作不存在的 id 不是异常（软失败），调用方正常返回
"""


class QuadrantError(Exception):
    """quadrant.core 基础异常"""


class ValidationError(QuadrantError):
    """参数校验失败（例如标题为空）"""

    def __init__(self, message: str, field: str | None = None) -> None:
        """
        Args:
            message: 错误描述
            field: 出错的字段名
        """
        super().__init__(message)
        self.field = field


class StoreError(QuadrantError):
    """存储/事务失败

    事务已整体回滚，原始异常通过 __cause__ 保留。
    本层不做自动重试。
    """

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的操作名
            original_error: 原始异常
        """
        super().__init__(f"存储操作失败: {operation} -- {original_error}")
        self.operation = operation
        self.original_error = original_error
