"""复盘统计模型"""

from pydantic import BaseModel, Field

from .enums import Quadrant


class TagCount(BaseModel):
    """单个标签的出现次数"""

    name: str
    count: int


class QuadrantStats(BaseModel):
    """单个象限的任务数与完成数"""

    quadrant: Quadrant
    total: int = 0
    completed: int = 0

    @property
    def completion_rate(self) -> float:
        return self.completed / self.total if self.total else 0.0


class ReviewStats(BaseModel):
    """一批任务的复盘统计"""

    total: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0
    completion_rate: float = Field(default=0.0, description="完成数 / 总数")
    important_completion_rate: float = Field(
        default=0.0,
        description="重要象限（1、2）的完成率",
    )
    quadrants: list[QuadrantStats] = Field(default_factory=list)
    tags: list[TagCount] = Field(default_factory=list, description="按次数倒序")
