"""Task Domain Model -- 任务实体与编辑草稿

时间字段统一为毫秒时间戳（epoch ms）：created_at / updated_at / due_timestamp；
sort_order 默认取创建时刻，因此与时间戳处于同一数量级。
due_date 是旧版按天精度的截止日期，due_timestamp 存在时以后者为准。
"""

from datetime import date

from pydantic import BaseModel, Field

from ..config import TAG_SEPARATOR
from .enums import Quadrant, ReminderUnit, RepeatType, TaskStatus


def normalize_tags(raw: str) -> str:
    """标签规范化：逗号切分、去空白、丢弃空项、保序去重，再用 ", " 连接

    幂等：normalize_tags(normalize_tags(s)) == normalize_tags(s)
    """
    seen: dict[str, None] = {}
    for part in raw.split(","):
        tag = part.strip()
        if tag:
            seen.setdefault(tag, None)
    return TAG_SEPARATOR.join(seen)


def split_tags(tags: str) -> list[str]:
    """把已规范化的标签串拆成列表"""
    return [t.strip() for t in tags.split(",") if t.strip()]


class Task(BaseModel):
    """Task 数据模型 -- tasks 表的一行

    id 由存储分配，单调递增且不复用。
    全库同一时刻最多一个 is_mit=True，且必须是未完成任务。
    """

    id: int = Field(description="存储分配的自增 ID")
    title: str = Field(description="标题，去空白后非空")
    description: str = Field(default="", description="描述")
    tags: str = Field(default="", description="规范化后的逗号分隔标签")
    quadrant: Quadrant = Field(default=Quadrant.IMPORTANT_URGENT, description="所在象限")
    status: TaskStatus = Field(default=TaskStatus.IN_PROGRESS, description="当前状态")
    due_date: date | None = Field(default=None, description="旧版按天截止日期")
    due_timestamp: int | None = Field(default=None, description="精确截止时间（毫秒）")
    estimated_minutes: int | None = Field(default=None, description="预估耗时（分钟）")
    repeat_type: RepeatType = Field(default=RepeatType.ONCE, description="重复类型")
    reminder_enabled: bool = Field(default=False, description="是否开启提醒")
    reminder_interval_value: int | None = Field(default=None, description="提前提醒的数值")
    reminder_interval_unit: ReminderUnit = Field(
        default=ReminderUnit.MINUTES,
        description="提前提醒的单位",
    )
    is_pinned: bool = Field(default=False, description="是否置顶")
    sort_order: int = Field(description="同置顶分组内的排序权重，越小越靠前")
    is_mit: bool = Field(default=False, description="是否为今日最重要任务")
    created_at: int = Field(description="创建时间（毫秒）")
    updated_at: int = Field(description="更新时间（毫秒）")
    audio_path: str | None = Field(default=None, description="本地录音文件引用")

    def to_draft(self) -> "TaskDraft":
        """转换为可编辑草稿（编辑器回填）"""
        return TaskDraft(
            id=self.id,
            title=self.title,
            description=self.description,
            tags=self.tags,
            quadrant=self.quadrant,
            status=self.status,
            due_date=self.due_date,
            due_timestamp=self.due_timestamp,
            estimated_minutes=self.estimated_minutes,
            repeat_type=self.repeat_type,
            reminder_enabled=self.reminder_enabled,
            reminder_interval_value=self.reminder_interval_value,
            reminder_interval_unit=self.reminder_interval_unit,
            is_pinned=self.is_pinned,
            is_mit=self.is_mit,
            audio_path=self.audio_path,
        )


class TaskDraft(BaseModel):
    """任务草稿 -- Task 去掉存储分配字段（sort_order / created_at / updated_at）

    id 为 None 表示新建，否则表示更新已有任务。
    AI 建议的标签、象限也只是以普通草稿字段的形式进入。
    """

    id: int | None = None
    title: str = ""
    description: str = ""
    tags: str = ""
    quadrant: Quadrant = Quadrant.IMPORTANT_URGENT
    status: TaskStatus = TaskStatus.IN_PROGRESS
    due_date: date | None = None
    due_timestamp: int | None = None
    estimated_minutes: int | None = Field(default=None, ge=0)
    repeat_type: RepeatType = RepeatType.ONCE
    reminder_enabled: bool = False
    reminder_interval_value: int | None = Field(default=None, gt=0)
    reminder_interval_unit: ReminderUnit = ReminderUnit.MINUTES
    is_pinned: bool = False
    is_mit: bool = False
    audio_path: str | None = None
