"""Gamification Domain Models

成就目录（静态）+ 每用户进度快照。
UserProgress 中的计数器是对事件流的真实计数，成就阈值基于这些计数判断。
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

# 成就 ID
FIRST_TASK = "first-task"
TASK_MASTER = "task-master"
STREAK_3 = "streak-3"
STREAK_7 = "streak-7"
ORGANIZATION_PRO = "organization-pro"
DEADLINE_CRUSHER = "deadline-crusher"


class Achievement(BaseModel):
    """成就

    points 为目录中展示的分值，解锁成就本身不增加用户积分。
    """

    achievement_id: str = Field(description="成就 ID")
    name: str = Field(description="成就名称")
    description: str = Field(description="解锁条件描述")
    icon: str = Field(description="图标路径")
    points: int = Field(default=0, ge=0, description="展示分值")
    unlocked_at: datetime | None = Field(default=None, description="解锁时间，未解锁为 None")


class UserProgress(BaseModel):
    """单个用户的游戏化进度"""

    user_id: str
    points: int = 0
    level: int = 1
    achievements: list[Achievement] = Field(default_factory=list)
    streak_days: int = 0
    last_activity_date: date | None = None

    # 真实事件计数
    tasks_created: int = 0
    tasks_completed: int = 0
    deadlines_met: int = 0
    organized_task_ids: set[str] = Field(default_factory=set)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.achievement_id == achievement_id for a in self.achievements)


class LevelProgress(BaseModel):
    """距离下一等级的积分进度"""

    current: int = Field(description="当前积分")
    required: int = Field(description="下一等级所需积分（满级时等于当前积分）")
    next_level: int = Field(description="下一等级（满级时等于当前等级）")


def default_achievements() -> list[Achievement]:
    """获取默认成就目录"""
    return [
        Achievement(
            achievement_id=FIRST_TASK,
            name="First Steps",
            description="Create your first task",
            icon="assets/badges/first-task.svg",
            points=10,
        ),
        Achievement(
            achievement_id=TASK_MASTER,
            name="Task Master",
            description="Complete 10 tasks",
            icon="assets/badges/task-master.svg",
            points=50,
        ),
        Achievement(
            achievement_id=STREAK_3,
            name="On Fire",
            description="Complete tasks for 3 days in a row",
            icon="assets/badges/streak-3.svg",
            points=25,
        ),
        Achievement(
            achievement_id=STREAK_7,
            name="Unstoppable",
            description="Complete tasks for 7 days in a row",
            icon="assets/badges/streak-7.svg",
            points=75,
        ),
        Achievement(
            achievement_id=ORGANIZATION_PRO,
            name="Organization Pro",
            description="Create 5 tasks with subtasks",
            icon="assets/badges/organization-pro.svg",
            points=50,
        ),
        Achievement(
            achievement_id=DEADLINE_CRUSHER,
            name="Deadline Crusher",
            description="Complete 5 tasks before their deadline",
            icon="assets/badges/deadline-crusher.svg",
            points=50,
        ),
    ]
