"""示例数据

每次调用都构造新的对象，截止时间相对于传入的当前时间计算，
供 demo 命令和测试使用。
"""

from datetime import datetime, timedelta

from ulid import ULID

from .models.enums import Priority
from .models.project import Project
from .models.task import Subtask, Task


def sample_projects(owner: str, now: datetime) -> list[Project]:
    """构造示例项目（最后一个已归档）"""
    rows = [
        ("Website Redesign", "Complete overhaul of the company website", "#4285F4", True),
        ("Marketing Campaign", "Q2 marketing campaign for new product launch", "#EA4335", True),
        ("Mobile App Development", "iOS and Android app for client", "#34A853", True),
        ("Home Renovation", "Kitchen and bathroom remodel", "#9C27B0", False),
    ]
    projects = []
    for offset, (name, description, color, is_active) in enumerate(rows):
        created = now - timedelta(days=20 - offset * 3)
        projects.append(
            Project(
                project_id=str(ULID()),
                name=name,
                description=description,
                color=color,
                created_at=created,
                updated_at=created,
                is_active=is_active,
                created_by=owner,
            )
        )
    return projects


def sample_tasks(owner: str, now: datetime, projects: list[Project]) -> list[Task]:
    """构造示例任务，引用 sample_projects 返回的项目"""
    website, marketing, mobile, renovation = (p.project_id for p in projects[:4])

    def task(
        title: str,
        description: str,
        priority: Priority,
        project_id: str,
        tags: list[str],
        age_days: int,
        due_in_hours: float | None = None,
        completed: bool = False,
        subtasks: list[tuple[str, bool]] | None = None,
    ) -> Task:
        created = now - timedelta(days=age_days)
        return Task(
            task_id=str(ULID()),
            title=title,
            description=description,
            completed=completed,
            created_at=created,
            updated_at=created,
            due_date=now + timedelta(hours=due_in_hours) if due_in_hours is not None else None,
            priority=priority,
            project_id=project_id,
            tags=tags,
            subtasks=[
                Subtask(subtask_id=str(ULID()), title=sub_title, completed=done)
                for sub_title, done in subtasks or []
            ],
            created_by=owner,
        )

    return [
        task(
            "Complete project proposal",
            "Finish the Q2 project proposal for client review",
            Priority.HIGH,
            website,
            ["proposal", "client", "deadline"],
            age_days=2,
            due_in_hours=12,
            subtasks=[
                ("Research market trends", True),
                ("Draft executive summary", True),
                ("Prepare budget estimates", False),
                ("Create timeline", False),
            ],
        ),
        task(
            "Schedule team meeting",
            "Arrange weekly team sync meeting for project updates",
            Priority.MEDIUM,
            website,
            ["meeting", "team", "recurring"],
            age_days=3,
            completed=True,
        ),
        task(
            "Review content strategy",
            "Evaluate current content performance and recommend improvements",
            Priority.MEDIUM,
            marketing,
            ["marketing", "content", "analytics"],
            age_days=4,
            due_in_hours=24 * 6,
        ),
        task(
            "Fix navigation bug in mobile view",
            "Address issue with hamburger menu not displaying correctly on iOS devices",
            Priority.URGENT,
            mobile,
            ["bug", "mobile", "UI/UX"],
            age_days=1,
            due_in_hours=20,
        ),
        task(
            "Research kitchen cabinet options",
            "Compare prices and styles for kitchen renovation",
            Priority.LOW,
            renovation,
            ["renovation", "research", "personal"],
            age_days=7,
            due_in_hours=-48,
        ),
    ]
