"""CLI 入口模块 -- python -m tasktrack <command>

支持的命令：
  demo             用示例数据跑一遍任务流程并打印派生状态
  check-deadlines  扫描示例数据中即将到期的任务
"""

import sys
from datetime import timedelta

from .app import TaskTrackApp, create_app
from .config import load_config
from .logging_config import setup_logging
from .models import Priority, TaskDraft

DEMO_USER = "user1"

_COMMANDS = {
    "demo": "用示例数据跑一遍任务流程并打印派生状态",
    "check-deadlines": "扫描示例数据中即将到期的任务",
}


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        _print_usage()
        return 1

    command = args[0]
    if command not in _COMMANDS:
        print(f"未知命令: {command}")
        print(f"可用命令: {', '.join(_COMMANDS)}")
        return 1

    config = load_config()
    setup_logging(config)
    app = create_app(config=config, seed_owner=DEMO_USER)

    if command == "demo":
        run_demo(app)
    else:
        run_check_deadlines(app)
    return 0


def run_demo(app: TaskTrackApp) -> None:
    """执行一组典型操作并输出结果"""
    store = app.task_store

    task = store.create_task(
        TaskDraft(
            title="Write release notes",
            priority=Priority.HIGH,
            due_date=app.clock() + timedelta(days=30),
            tags=["release"],
            created_by=DEMO_USER,
        )
    )
    for title in ("Collect merged changes", "Draft summary", "Review with team"):
        task = store.add_subtask(task.task_id, title)
    store.toggle_subtask(task.task_id, task.subtasks[0].subtask_id)
    store.add_comment(task.task_id, "user2", "Please include the migration notes")
    store.complete_task(task.task_id)
    app.check_deadlines()

    summary = app.summarize_user(DEMO_USER)
    next_level = app.gamification.get_points_for_next_level(DEMO_USER)
    print(f"用户: {summary.user_id}")
    print(f"积分: {summary.points}  等级: {summary.level}  连续天数: {summary.streak_days}")
    print(f"下一等级: {next_level.next_level}（需要 {next_level.required} 分）")
    print(f"成就: {', '.join(summary.achievements) or '-'}")
    print(f"未读通知: {summary.unread_notifications}")
    print(f"生产力评分: {summary.productivity_score:.1f}")
    print("最近活动:")
    for entry in app.analytics.get_recent_activity(limit=5):
        print(f"  {entry.timestamp:%H:%M:%S} {entry.action}: {entry.task_title}")


def run_check_deadlines(app: TaskTrackApp) -> None:
    """扫描即将到期的任务并打印"""
    matched = app.check_deadlines()
    print(f"截止窗口: {app.config.deadline_threshold_hours} 小时，命中 {len(matched)} 个任务")
    for task in matched:
        print(f"  [{task.priority}] {task.title} -- {task.due_date:%Y-%m-%d %H:%M} UTC")


def _print_usage() -> None:
    print("用法: python -m tasktrack <command>")
    print("命令:")
    for name, description in _COMMANDS.items():
        print(f"  {name:<16} {description}")


if __name__ == "__main__":
    sys.exit(main())
