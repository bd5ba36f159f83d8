"""Todo statistics."""

from datetime import UTC, date, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import storage_errors
from ..models import Todo, TodoStatus
from ..repositories import TodoRepository
from ..schemas import TodoStats

DUE_SOON_DAYS = 7


class StatsService:
    """
    Агрегаты по задачам для дашборда.

    Считаются только неархивные задачи, каждая метрика - отдельный запрос.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.todo_repo = TodoRepository(db)

    async def get_todo_stats(self, today: date | None = None) -> TodoStats:
        """
        Посчитать статистику задач.

        Args:
            today: Дата отсчёта для overdue/due_today/due_this_week
                (по умолчанию - текущая дата UTC)

        Returns:
            TodoStats, где pending = total - completed

        Метрики по срокам считают только невыполненные задачи:
        - overdue: due_date < today
        - due_today: due_date == today
        - due_this_week: today <= due_date <= today + 7 дней
        """
        today = today or datetime.now(UTC).date()
        week_end = today + timedelta(days=DUE_SOON_DAYS)
        not_completed = Todo.completed.is_(False)
        repo = self.todo_repo

        with storage_errors("get todo stats"):
            total = await repo.count_active()
            completed = await repo.count_active(Todo.completed.is_(True))

            return TodoStats(
                total=total,
                completed=completed,
                pending=total - completed,
                in_progress=await repo.count_active(Todo.status == TodoStatus.IN_PROGRESS.value),
                blocked=await repo.count_active(Todo.status == TodoStatus.BLOCKED.value),
                overdue=await repo.count_active(Todo.due_date < today, not_completed),
                due_today=await repo.count_active(Todo.due_date == today, not_completed),
                due_this_week=await repo.count_active(Todo.due_date.between(today, week_end), not_completed),
                by_priority=await repo.count_active_grouped(Todo.priority, "none"),
                by_project=await repo.count_active_grouped(Todo.project_id, "none"),
                by_assignee=await repo.count_active_grouped(Todo.assignee, "unassigned"),
            )
