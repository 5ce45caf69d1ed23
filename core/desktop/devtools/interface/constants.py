"""Interface-level constants for the tasklive CLI/TUI."""

from typing import Dict, Tuple

# Filter keys 1-4; `f` cycles through FILTER_CYCLE.
QUICK_FILTERS: Dict[str, str] = {"1": "all", "2": "pending", "3": "in-progress", "4": "done"}
FILTER_CYCLE: Tuple[str, ...] = (
    "all",
    "pending",
    "in-progress",
    "done",
    "completed",
    "blocked",
    "review",
    "deferred",
    "cancelled",
)
# Enter/Space on a row advances its status along this ring.
STATUS_CYCLE: Tuple[str, ...] = ("pending", "in-progress", "done")

LANG_PACK: Dict[str, Dict[str, str]] = {
    "en": {
        "FILTER_ALL": "All",
        "FILTER_PENDING": "Pending",
        "FILTER_IN_PROGRESS": "In progress",
        "FILTER_DONE": "Done",
        "FILTER_COMPLETED": "Completed",
        "FILTER_BLOCKED": "Blocked",
        "FILTER_REVIEW": "Review",
        "FILTER_DEFERRED": "Deferred",
        "FILTER_CANCELLED": "Cancelled",
        "PROJECT": "Project",
        "STATUS_TASKS_COUNT": "{count} tasks",
        "STATUS_SUBTASKS_COUNT": "{done}/{total} subtasks",
        "STATUS_COMPLETION": "{percent}% done",
        "NEXT_TASK": "Next: #{id} {title}",
        "NEXT_TASK_NONE": "Next: —",
        "SUBTASKS_SHOWN": "subtasks on",
        "SUBTASKS_HIDDEN": "subtasks off",
        "MORE_ABOVE": "▲ {count} more above",
        "MORE_BELOW": "▼ {count} more below",
        "TASK_LIST_EMPTY": "No tasks yet. Add one with: tasklive add \"Title\"",
        "TASK_LIST_EMPTY_FILTER": "No tasks match filter: {filter}",
        "LOAD_ERROR_TITLE": "Failed to load tasks",
        "LOAD_ERROR_HINT": "Press r to retry or q to quit.",
        "DETAIL_STATUS": "Status",
        "DETAIL_PRIORITY": "Priority",
        "DETAIL_DEPS": "Depends on",
        "DETAIL_SUBTASKS": "Subtasks",
        "DETAIL_PARENT": "Parent",
        "DESCRIPTION": "Description",
        "DESCRIPTION_MISSING": "No description",
        "FOOTER_HINTS": "↑↓/jk move · PgUp/PgDn page · Enter/Space status · Tab subtasks · 1-4/f filter · r refresh · q quit",
        "STATUS_MESSAGE_STATUS_SET": "{id} → {status}",
        "STATUS_MESSAGE_REFRESHED": "Reloaded",
        "STATUS_MESSAGE_UNCHANGED": "Already up to date",
        "STATUS_MESSAGE_FILTER": "Filter: {value}",
        "STATUS_MESSAGE_UPDATED": "Updated from disk",
        "ERR_MUTATION": "Failed: {error}",
        "ERR_LOAD": "Cannot load tasks: {error}",
        "CLI_NO_NEXT": "No eligible task: everything is done or blocked by dependencies.",
        "CLI_NEXT": "Next task: #{id} {title} [{priority}]",
        "CLI_DONE": "OK: {message}",
        "CLI_LIST_EMPTY": "No tasks.",
    },
    "ru": {
        "FILTER_ALL": "Все",
        "FILTER_PENDING": "Ожидают",
        "FILTER_IN_PROGRESS": "В работе",
        "FILTER_DONE": "Готово",
        "FILTER_COMPLETED": "Завершено",
        "FILTER_BLOCKED": "Заблокировано",
        "FILTER_REVIEW": "На ревью",
        "FILTER_DEFERRED": "Отложено",
        "FILTER_CANCELLED": "Отменено",
        "PROJECT": "Проект",
        "STATUS_TASKS_COUNT": "задач: {count}",
        "STATUS_SUBTASKS_COUNT": "подзадач: {done}/{total}",
        "STATUS_COMPLETION": "готово {percent}%",
        "NEXT_TASK": "Далее: #{id} {title}",
        "NEXT_TASK_NONE": "Далее: —",
        "SUBTASKS_SHOWN": "подзадачи видны",
        "SUBTASKS_HIDDEN": "подзадачи скрыты",
        "MORE_ABOVE": "▲ ещё {count} выше",
        "MORE_BELOW": "▼ ещё {count} ниже",
        "TASK_LIST_EMPTY": "Задач пока нет. Добавьте: tasklive add \"Название\"",
        "TASK_LIST_EMPTY_FILTER": "Нет задач под фильтр: {filter}",
        "LOAD_ERROR_TITLE": "Не удалось загрузить задачи",
        "LOAD_ERROR_HINT": "r — повторить, q — выход.",
        "DETAIL_STATUS": "Статус",
        "DETAIL_PRIORITY": "Приоритет",
        "DETAIL_DEPS": "Зависит от",
        "DETAIL_SUBTASKS": "Подзадачи",
        "DETAIL_PARENT": "Родитель",
        "DESCRIPTION": "Описание",
        "DESCRIPTION_MISSING": "Нет описания",
        "FOOTER_HINTS": "↑↓/jk ход · PgUp/PgDn страница · Enter/Space статус · Tab подзадачи · 1-4/f фильтр · r обновить · q выход",
        "STATUS_MESSAGE_STATUS_SET": "{id} → {status}",
        "STATUS_MESSAGE_REFRESHED": "Перечитано",
        "STATUS_MESSAGE_UNCHANGED": "Изменений нет",
        "STATUS_MESSAGE_FILTER": "Фильтр: {value}",
        "STATUS_MESSAGE_UPDATED": "Обновлено с диска",
        "ERR_MUTATION": "Ошибка: {error}",
        "ERR_LOAD": "Не удалось загрузить задачи: {error}",
        "CLI_NO_NEXT": "Нет доступных задач: всё готово или заблокировано зависимостями.",
        "CLI_NEXT": "Следующая задача: #{id} {title} [{priority}]",
        "CLI_LIST_EMPTY": "Задач нет.",
    },
}


def filter_label_key(value: str) -> str:
    return "FILTER_" + (value or "all").upper().replace("-", "_")


__all__ = ["QUICK_FILTERS", "FILTER_CYCLE", "STATUS_CYCLE", "LANG_PACK", "filter_label_key"]
