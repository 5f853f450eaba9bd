# app/ui/tasks.py

from datetime import date, datetime
import streamlit as st
from app.forms import build_task_payload
from app.services.api import ApiError, Unauthorized


STATUSES = ["todo", "in-progress", "completed"]
PRIORITIES = ["low", "medium", "high"]
SORT_FIELDS = {"Created": "createdAt", "Due date": "dueDate", "Priority": "priority", "Title": "title"}


def tasks_page(session):
    user = session.user or {}
    st.title(f"Hello, {user.get('name', '')}!")

    filters = filter_bar()

    if st.button("➕ New task"):
        st.session_state["show_task_form"] = not st.session_state.get("show_task_form", False)
        st.session_state.pop("editing_task", None)

    if st.session_state.get("show_task_form"):
        task_form(session, None)

    try:
        result = session.api.list_tasks(**filters)
    except Unauthorized:
        st.rerun()
        return
    except ApiError as e:
        st.error(e.message)
        return

    if not result["tasks"]:
        st.info("No tasks yet.")
        return

    st.caption(f"{result['count']} task(s)")
    for task in result["tasks"]:
        task_item(session, task)


def filter_bar():
    cols = st.columns([3, 2, 2, 2, 1])
    with cols[0]:
        search = st.text_input("Search", key="filter_search")
    with cols[1]:
        status = st.selectbox("Status", [""] + STATUSES, format_func=lambda s: s or "All")
    with cols[2]:
        priority = st.selectbox("Priority", [""] + PRIORITIES, format_func=lambda p: p or "All")
    with cols[3]:
        sort_label = st.selectbox("Sort by", list(SORT_FIELDS))
    with cols[4]:
        ascending = st.toggle("Asc", value=False)

    return {
        "status": status,
        "priority": priority,
        "search": search,
        "sort_by": SORT_FIELDS[sort_label],
        "sort_order": "asc" if ascending else "desc",
    }


def _due(task):
    if not task.get("dueDate"):
        return None
    return datetime.fromisoformat(task["dueDate"]).date()


def task_item(session, task):
    with st.container(border=True):
        cols = st.columns([6, 1, 1])
        with cols[0]:
            st.markdown(f"**{task['title']}**  ·  `{task['status']}`  ·  `{task['priority']}`")
            if task.get("description"):
                st.write(task["description"])
            due = _due(task)
            if due:
                st.caption(f"Due {due.isoformat()}")
        with cols[1]:
            if st.button("✏️", key=f"edit-{task['id']}"):
                st.session_state["editing_task"] = task["id"]
        with cols[2]:
            if st.button("🗑️", key=f"delete-{task['id']}"):
                st.session_state["confirm_delete"] = task["id"]

        if st.session_state.get("confirm_delete") == task["id"]:
            confirm_delete(session, task)

        if st.session_state.get("editing_task") == task["id"]:
            task_form(session, task)


def task_form(session, task):
    task = task or {}
    key = task.get("id", "new")

    with st.form(f"task_form_{key}"):
        title = st.text_input("Title", value=task.get("title", ""))
        description = st.text_area("Description", value=task.get("description") or "")
        status = st.selectbox("Status", STATUSES, index=STATUSES.index(task.get("status", "todo")))
        priority = st.selectbox("Priority", PRIORITIES, index=PRIORITIES.index(task.get("priority", "medium")))
        has_due = st.checkbox("Due date", value=_due(task) is not None)
        due_date = st.date_input("Due", value=_due(task) or date.today())
        submitted = st.form_submit_button("Save")

    if not submitted:
        return

    payload, errors = build_task_payload(title, description, status, priority, due_date if has_due else None)
    if errors:
        for field, message in errors.items():
            st.error(f"{field}: {message}")
        return

    try:
        if task:
            session.api.update_task(task["id"], payload)
        else:
            session.api.create_task(payload)
    except Unauthorized:
        st.rerun()
    except ApiError as e:
        st.error(e.message)
        for field, message in e.errors.items():
            st.error(f"{field}: {message}")
        return

    st.session_state.pop("editing_task", None)
    st.session_state["show_task_form"] = False
    st.rerun()


def confirm_delete(session, task):
    st.warning(f"Delete '{task['title']}'? This cannot be undone.")
    cols = st.columns([1, 1, 6])
    with cols[0]:
        confirmed = st.button("Confirm delete", key=f"confirm-delete-{task['id']}", type="primary")
    with cols[1]:
        cancelled = st.button("Cancel", key=f"cancel-delete-{task['id']}")

    if cancelled:
        st.session_state.pop("confirm_delete", None)
        st.rerun()
    if not confirmed:
        return

    st.session_state.pop("confirm_delete", None)
    try:
        session.api.delete_task(task["id"])
    except Unauthorized:
        # the session signed itself out; the rerun lands on the login page
        st.rerun()
    except ApiError as e:
        st.error(e.message)
        return
    st.rerun()
