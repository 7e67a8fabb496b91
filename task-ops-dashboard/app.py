import html
from datetime import datetime, time

import streamlit as st

from taskops.config import get_config
from taskops.dashboard import TaskDashboard
from taskops.export import CSV_MIME
from taskops.filters import ALL, DATE_PRESET_OPTIONS, STATUS_OPTIONS, FilterConfig
from taskops.logging_setup import setup_logging
from taskops.pagination import page_window, selection_label
from taskops.tasks_repo import TaskStore, TaskStoreError
from taskops.theme import set_theme


set_theme()
config = get_config()
setup_logging(config.log_level, log_dir=config.log_dir)


@st.cache_resource(show_spinner=False)
def get_store(database_url: str, init_schema: bool) -> TaskStore:
    store = TaskStore(database_url)
    if init_schema:
        store.init_schema()
    return store


try:
    store = get_store(config.database_url, config.init_schema)
except TaskStoreError as exc:
    st.error(f"Task database is not reachable: {exc}")
    st.stop()

if "task_dashboard" not in st.session_state:
    board = TaskDashboard(
        store,
        page_size=config.page_size,
        export_prefix=config.export_prefix,
        tz=config.zone,
    )
    with st.spinner("Loading tasks..."):
        board.refresh()
    st.session_state.task_dashboard = board

dashboard: TaskDashboard = st.session_state.task_dashboard

# Column widths shared by the table header and rows
TABLE_COLS = [0.35, 2.2, 3.2, 1.3, 1.3, 0.9, 0.9]


# ----- Callbacks (run before the rerun that renders their result) -----

def _on_flag_change(task_id: str, field: str, key: str):
    st.session_state.task_dashboard.toggle_flag(task_id, field, st.session_state[key])


def _on_refresh():
    if st.session_state.task_dashboard.refresh():
        st.toast("Tasks refreshed", icon="✅")


def _clear_search():
    st.session_state.search = ""


def _keep_option(key: str, options):
    # A value can vanish from the dropdown after a delete or refresh.
    if st.session_state.get(key, ALL) not in options:
        st.session_state[key] = ALL


def _label_or_all(all_label: str):
    return lambda v: all_label if v == ALL else v


def _custom_range(value):
    if not value:
        return None, None
    if not isinstance(value, (list, tuple)):
        value = (value,)
    start = datetime.combine(value[0], time.min) if len(value) > 0 else None
    end = datetime.combine(value[1], time.max) if len(value) > 1 else None
    return start, end


# ----- Layout -----

st.markdown("<div class='tod-header'>Task Operations Dashboard</div>", unsafe_allow_html=True)

# Stat tiles double as quick filters
stats = dashboard.stats
tiles = [
    ("all", "Total Tasks", stats.total, None, None),
    ("boh", "BOH Tasks", stats.boh, stats.boh_percentage, None),
    ("foh", "FOH Tasks", stats.foh, stats.foh_percentage, None),
    ("unclassified", "Unclassified", stats.unclassified, stats.unclassified_percentage, "Neither BOH nor FOH"),
]
for col, (key, label, value, pct, subtitle) in zip(st.columns(4), tiles):
    with col:
        text = f"{label}: **{value}**" + (f" ({pct:.0f}%)" if pct is not None else "")
        st.button(
            text,
            key=f"stat-{key}",
            type="primary" if dashboard.filters.stat_filter == key else "secondary",
            use_container_width=True,
            on_click=dashboard.set_stat_filter,
            args=(key,),
        )
        if subtitle:
            st.caption(subtitle)

# Search
sc1, sc2 = st.columns([12, 1])
with sc1:
    search = st.text_input(
        "Search",
        key="search",
        placeholder="Search tasks by name or description...",
        label_visibility="collapsed",
    )
with sc2:
    if search:
        st.button("✕", key="search-clear", help="Clear search", on_click=_clear_search)

# Filters
assistant_options = [ALL] + dashboard.assistants
client_options = [ALL] + dashboard.clients
_keep_option("assistant_filter", assistant_options)
_keep_option("client_filter", client_options)

fc1, fc2, fc3, fc4, fc5, fc6 = st.columns([1.3, 1.3, 1.2, 1.2, 0.4, 1.0], vertical_alignment="bottom")
with fc1:
    assistant = st.selectbox("Assistant", assistant_options, key="assistant_filter", format_func=_label_or_all("All Assistants"))
with fc2:
    client = st.selectbox("Client", client_options, key="client_filter", format_func=_label_or_all("All Clients"))
with fc3:
    status = st.selectbox("Status", list(STATUS_OPTIONS), key="status_filter", format_func=STATUS_OPTIONS.get)
with fc4:
    date_preset = st.selectbox("Date Range", list(DATE_PRESET_OPTIONS), key="date_preset", format_func=DATE_PRESET_OPTIONS.get)
with fc5:
    st.button("↻", help="Refresh from DB", on_click=_on_refresh)

custom_start = custom_end = None
if date_preset == "custom":
    picked = st.date_input("Pick a date range", value=(), key="custom_range")
    custom_start, custom_end = _custom_range(picked)

dashboard.set_filters(
    FilterConfig(
        search=search or "",
        assistant=assistant,
        client=client,
        status=status,
        date_preset=date_preset,
        custom_start=custom_start,
        custom_end=custom_end,
        stat_filter=dashboard.filters.stat_filter,
    )
)

with fc6:
    st.download_button(
        "Export CSV",
        data=dashboard.export_csv().encode("utf-8"),
        file_name=dashboard.export_filename(),
        mime=CSV_MIME,
        key="export-csv",
        use_container_width=True,
    )

# Results count
rc1, rc2 = st.columns([3, 1])
with rc1:
    st.markdown(f"<div class='tod-results'>{dashboard.results_label}</div>", unsafe_allow_html=True)
with rc2:
    if dashboard.selected:
        st.markdown(f"<div class='tod-selected'>{selection_label(len(dashboard.selected))}</div>", unsafe_allow_html=True)

# ----- Table -----
page_tasks = dashboard.page_tasks

head = st.columns(TABLE_COLS, vertical_alignment="center")
st.session_state["select-page"] = dashboard.page_fully_selected()
head[0].checkbox(
    "Select page",
    key="select-page",
    on_change=dashboard.toggle_select_page,
    label_visibility="collapsed",
    disabled=not page_tasks,
)
for c, title in zip(head[1:], ["Task Name", "Description", "Client", "Assistant", "BOH", "FOH"]):
    c.markdown(f"<div class='tod-label'>{title}</div>", unsafe_allow_html=True)

if not page_tasks:
    st.markdown("<div class='tod-empty'>No tasks found.</div>", unsafe_allow_html=True)

for t in page_tasks:
    row = st.columns(TABLE_COLS, vertical_alignment="center")

    sel_key = f"sel-{t.id}"
    st.session_state[sel_key] = dashboard.is_selected(t.id)
    row[0].checkbox(
        "Select",
        key=sel_key,
        on_change=dashboard.toggle_selection,
        args=(t.id,),
        label_visibility="collapsed",
    )

    name = html.escape(t.task_name)
    row[1].markdown(f"<div class='tod-cell' title='{name}'>{name}</div>", unsafe_allow_html=True)
    row[2].markdown(f"<div class='tod-cell tod-desc'>{html.escape(t.task_description)}</div>", unsafe_allow_html=True)
    row[3].markdown(f"<div class='tod-cell'>{html.escape(t.client)}</div>", unsafe_allow_html=True)
    row[4].markdown(f"<div class='tod-cell'>{html.escape(t.assistant)}</div>", unsafe_allow_html=True)

    suggestion = dashboard.suggestions.get(t.id)
    for cell, field in ((row[5], "boh"), (row[6], "foh")):
        flag_key = f"{field}-{t.id}"
        st.session_state[flag_key] = getattr(t, field)
        with cell:
            st.toggle(
                field.upper(),
                key=flag_key,
                on_change=_on_flag_change,
                args=(t.id, field, flag_key),
                disabled=dashboard.is_locked(t.id),
                label_visibility="collapsed",
            )
            if suggestion == field:
                st.markdown("<span class='tod-suggested'>Suggested</span>", unsafe_allow_html=True)

# ----- Pagination -----
page = dashboard.page
if page.total_pages > 1:
    window = page_window(page.page, page.total_pages)
    pcols = st.columns([2, 1] + [0.45] * len(window) + [1], vertical_alignment="center")
    pcols[0].markdown(f"<div class='tod-page-info'>Page {page.page} of {page.total_pages}</div>", unsafe_allow_html=True)
    pcols[1].button(
        "Previous",
        key="page-prev",
        disabled=page.page == 1,
        on_click=dashboard.go_to_page,
        args=(page.page - 1,),
    )
    for c, n in zip(pcols[2:-1], window):
        if n is None:
            c.markdown("…")
            continue
        c.button(
            str(n),
            key=f"page-{n}",
            type="primary" if n == page.page else "secondary",
            on_click=dashboard.go_to_page,
            args=(n,),
        )
    pcols[-1].button(
        "Next",
        key="page-next",
        disabled=page.page == page.total_pages,
        on_click=dashboard.go_to_page,
        args=(page.page + 1,),
    )

# ----- Bulk actions -----
if dashboard.selected:
    with st.container(border=True, key="bulk-bar"):
        bulk_locked = dashboard.is_locked()
        bc = st.columns([1.6, 1, 1, 1, 1, 1.2], vertical_alignment="center")
        bc[0].markdown(f"**{selection_label(len(dashboard.selected))}**")
        bc[1].button("Mark as BOH", key="bulk-boh", disabled=bulk_locked, on_click=dashboard.bulk_set_flag, args=("boh", True))
        bc[2].button("Mark as FOH", key="bulk-foh", disabled=bulk_locked, on_click=dashboard.bulk_set_flag, args=("foh", True))
        if dashboard.delete_armed:
            bc[3].button("Confirm", key="bulk-delete-confirm", type="primary", disabled=bulk_locked, on_click=dashboard.confirm_bulk_delete)
            bc[4].button("Cancel", key="bulk-delete-cancel", on_click=dashboard.cancel_bulk_delete)
        else:
            bc[3].button("Delete", key="bulk-delete", disabled=bulk_locked, on_click=dashboard.arm_bulk_delete)
        bc[5].button("Clear Selection", key="bulk-clear", on_click=dashboard.clear_selection)
