import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from poche import config
from poche.aggregates import kind_totals, distinct_months
from poche.charts import bar_chart
from poche.domain import CATEGORIES, KINDS
from poche.events import subscribe_autosave
from poche.lazy import monthly_series, top_categories
from poche.reconcile import budget_vs_tracked, category_variances, selected_month_stats
from poche.services import LedgerService
from poche.storage import FileStore

config.setup_logging()
logger = logging.getLogger(__name__)

KIND_COLORS = {
    "Income": "#16a34a",
    "Expenses": "#dc2626",
    "Savings": "#2563eb",
    "Investments": "#7c3aed",
}
BUDGET_COLOR = "#0f172a"
TRACKED_COLOR = "#9ca3af"
KIND_BADGES = {"Income": "green", "Expenses": "red", "Savings": "blue", "Investments": "violet"}

st.set_page_config(page_title="Ma Poche", layout="wide")


def money(n: float) -> str:
    return f"{n:,.2f} $"


def get_ledger() -> LedgerService:
    if "ledger" not in st.session_state:
        store = FileStore(config.DATA_DIR)
        ledger = LedgerService.from_store(store, config.ENTRIES_KEY, config.BUDGETS_KEY)
        subscribe_autosave(ledger.bus, store, config.ENTRIES_KEY, config.BUDGETS_KEY)
        st.session_state.ledger = ledger
    return st.session_state.ledger


def styled_bars(labels, series, names, colors, title):
    chart = bar_chart(labels, series, config.CHART_STEPS)
    lowest = min([0.0] + [v for s in series for v in s])
    fig = go.Figure()
    for values, name, color in zip(series, names, colors):
        fig.add_trace(go.Bar(x=list(labels), y=list(values), name=name, marker_color=color))
    fig.update_layout(
        barmode="group",
        title=title,
        margin=dict(t=40, b=10, l=10, r=10),
        yaxis=dict(
            range=[-chart.max_value if lowest < 0 else 0, chart.max_value],
            tickvals=list(chart.ticks),
            ticktext=[money(t) for t in chart.ticks],
        ),
    )
    return fig


def month_picker(entries, key: str) -> str:
    current = date.today().strftime("%Y-%m")
    options = sorted(set(distinct_months(entries)) | {current})
    if "selected_month" not in st.session_state:
        st.session_state.selected_month = current
    selected = st.selectbox(
        "Month",
        options,
        index=options.index(st.session_state.selected_month)
        if st.session_state.selected_month in options else len(options) - 1,
        key=key,
    )
    st.session_state.selected_month = selected
    return selected


ledger = get_ledger()

st.title("MA POCHE")
st.caption("Mes finances dans ma poche et sous mes yeux !")

menu = st.sidebar.radio("Menu", ["🧾 Tracking", "🎯 Plan (Budget)", "📊 Dashboard"])

if menu == "🧾 Tracking":
    snap = ledger.snapshot()
    totals = kind_totals(snap.entries)
    cols = st.columns(5)
    for col, kind in zip(cols, KINDS):
        col.metric(kind, money(totals.for_kind(kind)))
    cols[4].metric("Net", money(totals.net))

    st.subheader("➕ Add transaction")
    kind = st.selectbox("Type", KINDS, index=KINDS.index("Expenses"))
    with st.form("add_entry", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        with c1:
            entry_date = st.date_input("Date", value=date.today())
        with c2:
            category = st.selectbox("Category", CATEGORIES[kind])
        with c3:
            amount = st.text_input("Amount")
        details = st.text_input("Details (optional)")
        submitted = st.form_submit_button("Add")

    if submitted:
        entry = ledger.add(entry_date.isoformat(), kind, category, amount, details)
        if entry is None:
            st.warning("Date, type, category and a numeric amount are required.")
        else:
            st.success(f"Added {entry.category} {money(entry.amount)}")
            st.rerun()

    b1, b2, b3 = st.columns(3)
    with b1:
        if st.button("🗑 Clear all", type="primary"):
            st.session_state.confirm_clear = True
        if st.session_state.get("confirm_clear"):
            st.warning("Clear all transactions?")
            if st.button("Yes, clear everything"):
                ledger.clear()
                logger.info("Ledger cleared from the tracking tab")
                st.session_state.confirm_clear = False
                st.rerun()
    with b2:
        st.download_button(
            "⬇ Export",
            ledger.export_json(),
            file_name="finance-transactions.json",
            mime="application/json",
        )
    with b3:
        uploaded = st.file_uploader("Import", type=["json"])
        if uploaded is not None and st.button("Replace ledger with file"):
            snap = ledger.import_json(uploaded.getvalue())
            logger.info("Imported %s: %d entries", uploaded.name, len(snap.entries))
            st.rerun()

    snap = ledger.snapshot()
    st.subheader(f"Transactions ({len(snap.entries)})")
    if not snap.entries:
        st.info("No transactions yet. Add one above.")
    for e in snap.entries:
        r1, r2, r3, r4, r5, r6 = st.columns([2, 2, 3, 2, 4, 1])
        r1.write(e.date)
        r2.write(e.kind)
        r3.write(e.category)
        r4.write(str(e.amount))
        r5.write(e.note or "")
        if r6.button("✖", key=f"del_{e.id}"):
            ledger.delete(e.id)
            st.rerun()

elif menu == "🎯 Plan (Budget)":
    snap = ledger.snapshot()
    month = month_picker(snap.entries, "plan_month")

    comparison = budget_vs_tracked(snap.entries, snap.budgets, month)
    for kind in KINDS:
        st.markdown(f"#### :{KIND_BADGES[kind]}[{kind}]")
        m1, m2, m3 = st.columns(3)
        m1.metric("Budget", money(comparison.budget.for_kind(kind)))
        m2.metric("Tracked", money(comparison.tracked.for_kind(kind)))
        m3.metric("Variance (Budget - Tracked)", money(comparison.variance().for_kind(kind)))

        for row in category_variances(snap.entries, snap.budgets, month, kind):
            c1, c2, c3, c4 = st.columns([3, 3, 2, 2])
            c1.write(row.category)
            new_value = c2.number_input(
                "Budget",
                value=float(row.budget),
                step=10.0,
                key=f"budget_{month}_{kind}_{row.category}",
                label_visibility="collapsed",
            )
            c3.write(money(row.tracked))
            c4.write(money(row.variance))
            if new_value != row.budget:
                ledger.set_budget(month, kind, row.category, new_value)
                st.rerun()

elif menu == "📊 Dashboard":
    snap = ledger.snapshot()
    month = month_picker(snap.entries, "dashboard_month")

    stats = selected_month_stats(snap.entries, month)
    cols = st.columns(5)
    for col, kind in zip(cols, KINDS):
        col.metric(f"{kind} ({month})", money(getattr(stats, kind.lower())))
    cols[4].metric(f"Net ({month})", money(stats.net))

    rows = list(monthly_series(snap.entries))
    if not rows:
        st.info("No data.")
    else:
        df = pd.DataFrame(rows).set_index("month")
        series = [df[k.lower()].tolist() for k in KINDS]
        st.plotly_chart(
            styled_bars(df.index.tolist(), series, KINDS, [KIND_COLORS[k] for k in KINDS], "Monthly evolution"),
            use_container_width=True,
        )

    comparison = budget_vs_tracked(snap.entries, snap.budgets, month)
    st.plotly_chart(
        styled_bars(
            KINDS,
            [comparison.budget.as_series(), comparison.tracked.as_series()],
            ["Budget", "Tracked"],
            [BUDGET_COLOR, TRACKED_COLOR],
            f"Budget vs Tracked: {month}",
        ),
        use_container_width=True,
    )

    top = list(top_categories(snap.entries, month, "Expenses", config.TOP_CATEGORY_LIMIT))
    st.subheader("💸 Top expense categories")
    if top:
        st.table(pd.DataFrame(top, columns=["Category", "Total"]).assign(Total=lambda d: d["Total"].map(money)))
    else:
        st.info("No expenses recorded for this month.")
