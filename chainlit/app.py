# viewer/chainlit/app.py
from __future__ import annotations

import pathlib
import shlex
import sys

cwd = pathlib.Path.cwd()
if cwd.name == "chainlit":
    proj_root = cwd.parent
else:
    proj_root = cwd  # if you launched from project root
if str(proj_root) not in sys.path:
    sys.path.insert(0, str(proj_root))


import chainlit as cl
from answers.chart_policy import chart_policy
from chart_describer import ChartDescriber, OpenAIDescriptionService
from charts.plotly_renderer import render_plotly
from charts.table import build_table, table_markdown
from settings import Settings
from tools.json_adapter import JSONDatasetAdapter
from utils.dates import parse_filter_date
from utils.log import configure_logging
from viewer_session import ViewerSession

TABLE_PREVIEW_ROWS = 25

HELP_TEXT = """**JSON Data Viewer**

- `/fetch [url]` fetch a dataset (defaults to the current URL)
- `/from <YYYY-MM-DD|clear>` / `/to <YYYY-MM-DD|clear>` edit the date range
- `/query <text>` edit the search query (empty clears it)
- `/apply` apply the edited filters
- `/sort <column>` sort by a column (repeat to toggle direction)
- `/metric <name>` choose the charted metric
- `/table`, `/chart` show the table or chart
- `/analyze` generate an AI analysis of the chart"""


# -------------------------
# 1) Dependency wiring (startup)
# -------------------------


def build_session(settings: Settings) -> ViewerSession:
    loader = JSONDatasetAdapter(timeout=settings.fetch_timeout)
    describer = ChartDescriber(
        OpenAIDescriptionService(model=settings.openai_model),
        max_points=settings.description_max_points,
    )
    return ViewerSession(loader=loader, describer=describer, url=settings.data_url)


# -------------------------
# 2) Rendering
# -------------------------


async def send_table(session: ViewerSession) -> None:
    state = session.state
    view = build_table(session.displayed(), state.sort_config, total=len(state.records))

    content = f"**Data Table**\n\n{view.caption} Sort with `/sort <column>`.\n\n"
    content += table_markdown(view, max_rows=TABLE_PREVIEW_ROWS)
    if len(view.rows) > TABLE_PREVIEW_ROWS:
        content += f"\n\n_First {TABLE_PREVIEW_ROWS} rows shown._"
    await cl.Message(content=content).send()


async def send_chart(session: ViewerSession) -> None:
    state = session.state
    if not state.records:
        await cl.Message(content="No data available to display chart.").send()
        return

    metric = state.selected_metric
    points = session.series()
    spec = chart_policy(metric=metric, points=points)
    fig = render_plotly(spec, points)

    metrics = ", ".join(f"`{m}`" for m in session.metrics()) or "none"
    await cl.Message(
        content=f"**Chart** (metric `{metric}`, available: {metrics})",
        elements=[cl.Plotly(name=spec.title if spec else "chart", figure=fig, display="inline")],
    ).send()


async def send_fetch_outcome(session: ViewerSession) -> None:
    state = session.state
    if state.error:
        await cl.Message(content=f"**Failed to fetch data**\n\n{state.error}").send()
        return
    await send_table(session)
    await send_chart(session)


# -------------------------
# 3) Chat handlers
# -------------------------


@cl.on_chat_start
async def on_chat_start():
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    session = build_session(settings)
    cl.user_session.set("viewer", session)

    await cl.Message(content=HELP_TEXT).send()
    await cl.Message(content=f"Fetching `{session.state.url}` ...").send()
    await session.fetch()
    await send_fetch_outcome(session)


@cl.on_message
async def on_message(message: cl.Message):
    session: ViewerSession = cl.user_session.get("viewer")  # type: ignore[assignment]
    if session is None:
        await cl.Message(content="Session not initialized; reload the page.").send()
        return

    text = (message.content or "").strip()
    if not text.startswith("/"):
        await cl.Message(content=HELP_TEXT).send()
        return

    command, _, arg = text.partition(" ")
    arg = arg.strip()

    try:
        await dispatch(session, command.lower(), arg)
    except ValueError as e:
        await cl.Message(content=f"Error: {e}").send()
    except Exception as e:
        # Keep errors visible during development
        print(f"[WARN] command {command!r} failed: {e}")
        await cl.Message(content=f"Error: {e}").send()


async def dispatch(session: ViewerSession, command: str, arg: str) -> None:
    if command == "/fetch":
        url = shlex.split(arg)[0] if arg else None
        await cl.Message(content=f"Fetching `{url or session.state.url}` ...").send()
        await session.fetch(url)
        await send_fetch_outcome(session)

    elif command in ("/from", "/to"):
        field = "date_from" if command == "/from" else "date_to"
        session.set_draft_filters(**{field: parse_filter_date(arg)})
        await send_draft(session)

    elif command == "/query":
        session.set_draft_filters(query=arg)
        await send_draft(session)

    elif command == "/apply":
        session.apply_filters()
        await send_table(session)
        await send_chart(session)

    elif command == "/sort":
        if not arg:
            raise ValueError("Usage: /sort <column>")
        session.sort_by(arg)
        await send_table(session)

    elif command == "/metric":
        session.select_metric(arg)
        await send_chart(session)

    elif command == "/table":
        await send_table(session)

    elif command == "/chart":
        await send_chart(session)

    elif command == "/analyze":
        if session.state.is_generating:
            await cl.Message(content="Analyzing... please wait.").send()
            return
        if not session.state.records:
            await cl.Message(content="No data to analyze.").send()
            return
        msg = cl.Message(content="Analyzing...")
        await msg.send()
        await session.generate_description()
        msg.content = f"**AI Analysis**\n\n{session.state.description}"
        await msg.update()

    else:
        await cl.Message(content=HELP_TEXT).send()


async def send_draft(session: ViewerSession) -> None:
    draft = session.state.draft_filters
    await cl.Message(
        content=(
            "Filters (not applied yet, send `/apply`):\n"
            f"- from: `{draft.date_from or '-'}`\n"
            f"- to: `{draft.date_to or '-'}`\n"
            f"- query: `{draft.query or '-'}`"
        )
    ).send()
