"""Workflow board: interactive terminal view of the workflow store."""

from __future__ import annotations

from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static

from devflow.workflow.aggregate import Workflow
from devflow.workflow.models import Stage
from devflow.workflow.transitions import TERMINAL_STAGES, is_valid_transition
from devflow_board.loader import ColumnInfo, load_board, render_detail

STAGE_COLORS = {
    Stage.COMPLETED: "green",
    Stage.FAILED: "red",
    Stage.CANCELLED: "yellow",
}
DEFAULT_COLOR = "cyan"


def _progress_bar(progress: int, width: int = 10) -> str:
    filled = progress * width // 100
    return "#" * filled + "." * (width - filled)


def _summary(columns: list[ColumnInfo]) -> str:
    workflows = [w for col in columns for w in col.workflows]
    active = sum(1 for w in workflows if w.stage not in TERMINAL_STAGES)
    failed = sum(1 for w in workflows if w.stage is Stage.FAILED)
    return f"{len(workflows)} workflows, {active} active, {failed} failed"


class CardSelected(Message):
    def __init__(self, workflow: Workflow) -> None:
        super().__init__()
        self.workflow = workflow


class WorkflowCard(Static):
    """One workflow: id, name, stage label and a progress bar."""

    can_focus = True

    def __init__(self, workflow: Workflow, col_index: int, **kwargs) -> None:
        super().__init__(classes=f"card {workflow.stage.value}", **kwargs)
        self.workflow = workflow
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        wf = self.workflow
        color = STAGE_COLORS.get(wf.stage, DEFAULT_COLOR)
        yield Static(f"[bold {color}]{wf.id}[/] {wf.name}")
        yield Static(wf.stage_label, markup=False, classes="card-stage")
        yield Static(f"[dim]{_progress_bar(wf.progress)} {wf.progress:>3}%[/]")

    def on_focus(self) -> None:
        self.post_message(CardSelected(self.workflow))


class StageColumn(VerticalScroll):
    def __init__(self, column: ColumnInfo, col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.column = column
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        count = len(self.column.workflows)
        yield Static(f"[b]{self.column.display_name}[/] ({count})", classes="stage-title")
        for workflow in self.column.workflows:
            yield WorkflowCard(workflow, col_index=self.col_index)
        if not count:
            yield Static("-", classes="placeholder")

    @property
    def cards(self) -> list[WorkflowCard]:
        return list(self.query(WorkflowCard))


class DetailPanel(VerticalScroll):
    """Right-hand pane with the rendered detail of the focused workflow."""

    content_text: reactive[str] = reactive("")

    def compose(self) -> ComposeResult:
        yield Static("Focus a workflow to see its documents and tasks", id="detail-body", markup=False)

    def show(self, workflow: Workflow) -> None:
        self.border_title = workflow.id
        self.content_text = render_detail(workflow)

    def watch_content_text(self, value: str) -> None:
        if self.is_mounted:
            self.query_one("#detail-body", Static).update(value)


class CancelModal(ModalScreen[str | None]):
    """Asks for the cancellation reason; dismisses with None on escape."""

    CSS = """
    CancelModal { align: center middle; }
    #cancel-box { width: 56; height: auto; border: thick $error; background: $panel; padding: 1 2; }
    #cancel-reason { margin-top: 1; }
    """

    BINDINGS = [Binding("escape", "cancel", "Back")]

    def __init__(self, workflow: Workflow) -> None:
        super().__init__()
        self.workflow = workflow

    def compose(self) -> ComposeResult:
        with Vertical(id="cancel-box"):
            yield Static(f"Cancel [b]{self.workflow.id}[/] ({self.workflow.stage_label})")
            yield Input(placeholder="Reason", id="cancel-reason")

    @on(Input.Submitted, "#cancel-reason")
    def _submitted(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self.dismiss(event.value.strip())

    def action_cancel(self) -> None:
        self.dismiss(None)


class BoardApp(App):
    TITLE = "Workflow Board"

    CSS = """
    #stages { width: 1fr; }
    StageColumn { width: 1fr; border-right: tall $panel-lighten-1; }
    StageColumn.current { border-right: tall $accent; }
    .stage-title { width: 100%; text-align: center; background: $panel; }
    .placeholder { width: 100%; text-align: center; color: $text-muted; }
    WorkflowCard { height: auto; margin: 1 0 0 0; padding: 0 1; }
    WorkflowCard:focus { background: $boost; }
    WorkflowCard.failed { border-left: outer $error; }
    WorkflowCard.cancelled { border-left: outer $warning; }
    WorkflowCard.completed { border-left: outer $success; }
    .card-stage { color: $text-muted; }
    #detail { width: 48; border: round $primary; padding: 0 1; }
    #detail.hidden { display: none; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("x", "cancel_workflow", "Cancel"),
        Binding("d", "toggle_detail", "Detail"),
        Binding("left", "step(-1, 0)", "< Stage", show=True),
        Binding("right", "step(1, 0)", "Stage >", show=True),
        Binding("up", "step(0, -1)", "", show=False),
        Binding("down", "step(0, 1)", "", show=False),
    ]

    def __init__(self, store_dir: Path | None = None) -> None:
        super().__init__()
        self.store_dir = Path(store_dir) if store_dir is not None else Path.cwd() / ".devflow"
        self.columns: list[ColumnInfo] = []
        self.current_col = 0

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            yield Horizontal(id="stages")
            yield DetailPanel(id="detail")
        yield Footer()

    async def on_mount(self) -> None:
        await self._load()

    async def _load(self) -> None:
        stages = self.query_one("#stages", Horizontal)
        await stages.remove_children()
        self.columns = load_board(self.store_dir)
        await stages.mount_all(
            StageColumn(col, col_index=i, id=f"stage-{col.name}") for i, col in enumerate(self.columns)
        )
        self.sub_title = _summary(self.columns)
        self._mark_current()

    def _stage_columns(self) -> list[StageColumn]:
        return list(self.query(StageColumn))

    def _mark_current(self) -> None:
        for col in self._stage_columns():
            col.set_class(col.col_index == self.current_col, "current")

    @on(CardSelected)
    def _card_selected(self, event: CardSelected) -> None:
        self.query_one("#detail", DetailPanel).show(event.workflow)

    def watch_focused(self, focused) -> None:
        if isinstance(focused, WorkflowCard):
            self.current_col = focused.col_index
            self._mark_current()

    def action_step(self, dx: int, dy: int) -> None:
        """Move focus between stage columns (dx) or cards in a column (dy)."""
        columns = self._stage_columns()
        if not columns:
            return
        if dx:
            self.current_col = max(0, min(len(columns) - 1, self.current_col + dx))
            self._mark_current()
            cards = columns[self.current_col].cards
            if cards:
                cards[0].focus()
            return
        cards = columns[self.current_col].cards
        if not cards:
            return
        if self.focused in cards:
            row = cards.index(self.focused) + dy
            if 0 <= row < len(cards):
                cards[row].focus()
        else:
            cards[0 if dy > 0 else -1].focus()

    async def action_refresh(self) -> None:
        await self._load()
        self.notify("Board reloaded")

    def action_cancel_workflow(self) -> None:
        card = self.focused
        if not isinstance(card, WorkflowCard):
            self.notify("Focus a workflow first", severity="warning")
            return
        workflow = card.workflow
        if not is_valid_transition(workflow.stage, Stage.CANCELLED):
            self.notify(f"{workflow.id} is {workflow.stage.value} and cannot be cancelled", severity="warning")
            return

        def _after(reason: str | None) -> None:
            if reason is not None:
                self.run_worker(self._cancel(workflow.id, reason), exclusive=True)

        self.push_screen(CancelModal(workflow), callback=_after)

    async def _cancel(self, workflow_id: str, reason: str) -> None:
        from devflow.adapters.yaml_store import YamlWorkflowRepository
        from devflow.execution.convenience import create_service
        from devflow.workflow.exceptions import WorkflowError

        service = create_service(YamlWorkflowRepository(self.store_dir), mock=True)
        try:
            await service.cancel_workflow(workflow_id, reason)
        except WorkflowError as e:
            self.notify(str(e), severity="error")
            return
        self.notify(f"{workflow_id} cancelled: {reason}")
        await self.action_refresh()

    def action_toggle_detail(self) -> None:
        self.query_one("#detail", DetailPanel).toggle_class("hidden")


def run_board(store_dir: Path | None = None) -> None:
    """Entry point for the devflow-board CLI."""
    BoardApp(store_dir).run()
