from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Vertical
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Button, Static

from .models import AnswerMark, FormattedQuestion, Phase, QuizResult
from .session import QuizSession


class TriviaApp(App):
    """Textual front end that renders a :class:`QuizSession`."""

    CSS_PATH = None
    CSS = """
#stage { height: auto; padding: 1 2; }
.answer { width: 100%; margin: 0 0 1 0; }
.answer.correct { background: $success; }
.answer.wrong { background: $error; }
.answer.dimmed { opacity: 60%; }
.error { color: $error; }
"""
    BINDINGS = [
        ("1", "select_1", "Answer 1"),
        ("2", "select_2", "Answer 2"),
        ("3", "select_3", "Answer 3"),
        ("4", "select_4", "Answer 4"),
        ("n", "next", "Next"),
        ("r", "restart", "Restart"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, session: QuizSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static("Trivia Challenge", id="title")
        with Container(id="stage"):
            yield from self.stage_widgets()
        yield Static(self.status_text(), id="status")

    def on_mount(self) -> None:
        self.action_restart()

    # Pure helpers (testable without running the app)
    def stage_widgets(self) -> list[Widget]:
        session = self.session
        if session.phase is Phase.FAILED:
            return [
                Static(Text(session.error_message or ""), classes="error"),
                Button("Try Again", name="restart"),
            ]
        if session.phase is Phase.FINISHED:
            return [ResultView(session.result())]
        question = session.current_question
        if question is None:
            return [Static("Fetching Questions...", classes="loading")]
        return [
            QuestionView(
                question,
                index=session.current_index + 1,
                total=session.total_questions,
                marks=[session.mark_for(a) for a in question.answers],
                locked=session.is_locked,
                is_last=session.is_last_question,
            )
        ]

    def status_text(self) -> str:
        return f"Score: {self.session.score}"

    def select_index(self, position: int) -> bool:
        question = self.session.current_question
        if question is None or not 0 <= position < len(question.answers):
            return False
        self.session.select_answer(question.answers[position])
        self._update_stage()
        return True

    async def load_questions(self) -> None:
        await self.session.start()
        self._update_stage()

    def _update_stage(self, *, loading: bool = False) -> None:
        try:
            stage = self.query_one("#stage", Container)
            status = self.query_one("#status", Static)
        except NoMatches:
            return
        widgets = (
            [Static("Fetching Questions...", classes="loading")]
            if loading
            else self.stage_widgets()
        )
        stage.remove_children()
        stage.mount(*widgets)
        status.update(self.status_text())

    def action_restart(self) -> None:
        # A newer worker cancels the older one; the session also ignores
        # any stale batch that still lands.
        self._update_stage(loading=True)
        self.run_worker(
            self.load_questions(), exclusive=True, group="fetch"
        )

    def action_next(self) -> None:
        self.session.advance()
        self._update_stage()

    def action_select_1(self) -> None:
        self.select_index(0)

    def action_select_2(self) -> None:
        self.select_index(1)

    def action_select_3(self) -> None:
        self.select_index(2)

    def action_select_4(self) -> None:
        self.select_index(3)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        name = getattr(event.button, "name", "") or ""
        if name.startswith("answer-"):
            self.select_index(int(name.split("-", 1)[1]))
        elif name == "next":
            self.action_next()
        elif name == "restart":
            self.action_restart()


class QuestionView(Widget):
    """One question with its answer buttons coloured by mark."""

    DEFAULT_CSS = "QuestionView { height: auto; }"

    def __init__(
        self,
        question: FormattedQuestion,
        index: int,
        total: int,
        *,
        marks: list[AnswerMark],
        locked: bool,
        is_last: bool,
    ) -> None:
        super().__init__()
        self.question = question
        self.index = index
        self.total = total
        self.marks = marks
        self.locked = locked
        self.is_last = is_last

    def compose(self) -> ComposeResult:
        yield Static(
            f"Question {self.index} of {self.total}", classes="progress"
        )
        yield Static(Text(self.question.question_text), classes="question")
        with Vertical(classes="answers"):
            for position, answer in enumerate(self.question.answers):
                yield Button(
                    Text(answer),
                    name=f"answer-{position}",
                    classes=f"answer {self.marks[position].value}",
                    disabled=self.locked,
                )
        if self.locked:
            yield Button(self.next_label(), name="next", variant="primary")

    def next_label(self) -> str:
        return "Finish Quiz" if self.is_last else "Next Question"


class ResultView(Widget):
    DEFAULT_CSS = "ResultView { height: auto; }"

    def __init__(self, result: QuizResult) -> None:
        super().__init__()
        self.result = result

    def compose(self) -> ComposeResult:
        yield Static("Quiz Completed!", classes="heading")
        yield Static(self.result.message)
        yield Static(f"Your Score: {self.result.score} / {self.result.total}")
        yield Static(f"({self.result.percentage}%)")
        yield Button("Play Again", name="restart", variant="primary")
