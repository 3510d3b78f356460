"""CEINI TUI Widgets - Custom panels for the INI viewer."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import DataTable, Label, ListItem, ListView, Static

from ceini.reader import Option

NO_SECTION = "(no section)"


class SummaryPanel(Static):
    """Sidebar panel showing file statistics."""

    DEFAULT_CSS = """
    SummaryPanel {
        width: 32;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    SummaryPanel .summary-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    SummaryPanel .summary-key {
        color: $text-muted;
    }
    SummaryPanel .summary-val {
        color: $text;
    }
    """

    def __init__(self, file_name: str, options: list[Option], **kwargs) -> None:
        super().__init__(**kwargs)
        self._file_name = file_name
        self._options = options

    def compose(self) -> ComposeResult:
        yield Label(self._file_name, classes="summary-title")

        sections = {o.section for o in self._options}
        padded = sum(1 for o in self._options if o.value != o.value.strip())
        for key, val in (
            ("sections", len(sections)),
            ("options", len(self._options)),
            ("padded values", padded),
        ):
            yield Label(f"{key}:", classes="summary-key")
            yield Label(f"  {val}", classes="summary-val")


class SectionList(ListView):
    """List of sections in first-seen order. Supports keyboard navigation."""

    DEFAULT_CSS = """
    SectionList {
        width: 24;
        border: solid $accent;
    }
    SectionList > ListItem {
        padding: 0 1;
    }
    SectionList > ListItem.--highlight {
        background: $accent;
    }
    """

    class SectionSelected(Message):
        """Fired when a section is selected."""

        def __init__(self, section_name: str, section_index: int) -> None:
            self.section_name = section_name
            self.section_index = section_index
            super().__init__()

    def __init__(self, section_names: list[str], **kwargs) -> None:
        self._section_names = section_names
        super().__init__(**kwargs)

    def compose(self) -> ComposeResult:
        for name in self._section_names:
            yield ListItem(Label(name or NO_SECTION))

    def _post_selected(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._section_names):
            self.post_message(
                self.SectionSelected(self._section_names[idx], idx)
            )

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_selected()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_selected()


class OptionPanel(Static):
    """Table of the name/value pairs of one section."""

    DEFAULT_CSS = """
    OptionPanel {
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    OptionPanel .option-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    """

    current_section = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title_widget: Label | None = None
        self._table: DataTable | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a section", classes="option-title")
        self._table = DataTable(zebra_stripes=True)
        yield self._title_widget
        yield self._table

    def show_options(self, section: str, options: list[Option]) -> None:
        """Display the options of ``section``. Values are shown repr-quoted."""
        self.current_section = section
        if self._title_widget:
            self._title_widget.update(f"[{section}]" if section else NO_SECTION)
        if self._table is not None:
            if not self._table.columns:
                self._table.add_columns("name", "value")
            self._table.clear()
            for o in options:
                self._table.add_row(o.name, repr(o.value))
        self.scroll_home()
