"""CEINI TUI Viewer - Main Textual app with 3-panel layout."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from ceini.errors import ParseError
from ceini.reader import Option, read
from ceini.spec import MAX_FILE_SIZE
from ceini.tui.widgets import OptionPanel, SectionList, SummaryPanel


def group_sections(options: list[Option]) -> dict[str, list[Option]]:
    """Group options by section, keeping first-seen section order."""
    groups: dict[str, list[Option]] = {}
    for o in options:
        groups.setdefault(o.section, []).append(o)
    return groups


class IniViewerApp(App):
    """TUI viewer for INI files. 3-panel layout with keyboard navigation."""

    TITLE = "CEINI Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #search-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #search-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_search", "Search", show=True),
        Binding("escape", "close_search", "Close search", show=False),
        Binding("j", "next_section", "Next", show=True),
        Binding("k", "prev_section", "Prev", show=True),
    ]

    def __init__(self, path: str | Path, options: list[Option], **kwargs) -> None:
        super().__init__(**kwargs)
        self._path = Path(path)
        self._options = options
        self._groups = group_sections(options)
        self._all_section_names: list[str] = list(self._groups)

    def compose(self) -> ComposeResult:
        self.title = f"CEINI Viewer - {self._path.name}"

        yield Header()

        with Horizontal(id="main-area"):
            yield SummaryPanel(self._path.name, self._options, id="summary")
            yield SectionList(section_names=self._all_section_names, id="sections")
            yield OptionPanel(id="options")

        yield Input(placeholder="Search names and values... (Escape to close)", id="search-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Auto-select first section on mount."""
        if self._all_section_names:
            self._show(self._all_section_names[0])
            self.query_one("#sections", SectionList).focus()

    def _show(self, section: str) -> None:
        panel = self.query_one("#options", OptionPanel)
        panel.show_options(section, self._groups.get(section, []))

    def on_section_list_section_selected(
        self, event: SectionList.SectionSelected
    ) -> None:
        self._show(event.section_name)

    def action_next_section(self) -> None:
        self.query_one("#sections", SectionList).action_cursor_down()

    def action_prev_section(self) -> None:
        self.query_one("#sections", SectionList).action_cursor_up()

    def action_toggle_search(self) -> None:
        """Show/hide the search bar."""
        search = self.query_one("#search-bar", Input)
        search.toggle_class("visible")
        if search.has_class("visible"):
            search.focus()
        else:
            self.action_close_search()

    def action_close_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.remove_class("visible")
        search.value = ""
        self._update_section_list(self._all_section_names)
        self.query_one("#sections", SectionList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter sections whose name, option names or values match."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            self._update_section_list(self._all_section_names)
            return
        matches = [
            section for section, options in self._groups.items()
            if query in section.lower()
            or any(query in o.name.lower() or query in o.value.lower() for o in options)
        ]
        self._update_section_list(matches)

    def _update_section_list(self, names: list[str]) -> None:
        """Replace the section list with filtered names."""
        old = self.query_one("#sections", SectionList)
        new_list = SectionList(section_names=names, id="sections")
        old.remove()
        self.query_one("#main-area", Horizontal).mount(new_list, before="#options")
        if names:
            self._show(names[0])


def run_viewer(path: str | Path) -> None:
    """Launch the INI TUI viewer."""
    path = Path(path)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    if path.stat().st_size > MAX_FILE_SIZE:
        print(f"Error: File exceeds maximum {MAX_FILE_SIZE} bytes: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        options = read(path.read_bytes())
    except ParseError as e:
        print(f"Error: {path}: {e}", file=sys.stderr)
        sys.exit(1)

    app = IniViewerApp(path, options)
    app.run()
