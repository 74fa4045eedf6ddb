"""Main Textual application for the interactive dithering preview."""

from __future__ import annotations

from pathlib import Path

from PIL import Image
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Static,
)
from textual.worker import get_current_worker

from bayer_dither.core.processor import DitherSettings, process_image
from bayer_dither.core.reader import SourceImage, read_image
from bayer_dither.core.writer import auto_output_path
from bayer_dither.tui.controls import ControlPanel
from bayer_dither.tui.preview import DitherPreview
from bayer_dither.utils.cache import PreviewCache
from bayer_dither.utils.terminal import fit_to_terminal

DEFAULT_SAVE_NAME = "dithered.png"
DIALOG_BLOCKED_ACTIONS = ("quit", "save", "open_file")


class SaveScreen(ModalScreen[str | None]):
    """Modal screen for saving the full-resolution result."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 12;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen Input {
        margin: 1 0;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, default_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Output", id="save-title")
            yield Label("Output file path:")
            yield Input(
                value=self._default_path,
                placeholder="output.png",
                id="save-path",
            )
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            path_input = self.query_one("#save-path", Input)
            self.dismiss(path_input.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering an image path or URL."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open Image", id="open-title")
            yield Input(placeholder="Path or URL of an image...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value if inp.value else None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value if event.value else None)


class DitherApp(App):
    """Interactive preview of ordered dithering settings."""

    TITLE = "bayer-dither"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(
        self,
        input_path: str | None = None,
        settings: DitherSettings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._source: SourceImage | None = None
        self._preview_source: Image.Image | None = None
        self._preview_key = ""
        self._cache: PreviewCache[Image.Image] = PreviewCache(max_size=32)
        self._settings = settings or DitherSettings()
        self._panel_visible = True

    def check_action(
        self, action: str, parameters: tuple[object, ...]
    ) -> bool | None:
        # Letter shortcuts stay out of the way while a dialog takes text input
        in_dialog = isinstance(self.screen, ModalScreen)
        if in_dialog and action in DIALOG_BLOCKED_ACTIONS:
            return False
        return True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield DitherPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        """Load an image and scale a working copy to the preview pane."""
        try:
            source = read_image(path)
        except (FileNotFoundError, ValueError, OSError) as e:
            self._update_status(f"Error: {e}")
            return

        info = source.info
        preview = self.query_one(DitherPreview)
        pw = preview.size.width or 80
        ph = preview.size.height or 24
        px_w, px_h = fit_to_terminal(
            info.width, info.height, max_width=pw - 2, max_height=ph - 2
        )

        self._source = source
        self._preview_source = source.image.resize(
            (px_w, px_h), Image.Resampling.LANCZOS
        )
        self._preview_key = f"{path}:{px_w}x{px_h}"
        self._cache.clear()

        name = info.path.name if info.path else info.source
        self.title = f"bayer-dither - {name}"
        self._update_status(
            f"Loaded {name} ({info.width}x{info.height}, preview {px_w}x{px_h})"
        )
        self._render_preview()

    def _update_status(self, text: str) -> None:
        status = self.query_one("#status-bar", Static)
        status.update(text)

    @work(thread=True, exclusive=True, group="preview")
    def _render_preview(self) -> None:
        """Dither the preview-sized image in a background thread."""
        if self._preview_source is None:
            return

        worker = get_current_worker()
        settings = self._settings
        key = self._preview_key
        cache_key = settings.hash()

        cached = self._cache.get(key, cache_key)
        if cached is not None:
            if not worker.is_cancelled:
                self.call_from_thread(self._display_preview, cached)
            return

        try:
            result = process_image(self._preview_source, settings)
        except ValueError as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        self._cache.put(key, cache_key, result)
        if not worker.is_cancelled:
            self.call_from_thread(self._display_preview, result)

    def _display_preview(self, img: Image.Image) -> None:
        """Display a dithered preview (called on main thread)."""
        self.query_one(DitherPreview).update_image(img)

    # --- Actions ---

    def action_save(self) -> None:
        if self._source is None:
            self._update_status("No image loaded")
            return
        path = self._source.info.path
        default_path = str(auto_output_path(path)) if path else DEFAULT_SAVE_NAME
        self.push_screen(SaveScreen(default_path), self._on_save_result)

    def _on_save_result(self, path: str | None) -> None:
        if path is None:
            return
        self._do_save(path)

    @work(thread=True, exclusive=True, group="save")
    def _do_save(self, output_path: str) -> None:
        """Dither the full-resolution image and save it in a background thread."""
        from bayer_dither.core.writer import save_image

        if self._source is None:
            return

        worker = get_current_worker()
        settings = self._settings
        out = Path(output_path)

        self.call_from_thread(self._update_status, "Saving...")
        try:
            result = process_image(self._source.image, settings)
            save_image(result, out)
        except (ValueError, OSError) as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Save error: {e}")
            return

        if not worker.is_cancelled:
            self.call_from_thread(self._update_status, f"Saved to {out}")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        self._settings = event.settings
        if self._preview_source is not None:
            self._render_preview()


def run_app(
    input_path: str | None = None,
    settings: DitherSettings | None = None,
) -> None:
    """Launch the TUI application."""
    app = DitherApp(input_path=input_path, settings=settings)
    app.run()
