"""Settings control panel for the TUI."""

from __future__ import annotations

from dataclasses import replace

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Checkbox, Label, Select, Static

from bayer_dither.core.color import ColorPolicy
from bayer_dither.core.matrix import MATRIX_SIZES
from bayer_dither.core.order import PreserveOrder
from bayer_dither.core.processor import DitherSettings


class ControlPanel(Widget):
    """Settings panel with controls for the dithering parameters."""

    DEFAULT_CSS = """
    ControlPanel {
        width: 30;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
        margin-bottom: 0;
    }

    ControlPanel Checkbox {
        margin-top: 1;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes."""
        def __init__(self, settings: DitherSettings) -> None:
            super().__init__()
            self.settings = settings

    def __init__(self, settings: DitherSettings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._settings = settings or DitherSettings()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Settings", id="panel-title")

            yield Label("Matrix")
            yield Select(
                [(f"{n}x{n}", n) for n in MATRIX_SIZES],
                value=self._settings.matrix_size,
                allow_blank=False,
                id="matrix-select",
            )

            yield Checkbox("Color", value=self._settings.color, id="color-check")

            yield Label("Preserve order")
            yield Select(
                [(p.value, p.value) for p in PreserveOrder],
                value=self._settings.preserve.value,
                allow_blank=False,
                id="preserve-select",
            )

            yield Label("Color policy")
            yield Select(
                [(p.value, p.value) for p in ColorPolicy],
                value=self._settings.policy.value,
                allow_blank=False,
                id="policy-select",
            )

            yield Checkbox("Alpha mask", value=self._settings.mask, id="mask-check")

    @property
    def settings(self) -> DitherSettings:
        return self._settings

    def _update_settings(self, **overrides) -> None:
        """Create new settings with overrides and emit change."""
        self._settings = replace(self._settings, **overrides)
        self.post_message(self.SettingsChanged(self._settings))

    def on_select_changed(self, event: Select.Changed) -> None:
        if not isinstance(event.value, (int, str)):
            return  # blank selection
        if event.select.id == "matrix-select":
            self._update_settings(matrix_size=int(event.value))
        elif event.select.id == "preserve-select":
            self._update_settings(preserve=PreserveOrder(event.value))
        elif event.select.id == "policy-select":
            self._update_settings(policy=ColorPolicy(event.value))

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "color-check":
            self._update_settings(color=event.value)
        elif event.checkbox.id == "mask-check":
            self._update_settings(mask=event.value)
