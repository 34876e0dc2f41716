"""Главное окно гравировщика: просмотр «до/после» слева, параметры фильтра справа."""
import customtkinter as ctk

from engraver import config as defaults
from engraver.controllers.app_controller import AppController
from engraver.ui.bottom_bar import BottomBar
from engraver.ui.image_viewer import ImageViewer
from engraver.ui.sidebar import Sidebar

TITLE = "Огравировыватель"


class EngraverApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title(TITLE)
        self.minsize(900, 600)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))
        self._bottom.set_status(
            f"Ctrl+O: открыть · код {defaults.DEFAULT_NEIGHBORS}, "
            f"яркость {defaults.DEFAULT_ADD:.0f}, контраст {defaults.DEFAULT_MULT:.2f}"
        )

        self._controller = AppController(viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self)
        self._controller.bind_events()
        self._bind_shortcuts()

    def _bind_shortcuts(self) -> None:
        self.bind("<Control-o>", lambda _e: self._controller.open_file())
        self.bind("<Control-s>", lambda _e: self._controller.save_file())
        # сброс к "121202121", 127, 0.5
        self.bind("<Control-r>", lambda _e: self._sidebar.reset_params())
