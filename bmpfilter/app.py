import sys

import customtkinter as ctk

from bmpfilter.config import Settings
from bmpfilter.controllers.app_controller import AppController
from bmpfilter.main import configure_logging
from bmpfilter.ui.image_viewer import ImageViewer
from bmpfilter.ui.sidebar import Sidebar


class BitmapFilterApp(ctk.CTk):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("BMP Filter Preview")
        self.minsize(900, 600)

        # root layout: left viewer, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._viewer = ImageViewer(self, compare_mode=settings.preview_compare)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=12)

        self._sidebar = Sidebar(self, compare_mode=settings.preview_compare)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=12)

        self.controller = AppController(viewer=self._viewer, sidebar=self._sidebar, window=self)
        self.controller.bind_events()


def run() -> None:
    """Создаёт и запускает окно предпросмотра; первый аргумент: BMP для открытия."""
    settings = Settings.from_env()
    configure_logging(settings)
    ctk_app = BitmapFilterApp(settings)
    if len(sys.argv) > 1:
        ctk_app.after(100, ctk_app.controller.open_file, sys.argv[1])
    ctk_app.mainloop()


if __name__ == "__main__":
    run()
