"""
The main file that starts the MindFlow search PyQt6 application
"""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication, QMainWindow

from mindflow.config import settings
from mindflow.logger import configure_logging
from mindflow.search.entry_store import SQLiteEntryStore
from mindflow.search.recent_searches import RecentSearchStore
from mindflow.search.search_client import SearchClient
from mindflow.search.search_controller import SearchController
from mindflow.ui.widgets.search_widget import SearchWidget


def main() -> int:
    os.makedirs(settings.DATA_DIR_PATH, exist_ok=True)
    configure_logging()
    logging.debug("Starting the application...")

    app = QApplication(sys.argv)

    store = SQLiteEntryStore(settings.ENTRIES_DB_PATH)
    store.open()
    client = SearchClient(store, lambda: settings.LOCAL_USER_ID)
    controller = SearchController(client, RecentSearchStore())
    _ = controller.entry_selected.connect(
        lambda entry_id: logging.getLogger("MainWindow").info(
            "Selected entry %s", entry_id
        )
    )

    window = QMainWindow()
    window.setWindowTitle("MindFlow - Search Entries")
    search_widget = SearchWidget(controller)
    window.setCentralWidget(search_widget)
    window.resize(720, 820)
    window.show()
    search_widget.focus_search()

    try:
        return app.exec()
    finally:
        controller.close()
        store.close()


if __name__ == "__main__":
    sys.exit(main())
