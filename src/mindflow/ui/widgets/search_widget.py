"""
Search Widget - UI component for searching the journal.

Provides a search bar with mood and date filters, the results list and
the recent searches.
"""

import logging
from datetime import date

from PyQt6.QtCore import QDate, Qt
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from mindflow.models.mood import MOODS, mood_color, mood_emoji, mood_label
from mindflow.search.highlighter import SearchResult
from mindflow.search.search_controller import SearchController, SearchState
from mindflow.search.search_filter import DateRangePreset

# Qt rich text has no <mark>, highlight with a styled span instead
HIGHLIGHT_OPEN: str = '<span style="background-color: #F59E0B; color: #000000;">'
HIGHLIGHT_CLOSE: str = "</span>"


def _to_date(value: QDate) -> date:
    return date(value.year(), value.month(), value.day())


def _to_qdate(value: date) -> QDate:
    return QDate(value.year, value.month, value.day)


class SearchWidget(QWidget):
    """
    Widget for searching the journal.

    All the state lives in the SearchController; the widget forwards user
    input to it and redraws when it signals a change.
    """

    def __init__(self, controller: SearchController, parent: QWidget | None = None):
        super().__init__(parent)
        self.logger: logging.Logger = logging.getLogger("SearchWidget")
        self._controller: SearchController = controller

        self._setup_ui()
        self._style_widget()

        _ = controller.state_changed.connect(self._on_state_changed)
        _ = controller.results_changed.connect(self._display_results)
        _ = controller.recent_searches_changed.connect(self._display_recent)

        self._display_recent(controller.recent_searches)
        self._on_state_changed(controller.state)

    def _setup_ui(self) -> None:
        """Set up the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(8)

        # Search input
        self._search_input: QLineEdit = QLineEdit()
        self._search_input.setPlaceholderText("Search your journal...")
        self._search_input.setClearButtonEnabled(True)
        _ = self._search_input.textChanged.connect(self._controller.set_keyword)
        _ = self._search_input.returnPressed.connect(self._controller.retry)
        layout.addWidget(self._search_input)

        # Filter row
        filter_row = QHBoxLayout()
        filter_row.setSpacing(4)

        self._mood_combo: QComboBox = QComboBox()
        self._mood_combo.addItem("All moods", None)
        for config in MOODS:
            self._mood_combo.addItem(f"{config.emoji} {config.label}", config.value)
        _ = self._mood_combo.currentIndexChanged.connect(self._on_mood_changed)
        filter_row.addWidget(self._mood_combo)

        self._preset_combo: QComboBox = QComboBox()
        self._preset_combo.addItem("All Time", None)
        for preset in DateRangePreset:
            self._preset_combo.addItem(preset.label, preset)
        _ = self._preset_combo.currentIndexChanged.connect(self._on_preset_changed)
        filter_row.addWidget(self._preset_combo)

        self._start_check: QCheckBox = QCheckBox("From")
        self._start_edit: QDateEdit = QDateEdit(QDate.currentDate())
        self._start_edit.setCalendarPopup(True)
        self._end_check: QCheckBox = QCheckBox("Until")
        self._end_edit: QDateEdit = QDateEdit(QDate.currentDate())
        self._end_edit.setCalendarPopup(True)
        for widget in (
            self._start_check,
            self._start_edit,
            self._end_check,
            self._end_edit,
        ):
            filter_row.addWidget(widget)
        self._date_range_label: QLabel = QLabel("")
        filter_row.addWidget(self._date_range_label)
        _ = self._start_check.toggled.connect(self._on_dates_changed)
        _ = self._end_check.toggled.connect(self._on_dates_changed)
        _ = self._start_edit.dateChanged.connect(self._on_dates_changed)
        _ = self._end_edit.dateChanged.connect(self._on_dates_changed)

        layout.addLayout(filter_row)

        # Status row
        status_row = QHBoxLayout()
        self._status_label: QLabel = QLabel("")
        status_row.addWidget(self._status_label, stretch=1)
        self._retry_button: QPushButton = QPushButton("Retry")
        _ = self._retry_button.clicked.connect(self._controller.retry)
        self._retry_button.hide()
        status_row.addWidget(self._retry_button)
        layout.addLayout(status_row)

        # Results list
        self._results_list: QListWidget = QListWidget()
        self._results_list.setWordWrap(True)
        _ = self._results_list.itemActivated.connect(self._on_result_activated)
        layout.addWidget(self._results_list, stretch=1)

        self._load_more_button: QPushButton = QPushButton("Load more")
        _ = self._load_more_button.clicked.connect(self._controller.load_more)
        self._load_more_button.hide()
        layout.addWidget(self._load_more_button)

        # Recent searches
        recent_row = QHBoxLayout()
        self._recent_label: QLabel = QLabel("Recent searches")
        recent_row.addWidget(self._recent_label, stretch=1)
        self._clear_recent_button: QPushButton = QPushButton("Clear")
        _ = self._clear_recent_button.clicked.connect(self._controller.clear_recent)
        recent_row.addWidget(self._clear_recent_button)
        layout.addLayout(recent_row)

        self._recent_list: QListWidget = QListWidget()
        self._recent_list.setMaximumHeight(160)
        _ = self._recent_list.itemClicked.connect(self._on_recent_clicked)
        layout.addWidget(self._recent_list)

    def _style_widget(self) -> None:
        """Apply dark theme styling."""
        self.setStyleSheet("""
            QLineEdit, QComboBox, QDateEdit {
                background-color: #3c3c3c;
                border: 1px solid #555555;
                border-radius: 4px;
                padding: 4px 8px;
                color: #FFFFFF;
                font-size: 13px;
            }
            QLineEdit:focus {
                border-color: #0078D7;
            }
            QListWidget {
                background-color: #2B2B2B;
                border: none;
                color: #FFFFFF;
                font-size: 13px;
            }
            QListWidget::item {
                padding: 8px;
                border-bottom: 1px solid #3c3c3c;
            }
            QListWidget::item:selected {
                background-color: #0078D7;
            }
            QLabel {
                color: #888888;
                font-size: 11px;
            }
        """)

    def _on_mood_changed(self, index: int) -> None:
        self._controller.set_mood(self._mood_combo.itemData(index))

    def _on_preset_changed(self, index: int) -> None:
        preset: DateRangePreset | None = self._preset_combo.itemData(index)
        if preset is None:
            self._start_check.setChecked(False)
            self._end_check.setChecked(False)
            return
        start, end = preset.resolve()
        date_widgets = (
            self._start_edit,
            self._end_edit,
            self._start_check,
            self._end_check,
        )
        # Block the per-widget signals so the preset is one filter change
        for widget in date_widgets:
            _ = widget.blockSignals(True)
        self._start_edit.setDate(_to_qdate(start))
        self._end_edit.setDate(_to_qdate(end))
        self._start_check.setChecked(True)
        self._end_check.setChecked(True)
        for widget in date_widgets:
            _ = widget.blockSignals(False)
        self._controller.apply_date_preset(preset)
        self._update_date_range_label()

    def _on_dates_changed(self, *_args: object) -> None:
        start = end = None
        if self._start_check.isChecked():
            start = _to_date(self._start_edit.date())
        if self._end_check.isChecked():
            end = _to_date(self._end_edit.date())
        self._controller.set_date_range(start, end)
        self._update_date_range_label()

    def _update_date_range_label(self) -> None:
        self._date_range_label.setText(
            self._controller.search_filter.describe_date_range()
        )

    def _on_state_changed(self, state: SearchState) -> None:
        """Update the status line for the new state."""
        self._update_date_range_label()
        self._retry_button.setVisible(state == SearchState.FAILED)
        searching = state in (SearchState.DEBOUNCING, SearchState.SEARCHING)
        if state == SearchState.IDLE:
            self._status_label.setText(
                "Enter keywords, select moods, or choose a date range"
            )
        elif searching:
            self._status_label.setText("Searching...")
        elif state == SearchState.EMPTY:
            self._status_label.setText(
                "No results found. Try different search terms or filters"
            )
        elif state == SearchState.FAILED:
            message = self._controller.error_message or "Search failed"
            self._status_label.setText(f"Something went wrong: {message}")
        else:
            total = self._controller.total
            self._status_label.setText(
                f"Found {total} {'entry' if total == 1 else 'entries'}"
            )

    def _display_results(self) -> None:
        """Display the controller results in the list."""
        self._results_list.clear()
        for result in self._controller.results:
            self._add_result(result)
        self._load_more_button.setVisible(self._controller.has_more)

    def _add_result(self, result: SearchResult) -> None:
        entry = result.entry
        item = QListWidgetItem()
        item.setData(Qt.ItemDataRole.UserRole, entry.entry_id)
        snippets = result.snippets or (result.preview,)
        item.setToolTip("\n\n".join(snippet.to_plain() for snippet in snippets))

        header = entry.created_at.astimezone().strftime("%A, %B %d, %Y")
        badge = ""
        if entry.mood is not None:
            badge = (
                f'<span style="color: {mood_color(entry.mood)};">'
                f"{mood_emoji(entry.mood)} {mood_label(entry.mood)}</span>"
            )
        preview = result.preview.to_html(HIGHLIGHT_OPEN, HIGHLIGHT_CLOSE)
        label = QLabel(
            f"<b>{header}</b> {badge}<br>"
            f'<span style="white-space: pre-wrap;">{preview}</span>'
        )
        label.setTextFormat(Qt.TextFormat.RichText)
        label.setWordWrap(True)
        label.setStyleSheet("color: #FFFFFF; font-size: 13px;")

        self._results_list.addItem(item)
        item.setSizeHint(label.sizeHint())
        self._results_list.setItemWidget(item, label)

    def _display_recent(self, keywords: list[str]) -> None:
        self._recent_list.clear()
        for keyword in keywords:
            self._recent_list.addItem(keyword)
        has_recent = bool(keywords)
        self._recent_label.setVisible(has_recent)
        self._clear_recent_button.setVisible(has_recent)
        self._recent_list.setVisible(has_recent)

    def _on_recent_clicked(self, item: QListWidgetItem) -> None:
        keyword = item.text()
        _ = self._search_input.blockSignals(True)
        self._search_input.setText(keyword)
        _ = self._search_input.blockSignals(False)
        self._controller.apply_recent(keyword)

    def _on_result_activated(self, item: QListWidgetItem) -> None:
        """Open the entry behind a result."""
        entry_id = item.data(Qt.ItemDataRole.UserRole)
        if entry_id:
            self.logger.debug("Opening entry %s", entry_id)
            self._controller.select_entry(entry_id)

    def focus_search(self) -> None:
        """Focus the search input and select all text."""
        self._search_input.setFocus()
        self._search_input.selectAll()
