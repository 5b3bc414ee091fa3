from __future__ import annotations

from collections.abc import Mapping

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
)

from app.views.constants import TAG_ROLE
from core.models import TagFilter
from core.services.tag_filter import NEGATION_MARKER, encode_tag_filter


def filter_to_terms(tag_filter: TagFilter) -> str:
    """Space-separated editable form of a filter, e.g. ``cat -dog``."""
    terms = sorted(tag_filter.required)
    terms += [NEGATION_MARKER + tag for tag in sorted(tag_filter.excluded)]
    return " ".join(terms)


class FiltersDialog(QDialog):
    def __init__(
        self,
        parent=None,
        current: TagFilter | None = None,
        tag_counts: Mapping[str, int] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Filter by Tags")

        root = QVBoxLayout(self)

        row = QHBoxLayout()
        row.addWidget(QLabel("Tags"))
        self.terms_edit = QLineEdit()
        self.terms_edit.setPlaceholderText("e.g. beach -blurry")
        self.terms_edit.setText(filter_to_terms(current or TagFilter()))
        row.addWidget(self.terms_edit)
        root.addLayout(row)

        self.tag_list = QListWidget()
        counts = dict(tag_counts or {})
        for tag in sorted(counts, key=lambda t: (-counts[t], t)):
            entry = QListWidgetItem(f"{tag} ({counts[tag]})")
            entry.setData(TAG_ROLE, tag)
            self.tag_list.addItem(entry)
        root.addWidget(self.tag_list)

        tips = QLabel(
            "使用說明：以空白分隔標籤，全部符合才顯示。\n"
            "- 排除標籤：在前面加 -，例如 -blurry\n"
            "- 雙擊清單中的標籤可加入條件"
        )
        tips.setWordWrap(True)
        root.addWidget(tips)

        btns = QHBoxLayout()
        self.btn_apply = QPushButton("Apply")
        self.btn_clear = QPushButton("Clear")
        self.btn_close = QPushButton("Close")
        btns.addWidget(self.btn_apply)
        btns.addWidget(self.btn_clear)
        btns.addStretch(1)
        btns.addWidget(self.btn_close)
        root.addLayout(btns)

        self.btn_apply.setDefault(True)
        self.btn_apply.clicked.connect(self.accept)
        self.btn_clear.clicked.connect(self.terms_edit.clear)
        self.btn_close.clicked.connect(self.reject)
        self.tag_list.itemDoubleClicked.connect(self._append_tag)

    def tag_filter(self) -> TagFilter:
        return TagFilter.from_terms(self.terms_edit.text().split())

    def query(self) -> str:
        """Encoded filter query for the entered terms."""
        return encode_tag_filter(self.tag_filter())

    def _append_tag(self, entry: QListWidgetItem) -> None:
        tag = entry.data(TAG_ROLE)
        if not tag:
            return
        terms = self.terms_edit.text().split()
        if tag in terms:
            return
        terms.append(tag)
        self.terms_edit.setText(" ".join(terms))
        self.terms_edit.setFocus(Qt.OtherFocusReason)
