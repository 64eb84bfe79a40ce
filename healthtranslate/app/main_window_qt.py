from __future__ import annotations

from typing import Sequence, Tuple

from PyQt6 import QtCore, QtGui, QtWidgets

from healthtranslate.app.session import TranslatorSession
from healthtranslate.app.state import StatusState

_STATUS_TEXT = {
    StatusState.IDLE: "",
    StatusState.RECORDING: "Recording...",
    StatusState.TRANSLATING: "Translating...",
    StatusState.SUCCEEDED: "Translation ready.",
}


class MainWindow(QtWidgets.QMainWindow):
    record_requested = QtCore.pyqtSignal()
    translate_requested = QtCore.pyqtSignal()
    speak_requested = QtCore.pyqtSignal()
    input_edited = QtCore.pyqtSignal(str)
    source_language_changed = QtCore.pyqtSignal(str)
    target_language_changed = QtCore.pyqtSignal(str)

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("HealthTranslate")
        self.resize(900, 520)
        self._rendering = False

        root = QtWidgets.QWidget(self)
        self.setCentralWidget(root)
        lay = QtWidgets.QVBoxLayout(root)
        lay.setContentsMargins(22, 20, 22, 20)
        lay.setSpacing(14)

        title = QtWidgets.QLabel("HealthTranslate", root)
        title.setObjectName("title")
        lay.addWidget(title)

        lang_row = QtWidgets.QHBoxLayout()
        self.source_combo = QtWidgets.QComboBox(root)
        self.target_combo = QtWidgets.QComboBox(root)
        lang_row.addWidget(self.source_combo, 1)
        lang_row.addWidget(QtWidgets.QLabel("→", root))
        lang_row.addWidget(self.target_combo, 1)
        lay.addLayout(lang_row)

        panes = QtWidgets.QHBoxLayout()
        panes.setSpacing(12)

        src_card = QtWidgets.QFrame(root)
        src_card.setObjectName("card")
        src_lay = QtWidgets.QVBoxLayout(src_card)
        self.input_edit = QtWidgets.QPlainTextEdit(src_card)
        self.input_edit.setPlaceholderText("Tap Dictate to start speaking...")
        src_lay.addWidget(self.input_edit, 1)
        src_btns = QtWidgets.QHBoxLayout()
        self.btn_record = QtWidgets.QPushButton("Dictate", src_card)
        self.btn_record.setObjectName("primary")
        self.btn_translate = QtWidgets.QPushButton("Translate", src_card)
        self.char_count = QtWidgets.QLabel("", src_card)
        self.char_count.setObjectName("subhead")
        src_btns.addWidget(self.btn_record)
        src_btns.addWidget(self.btn_translate)
        src_btns.addStretch(1)
        src_btns.addWidget(self.char_count)
        src_lay.addLayout(src_btns)
        panes.addWidget(src_card, 1)

        out_card = QtWidgets.QFrame(root)
        out_card.setObjectName("card")
        out_lay = QtWidgets.QVBoxLayout(out_card)
        self.corrected_label = QtWidgets.QLabel("", out_card)
        self.corrected_label.setObjectName("subhead")
        self.corrected_label.setWordWrap(True)
        self.corrected_label.setTextFormat(QtCore.Qt.TextFormat.PlainText)
        self.corrected_label.setVisible(False)
        out_lay.addWidget(self.corrected_label)
        self.output_label = QtWidgets.QLabel("", out_card)
        self.output_label.setWordWrap(True)
        self.output_label.setTextFormat(QtCore.Qt.TextFormat.PlainText)
        self.output_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignTop | QtCore.Qt.AlignmentFlag.AlignLeft)
        self.output_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)
        out_lay.addWidget(self.output_label, 1)
        out_btns = QtWidgets.QHBoxLayout()
        out_btns.addStretch(1)
        self.btn_speak = QtWidgets.QPushButton("Listen", out_card)
        out_btns.addWidget(self.btn_speak)
        out_lay.addLayout(out_btns)
        panes.addWidget(out_card, 1)
        lay.addLayout(panes, 1)

        self.status_label = QtWidgets.QLabel("", root)
        self.status_label.setObjectName("status")
        self.status_label.setWordWrap(True)
        lay.addWidget(self.status_label)

        notice = QtWidgets.QLabel(
            "Privacy notice: prototype. Text is sent to a remote language model. "
            "Do not enter real personally identifiable information.",
            root,
        )
        notice.setObjectName("notice")
        notice.setWordWrap(True)
        lay.addWidget(notice)

        self.btn_record.clicked.connect(self.record_requested.emit)
        self.btn_translate.clicked.connect(self.translate_requested.emit)
        self.btn_speak.clicked.connect(self.speak_requested.emit)
        self.input_edit.textChanged.connect(self._on_text_changed)
        self.source_combo.currentIndexChanged.connect(
            lambda _i: self._emit_combo(self.source_combo, self.source_language_changed)
        )
        self.target_combo.currentIndexChanged.connect(
            lambda _i: self._emit_combo(self.target_combo, self.target_language_changed)
        )

        self.setStyleSheet(
            """
            QMainWindow { background: #f8fafc; color: #0f172a; }
            QLabel#title { font-size: 28px; font-weight: 700; color: #2563eb; }
            QLabel#status { color: #475569; font-size: 13px; }
            QLabel#subhead { color: #94a3b8; font-size: 12px; }
            QLabel#notice {
                background: #fffbeb; color: #92400e; border: 1px solid #fde68a;
                border-radius: 8px; padding: 8px; font-size: 12px;
            }
            QFrame#card { background: #ffffff; border: 1px solid #e2e8f0; border-radius: 14px; }
            QPlainTextEdit { border: none; font-size: 16px; }
            QPushButton {
                background: #0f172a; color: #ffffff; border-radius: 10px;
                padding: 8px 14px; font-size: 13px; font-weight: 600;
            }
            QPushButton:disabled { background: #cbd5e1; }
            QPushButton#primary { background: #eff6ff; color: #2563eb; }
            QPushButton#primary[recording="true"] { background: #fee2e2; color: #dc2626; }
            """
        )

    def _on_text_changed(self) -> None:
        if not self._rendering:
            self.input_edited.emit(self.input_edit.toPlainText())

    def _emit_combo(self, combo: QtWidgets.QComboBox, signal) -> None:
        if self._rendering:
            return
        tag = combo.currentData()
        if tag:
            signal.emit(str(tag))

    def set_language_options(self, options: Sequence[Tuple[str, str]]) -> None:
        self._rendering = True
        try:
            for combo in (self.source_combo, self.target_combo):
                combo.clear()
                for tag, label in options:
                    combo.addItem(label, tag)
                combo.setEnabled(bool(options))
        finally:
            self._rendering = False

    @staticmethod
    def _select(combo: QtWidgets.QComboBox, tag: str) -> None:
        idx = combo.findData(tag)
        if idx >= 0 and idx != combo.currentIndex():
            combo.setCurrentIndex(idx)

    def render(self, session: TranslatorSession) -> None:
        self._rendering = True
        try:
            if self.input_edit.toPlainText() != session.input_text:
                self.input_edit.setPlainText(session.input_text)
                self.input_edit.moveCursor(QtGui.QTextCursor.MoveOperation.End)
            self._select(self.source_combo, session.source_language)
            self._select(self.target_combo, session.target_language)

            self.btn_record.setEnabled(session.can_record)
            self.btn_record.setText("Recording..." if session.is_recording else "Dictate")
            self.btn_record.setProperty("recording", "true" if session.is_recording else "false")
            self.btn_record.style().unpolish(self.btn_record)
            self.btn_record.style().polish(self.btn_record)
            if not session.can_record:
                self.btn_record.setToolTip("No microphone available")

            self.btn_translate.setEnabled(session.can_translate)
            self.btn_translate.setText("Translating..." if session.is_loading else "Translate")
            self.char_count.setText(session.char_count_text)

            if session.is_loading:
                self.output_label.setText("Translating...")
            else:
                self.output_label.setText(session.translated_text or "Translation will appear here...")
            self.btn_speak.setEnabled(bool(session.translated_text))
            caption = session.corrected_caption
            self.corrected_label.setText(caption)
            self.corrected_label.setVisible(bool(caption))

            status = session.status
            if status.state == StatusState.FAILED:
                text = f"Failed: {status.last_error}"
            else:
                text = _STATUS_TEXT.get(status.state, "")
            if session.last_hint:
                text = f"{text}  {session.last_hint}".strip()
            self.status_label.setText(text)
        finally:
            self._rendering = False
