from pathlib import Path

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QFormLayout,
    QLabel, QComboBox, QPushButton, QProgressBar, QPlainTextEdit,
    QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFontDatabase, QTextCursor

from core import (
    Device, EngineNotFoundError, SessionOutcome, TargetFormat,
    TranscodeRequest, TranscodeSession,
)
from core.config import Settings, save_settings
from core.paths import validate_binaries

# One poll per frame at ~20 fps is plenty for a progress bar.
POLL_INTERVAL_MS = 50

_DEVICE_LABELS = {
    Device.CPU:    "CPU",
    Device.NVIDIA: "NVIDIA GPU",
    Device.INTEL:  "Intel GPU",
    Device.AMD:    "AMD GPU",
}


class MainWindow(QMainWindow):
    """
    Single-file converter. Everything the window shows comes from polling
    TranscodeSession.snapshot() on a QTimer; the window never waits on the
    session.
    """

    def __init__(self, settings: Settings, source: Path | None = None):
        super().__init__()
        self._settings = settings
        self._source = source
        self._session = TranscodeSession(settings)
        self._last_log_len = 0

        self.setWindowTitle("FFUI")
        self.resize(720, 520)
        self.setMinimumSize(560, 380)

        self._build_ui()
        self._restore_choices()
        self._set_source(source)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(POLL_INTERVAL_MS)
        self._poll_timer.timeout.connect(self._poll)
        self._poll_timer.start()

        # ── Binary check ──────────────────────────────────────────────────────
        errors = validate_binaries(settings.ffmpeg_path, settings.ffprobe_path)
        if errors:
            print(f"[WINDOW] Missing binaries: {errors}")
            self.log_view.setPlainText("\n".join(errors))

    # ── UI construction ───────────────────────────────────────────────────────

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        form = QFormLayout()

        file_row = QHBoxLayout()
        self.file_lbl = QLabel("No file selected")
        self.file_lbl.setWordWrap(True)
        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._browse_source)
        file_row.addWidget(self.file_lbl, 1)
        file_row.addWidget(browse_btn)
        form.addRow("Input File:", file_row)

        self.format_combo = QComboBox()
        for fmt in TargetFormat:
            self.format_combo.addItem(fmt.value, userData=fmt)
        form.addRow("Target Format:", self.format_combo)

        self.device_combo = QComboBox()
        for device, label in _DEVICE_LABELS.items():
            self.device_combo.addItem(label, userData=device)
        form.addRow("Device:", self.device_combo)

        root.addLayout(form)

        buttons = QHBoxLayout()
        self.start_btn = QPushButton("Start")
        self.start_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.start_btn.clicked.connect(self._start)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.cancel_btn.clicked.connect(self._session.cancel)
        buttons.addWidget(self.start_btn)
        buttons.addWidget(self.cancel_btn)
        buttons.addStretch()
        root.addLayout(buttons)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setFormat("%p%")
        root.addWidget(self.progress_bar)

        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        root.addWidget(self.log_view, 1)

        self.done_lbl = QLabel("✅ Conversion complete!")
        self.done_lbl.setVisible(False)
        root.addWidget(self.done_lbl)

    def _restore_choices(self):
        for combo, value in (
            (self.format_combo, self._settings.target_format),
            (self.device_combo, self._settings.device),
        ):
            for i in range(combo.count()):
                if combo.itemData(i) == value:
                    combo.setCurrentIndex(i)
                    break

    # ── Actions ───────────────────────────────────────────────────────────────

    def _browse_source(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Media File")
        if path:
            self._set_source(Path(path))

    def _set_source(self, source: Path | None):
        self._source = source
        self.file_lbl.setText(str(source) if source else "No file selected")

    def _start(self):
        if self._source is None or not self._source.is_file():
            QMessageBox.warning(self, "FFUI", "Pick an existing media file first.")
            return

        fmt: TargetFormat = self.format_combo.currentData()
        device: Device = self.device_combo.currentData()
        request = TranscodeRequest(self._source, fmt, device)

        try:
            started = self._session.start(request)
        except EngineNotFoundError as exc:
            QMessageBox.critical(self, "FFUI", str(exc))
            return

        if started:
            self._last_log_len = 0
            self.log_view.clear()
            self._settings.target_format = fmt
            self._settings.device = device
            save_settings(self._settings)

    # ── Polling ───────────────────────────────────────────────────────────────

    def _poll(self):
        snap = self._session.snapshot()

        self.progress_bar.setValue(int(snap.progress_percent * 10))
        self.start_btn.setEnabled(not snap.running)
        self.cancel_btn.setEnabled(snap.running and not snap.cancel_requested)
        self.done_lbl.setVisible(snap.completed)

        # The log only ever grows during a run; append the new tail.
        if len(snap.log_text) != self._last_log_len:
            if len(snap.log_text) < self._last_log_len:
                self.log_view.setPlainText(snap.log_text)
            else:
                self.log_view.moveCursor(QTextCursor.MoveOperation.End)
                self.log_view.insertPlainText(snap.log_text[self._last_log_len:])
            self._last_log_len = len(snap.log_text)
            self.log_view.ensureCursorVisible()

        if snap.outcome is SessionOutcome.FAILED and not snap.running:
            self.progress_bar.setFormat("Failed")
        else:
            self.progress_bar.setFormat("%p%")

    def closeEvent(self, event):
        # Don't leave an orphaned ffmpeg behind.
        self._session.cancel()
        self._session.wait(timeout=2.0)
        super().closeEvent(event)
