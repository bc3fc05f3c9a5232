# UI.py
""""PySide6 user interface for the expression calculator.

Structure
---------
- Calculator UI: history, input line, live result / error marker, trace pane
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Live evaluation while typing, with carets under the offending span on errors
- Dispatch submitted expressions to MathEngine in a worker thread
- Navigate previously submitted expressions with Up / Down
- Clipboard integration (Shift + copy puts the whole equation on the clipboard)

Responsibilities (Settings)
---------------------------
- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (precision must be a non-negative integer)
- Save and apply theme changes immediately


Threading Note
--------------
Each Worker owns its own Executor and Debugger, so a submitted evaluation never
shares its trace buffer with the live evaluation running on the UI thread.
"""""

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal
import sys
import logging
import threading
from pynput.keyboard import Controller
import pyperclip
from . import error as E  # Imports error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from .MathEngine import Executor
from .debugger import Debugger

logger = logging.getLogger(__name__)

HISTORY_NONE = -1      # not browsing the history
HISTORY_DISABLED = -2  # input was edited after recalling an entry


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for the "copy_expression_on_shift" setting.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs one submitted expression on a separate thread and emits a Signal
    with the result (or the MathError) back to the Calculator UI.

    """""

    job_finished = Signal(object, str, str)

    def __init__(self, problem, precision, debug_enabled):
        super().__init__()
        self.data = problem
        self.precision = precision
        self.debugger = Debugger(enabled=debug_enabled)

    def run_Calc(self):

        try:
            # --- 1. Start Calculation ---
            result = Executor(self.debugger).execute(self.data, self.precision)

            # --- 2. Send Success Signal ---
            self.job_finished.emit(result, self.data, str(self.debugger))

        except E.MathError as e:
            # --- 3. Send Math Error Signal ---
            self.job_finished.emit(e, self.data, str(self.debugger))

        except Exception as e:
            # --- 4. Send Critical Error Signal ---
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, self.data, str(self.debugger))


class SettingsDialog(QtWidgets.QDialog):
    """""

    Manages the settings window. Boolean settings become checkboxes,
    integer settings become input fields.

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        # --- 1. Window Setup ---
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(360, 220)
        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + " (min. 0):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)
        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self):
        setting_value_list = self.setting_value_list

        for key_value, widget in self.widgets.items():

            # --- Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- Input Fields (like 'precision') ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()
                if new_value_str == "":
                    continue  # Blank keeps the old value

                try:
                    new_value_int = int(new_value_str)
                    if new_value_int < 0:
                        raise ValueError(f"'{new_value_int}' is too small. Minimum is 0.")
                    setting_value_list[key_value] = new_value_int

                except ValueError as e:
                    logger.warning("Invalid input for %s: %s", key_value, e)
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                    return  # Stop saving!

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error", E.ERROR_MESSAGES["6001"] + "config.json")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class ExpressionInput(QtWidgets.QLineEdit):
    """Input line that hands Up / Down / Escape to the calculator window."""

    navigate = Signal(int)
    escape = Signal()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Up:
            self.navigate.emit(-1)
        elif event.key() == Qt.Key.Key_Down:
            self.navigate.emit(1)
        elif event.key() == Qt.Key.Key_Escape:
            self.escape.emit()
        else:
            super().keyPressEvent(event)


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Instance State Variables ---
        self.expressions = []  # Submitted expressions
        self.results = []      # Their results, same order
        self.selected_expression = HISTORY_NONE
        self.thread_active = False
        self.live_executor = Executor(Debugger())
        self.workers = []  # Keep running workers alive until they report back

        # --- 3. Window Setup ---
        self.setWindowTitle("Calculator")
        self.resize(520, 420)
        main_v_layout = QtWidgets.QVBoxLayout(self)
        mono = QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont)
        mono.setPointSize(13)

        # --- 4. Toolbar ---
        toolbar = QtWidgets.QHBoxLayout()
        self.settings_button = QtWidgets.QPushButton("⚙️")
        self.settings_button.clicked.connect(self.open_settings)
        self.copy_button = QtWidgets.QPushButton("📋")
        self.copy_button.clicked.connect(self.copy_result)
        toolbar.addWidget(self.settings_button)
        toolbar.addWidget(self.copy_button)
        toolbar.addStretch(1)
        main_v_layout.addLayout(toolbar)

        # --- 5. History ---
        self.history = QtWidgets.QPlainTextEdit()
        self.history.setReadOnly(True)
        self.history.setFont(mono)
        main_v_layout.addWidget(self.history, 3)

        # --- 6. Input + live feedback ---
        self.input = ExpressionInput()
        self.input.setFont(mono)
        self.input.setPlaceholderText("...")
        self.input.textEdited.connect(self.live_evaluate)
        self.input.returnPressed.connect(self.submit)
        self.input.navigate.connect(self.navigate_history)
        self.input.escape.connect(self.handle_escape)
        main_v_layout.addWidget(self.input)

        self.marker = QtWidgets.QLabel("")
        self.marker.setFont(mono)
        main_v_layout.addWidget(self.marker)

        self.message = QtWidgets.QLabel("")
        self.message.setWordWrap(True)
        main_v_layout.addWidget(self.message)

        # --- 7. Trace (debug setting) ---
        self.trace = QtWidgets.QPlainTextEdit()
        self.trace.setReadOnly(True)
        self.trace.setFont(mono)
        main_v_layout.addWidget(self.trace, 2)

        self.apply_settings()
        self.input.setFocus()

    # --- Settings ---
    def apply_settings(self):
        self.trace.setVisible(self.setting_value_list["debug"] == True)
        self.update_darkmode()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # "exec" makes the dialog modal (blocks main window)

        # Reload settings after dialog closes
        self.setting_value_list = config_manager.load_setting_value("all")
        self.apply_settings()

    def precision(self):
        return self.setting_value_list["precision"]

    # --- Live evaluation ---
    def live_evaluate(self, text):
        self.message.setText("")
        if self.selected_expression >= 0 and self.expressions[self.selected_expression] != text:
            self.selected_expression = HISTORY_DISABLED
        if text == "":
            self.selected_expression = HISTORY_NONE

        if self.setting_value_list["live_evaluation"] != True:
            self.marker.setText("")
            return

        self.live_executor.debugger.enabled = self.setting_value_list["debug"] == True
        try:
            result = self.live_executor.execute(text, self.precision())
        except E.MathError as e:
            self.show_error_marker(e)
        else:
            self.show_live_result(result)
        self.show_trace(str(self.live_executor.debugger))

    def show_live_result(self, result):
        self.marker.setStyleSheet("color: gray;")
        self.marker.setText(f"=> {result}" if result != "" else "")

    def show_error_marker(self, error):
        self.marker.setStyleSheet("color: red;")
        if error.location is None:
            self.marker.setText("")
            return
        self.marker.setText(" " * error.location.start + "^" * max(error.location.size(), 1))

    def show_trace(self, text):
        if self.setting_value_list["debug"] == True:
            self.trace.setPlainText(text)

    # --- Submit ---
    def submit(self):
        problem = self.input.text()
        if problem.strip() == "":
            return
        if self.thread_active:
            self.message.setText("Calculation already running!")
            return

        self.thread_active = True
        worker_instance = Worker(problem, self.precision(), self.setting_value_list["debug"] == True)
        worker_instance.job_finished.connect(self.calc_result)
        self.workers.append(worker_instance)
        my_thread = threading.Thread(target=worker_instance.run_Calc, daemon=True)
        my_thread.start()

    def calc_result(self, result, equation, trace):
        self.thread_active = False
        self.workers = [worker for worker in self.workers if worker.data != equation]
        self.show_trace(trace)

        if isinstance(result, E.MathError):
            self.selected_expression = HISTORY_DISABLED
            self.show_error_marker(result)
            self.message.setStyleSheet("color: red;")
            self.message.setText(f"Error {result.code}: {result.message}")
            # Put the cursor at the end of the offending span
            if result.location is not None:
                self.input.setCursorPosition(result.location.end)
            return

        self.expressions.append(equation)
        self.results.append(result)
        self.history.appendPlainText(f"> {equation}\n=> {result}\n")
        self.input.clear()
        self.marker.setText("")
        self.message.setText("")
        self.selected_expression = HISTORY_NONE

    # --- History navigation ---
    def navigate_history(self, step):
        if not self.expressions or self.selected_expression == HISTORY_DISABLED:
            return

        if step < 0:
            if self.selected_expression == HISTORY_NONE:
                self.selected_expression = len(self.expressions) - 1
            elif self.selected_expression > 0:
                self.selected_expression -= 1
            else:
                return
        else:
            if self.selected_expression == HISTORY_NONE:
                return
            self.selected_expression += 1
            if self.selected_expression == len(self.expressions):
                self.selected_expression = HISTORY_NONE
                self.input.clear()
                self.live_evaluate("")
                return

        text = self.expressions[self.selected_expression]
        self.input.setText(text)
        self.input.end(False)
        self.live_evaluate(text)

    def handle_escape(self):
        if self.input.text() == "":
            self.close()
            return
        self.input.clear()
        self.selected_expression = HISTORY_NONE
        self.live_evaluate("")

    # --- Clipboard ---
    def copy_result(self):
        if not self.results:
            return
        text = self.results[-1]
        if self.setting_value_list["copy_expression_on_shift"] == True and is_shift_pressed():
            text = f"{self.expressions[-1]} = {text}"
        pyperclip.copy(text)

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                QWidget {background-color: #121212; color: white;}
                QPlainTextEdit, QLineEdit {background-color: #1e1e1e; border: 1px solid #444444;}
                QPushButton {background-color: #2e2e2e; border: 1px solid #444444; padding: 4px 10px;}""")
        else:
            self.setStyleSheet("")


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
