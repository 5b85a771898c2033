# FlightView - drone flight log visualizer
# Copyright (C) 2024 FlightView Contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Log file selection.

Files reach the importer only through the native open dialog. Dropped
files carry no usable filesystem path, so a drop is always refused with a
message pointing the user at the Browse button.
"""
import logging
import os

import config

try:
    from locales.strings import ERRORS, MESSAGES
except ImportError:
    from ..locales.strings import ERRORS, MESSAGES

logger = logging.getLogger(__name__)


def dialog_filetypes(extensions=None):
    """Filter list for the open dialog: ``[(label, "*.txt *.dat ...")]``."""
    extensions = extensions or config.LOG_FILE_EXTENSIONS
    patterns = ' '.join(f'*.{ext}' for ext in extensions)
    return [(MESSAGES['dialog_filter'], patterns)]


def is_log_file(path, extensions=None):
    extensions = extensions or config.LOG_FILE_EXTENSIONS
    ext = os.path.splitext(str(path))[1].lstrip('.').lower()
    return ext in extensions


def validate_log_path(path):
    """Return an error message for an unusable path, or None."""
    if not path or not os.path.isfile(path):
        return ERRORS['file_not_found'].format(file_path=path)
    if not is_log_file(path):
        return ERRORS['unsupported_extension'].format(file_path=path)
    return None


def _tk_open_dialog(title, filetypes):
    # Imported lazily: headless installs may ship Python without Tk
    import tkinter
    from tkinter import filedialog

    root = tkinter.Tk()
    root.withdraw()
    try:
        return filedialog.askopenfilename(title=title, filetypes=filetypes)
    finally:
        root.destroy()


def choose_log_file(dialog=None):
    """Ask the user for one log file.

    Args:
        dialog: callable(title, filetypes) -> path or '' (default: Tk dialog)

    Returns:
        str path, or None when the dialog was cancelled
    """
    dialog = dialog or _tk_open_dialog
    selected = dialog(MESSAGES['dialog_title'], dialog_filetypes())
    if not selected or not isinstance(selected, str):
        return None
    return selected


def handle_drop(paths):
    """Refuse dropped files; returns the notice to show the user."""
    if paths:
        logger.info(f"Refused drop of {len(paths)} file(s)")
    return MESSAGES['drop_unsupported']


async def browse_and_import(store, dialog=None):
    """Open the dialog and import the chosen file into ``store``.

    Returns:
        ImportResult, or None when the user cancelled
    """
    path = choose_log_file(dialog)
    if path is None:
        return None
    return await store.import_log(path)
