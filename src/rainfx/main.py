# main.py

import sys
import tkinter as tk

import customtkinter as ctk

from rainfx.config_manager import DEFAULT_CONFIG, load_config
from rainfx.overlay_app import RainOverlayApp

# Keep Tk from changing the process DPI mode so the pygame window keeps its real size.
try:
    ctk.deactivate_automatic_dpi_awareness()
except AttributeError:
    # Older customtkinter releases do not have this switch
    pass


def main():
    tk_root = None
    app_config = load_config(DEFAULT_CONFIG)

    try:
        # 1. Initialize the hidden Tkinter main loop (hosts the settings panel)
        tk_root = tk.Tk()
        tk_root.withdraw()

        # 2. Build the overlay and run its loop
        app = RainOverlayApp(app_config, tk_root=tk_root)
        app.run()

    except Exception as e:
        print(f"Program startup failed or fatal error during runtime: {e}", flush=True)
        sys.exit(1)

    finally:
        # Ensure tk_root is properly destroyed upon exit
        if tk_root is not None:
            try:
                if tk_root.winfo_exists():
                    tk_root.destroy()
            except tk.TclError:
                pass


if __name__ == "__main__":
    main()
