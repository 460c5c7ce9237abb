# settings_gui.py

import customtkinter as ctk
from tkinter import messagebox

from rainfx.config_manager import save_config

# Set theme and appearance
ctk.set_appearance_mode("System")  # Supports 'Light', 'Dark', 'System'
ctk.set_default_color_theme("dark-blue")  # Options: 'blue', 'green', 'dark-blue'

# option key -> (label, slider min, slider max, display format)
SLIDERS = {
    "density": ("Density (drops / px)", 0.00002, 0.0006, "{:.5f}"),
    "wind": ("Wind (px/s)", -600, 600, "{:.0f}"),
    "gravity": ("Gravity (px/s)", 300, 3000, "{:.0f}"),
    "base_dim": ("Darkness", 0.0, 1.0, "{:.2f}"),
}
SLIDER_STEPS = 200


class SettingsWindow(ctk.CTkToplevel):
    """
    A CustomTkinter Toplevel window for tuning the rain while it runs.
    Every slider move goes straight to RainStorm.set through the app.
    """

    def __init__(self, master, app):
        super().__init__(master)
        self.app = app
        self.title("Rain Settings")

        self.gui_width = 380
        self.gui_height = 420
        self.geometry(f"{self.gui_width}x{self.gui_height}+40+40")

        self.resizable(False, False)
        self.attributes('-topmost', True)
        self.protocol("WM_DELETE_WINDOW", self.close_window)

        options = self.app.storm.to_options()
        self.value_vars = {key: ctk.DoubleVar(value=options[key]) for key in SLIDERS}
        self.value_labels = {}
        self.pause_button = None

        self.create_widgets()

    def create_widgets(self):
        """Creates and places all UI elements (widgets) in the window."""
        self.main_frame = ctk.CTkFrame(self)
        self.main_frame.pack(fill="both", expand=True, padx=10, pady=10)
        self.main_frame.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            self.main_frame,
            text="--- Storm Settings ---",
            font=ctk.CTkFont(weight="bold")
        ).grid(row=0, column=0, columnspan=3, padx=5, pady=(5, 10), sticky="n")

        # --- 1. One slider per option ---
        for row, (key, (label, low, high, fmt)) in enumerate(SLIDERS.items(), start=1):
            ctk.CTkLabel(self.main_frame, text=label).grid(row=row, column=0, padx=5, pady=5, sticky="w")

            slider = ctk.CTkSlider(
                self.main_frame,
                from_=low,
                to=high,
                number_of_steps=SLIDER_STEPS,
                variable=self.value_vars[key],
                command=lambda value, k=key: self.on_slider(k, value)
            )
            slider.grid(row=row, column=1, padx=5, pady=5, sticky="ew")

            value_label = ctk.CTkLabel(self.main_frame, text=fmt.format(self.value_vars[key].get()), width=64)
            value_label.grid(row=row, column=2, padx=5, pady=5, sticky="e")
            self.value_labels[key] = value_label

        # --- 2. Actions ---
        action_row = len(SLIDERS) + 1

        self.pause_button = ctk.CTkButton(self.main_frame, text=self._pause_text(), command=self.toggle_running)
        self.pause_button.grid(row=action_row, column=0, columnspan=3, padx=5, pady=(15, 5), sticky="ew")

        flash_button = ctk.CTkButton(self.main_frame, text="Lightning Now", command=self.app.storm.flash_now)
        flash_button.grid(row=action_row + 1, column=0, columnspan=3, padx=5, pady=5, sticky="ew")

        save_button = ctk.CTkButton(self.main_frame, text="Save Settings", command=self.save_settings)
        save_button.grid(row=action_row + 2, column=0, columnspan=3, padx=5, pady=5, sticky="ew")

        exit_button = ctk.CTkButton(
            self.main_frame,
            text="Exit Rain",
            command=self.confirm_exit,
            fg_color="#e74c3c",  # Dark red background
            hover_color="#c0392b"
        )
        exit_button.grid(row=action_row + 3, column=0, columnspan=3, padx=5, pady=10, sticky="ew")

    def _pause_text(self):
        return "Pause" if self.app.storm.running else "Resume"

    def on_slider(self, key, value):
        """Applies a slider change immediately."""
        applied = self.app.apply_options({key: float(value)})
        if key in applied:
            _, _, _, fmt = SLIDERS[key]
            self.value_labels[key].configure(text=fmt.format(applied[key]))

    def toggle_running(self):
        self.app.toggle()
        self.pause_button.configure(text=self._pause_text())

    def save_settings(self):
        """Persists the current storm options into the config file."""
        self.app.config.update(self.app.storm.to_options())
        if save_config(self.app.config):
            messagebox.showinfo("Settings Saved", "Rain settings have been saved!", parent=self)
        else:
            messagebox.showerror("Error", "Could not write the settings file.", parent=self)

    def confirm_exit(self):
        """Prompts user for confirmation and initiates application exit."""
        if messagebox.askyesno("Confirm Exit", "Stop the rain and exit?", parent=self):
            self.destroy()
            self.app.settings_window = None
            self.app.running = False

    def close_window(self):
        """Hides the panel; the rain keeps going."""
        self.destroy()
        self.app.settings_window = None
