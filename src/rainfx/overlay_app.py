# overlay_app.py

import sys

import pygame

from rainfx.driver import FrameDriver
from rainfx.storm import RainStorm

IS_WINDOWS = sys.platform == "win32"
if IS_WINDOWS:
    import rainfx.window_manager as wm

BACKDROP_COLOR = (214, 218, 226)  # stand-in "page" behind the rain when not layered
DEFAULT_WINDOW_SIZE = (1280, 800)

# Only one overlay may be alive at a time
_active_app = None


def get_active_app():
    return _active_app


class RainOverlayApp:
    """Owns the pygame window, the refresh loop and the control panel for one RainStorm."""

    def __init__(self, config, tk_root=None):
        global _active_app
        if _active_app is not None:
            _active_app.shutdown()
        _active_app = self

        pygame.init()

        self.config = config
        self.tk_root = tk_root
        self.settings_window = None
        self.fps = max(1, int(config.get("fps", 60)))
        self.running = True
        self.clock = pygame.time.Clock()
        self.hwnd = None
        self.presenter = None
        self._cleared = False

        # --- Window Setup ---
        if IS_WINDOWS:
            self.width, self.height = wm.get_primary_screen_size()
            pixel_scale = config.get("pixel_scale") or wm.get_dpi_scale()
            self.screen = pygame.display.set_mode((self.width, self.height), pygame.NOFRAME)
            self.hwnd = pygame.display.get_wm_info()["window"]
            try:
                wm.setup_overlay_window(self.hwnd, self.width, self.height)
                self.presenter = wm.LayeredWindowPresenter(self.hwnd)
            except Exception as e:
                # The effect still renders, only without click-through layering
                print(f"WARNING: Overlay window configuration failed: {e}", flush=True)
        else:
            self.width, self.height = DEFAULT_WINDOW_SIZE
            pixel_scale = config.get("pixel_scale") or 1
            self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
            pygame.display.set_caption("Rain")

        self.frame_surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)

        # --- Simulation ---
        self.storm = RainStorm(self.width, self.height, pixel_scale=pixel_scale, options=config)
        self.driver = FrameDriver(self.storm)

    # --- Control surface forwarded to the storm ---

    def start(self):
        self._cleared = False
        return self.driver.start()

    def stop(self):
        return self.driver.stop()

    def toggle(self):
        running = self.driver.toggle()
        if running:
            self._cleared = False
        print(f"DEBUG: Rain {'resumed' if running else 'paused'}", flush=True)
        return running

    def apply_options(self, options):
        """Applies options to the storm and mirrors what was accepted into the app config."""
        applied = self.storm.set(options)
        self.config.update(applied)
        return applied

    def print_hints(self):
        print("Rain on!", flush=True)
        print("Tweak with the settings panel (S) or app.apply_options({density, wind, gravity, base_dim})", flush=True)
        print("Pause/resume with Space  |  Lightning now with L  |  Quit with Esc", flush=True)

    # --- Settings panel ---

    def open_settings(self):
        """Opens or activates the settings window."""
        if self.tk_root is None:
            print("WARNING: No Tk root available, settings panel disabled", flush=True)
            return

        # Imported here so the simulation never depends on a Tk display
        from rainfx.settings_gui import SettingsWindow

        if self.settings_window is None or not self.settings_window.winfo_exists():
            self.settings_window = SettingsWindow(self.tk_root, self)
        else:
            self.settings_window.lift()

    # --- Events ---

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False

        elif event.type == pygame.VIDEORESIZE and not IS_WINDOWS:
            self.width, self.height = event.w, event.h
            self.frame_surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
            self.storm.resize(self.width, self.height)

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_SPACE:
                self.toggle()
            elif event.key == pygame.K_l:
                self.storm.flash_now()
            elif event.key == pygame.K_s:
                self.open_settings()

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
            # Right-click: open settings window
            self.open_settings()

    # --- Rendering ---

    def compose(self):
        """Builds the frame: backdrop (when not layered), rain, then the dim overlay on top."""
        frame = self.frame_surface
        frame.fill((0, 0, 0, 0) if IS_WINDOWS else (*BACKDROP_COLOR, 255))

        rain = self.storm.surface
        if rain is None:
            return frame

        if rain.get_size() != frame.get_size():
            rain = pygame.transform.smoothscale(rain, frame.get_size())
        frame.blit(rain, (0, 0))

        self.storm.overlay.draw(frame)
        return frame

    def present(self, frame):
        if IS_WINDOWS:
            if self.presenter is not None:
                self.presenter.present(frame)
        else:
            self.screen.blit(frame, (0, 0))
            pygame.display.flip()

    def render(self):
        if not self.storm.running:
            # Present one empty frame after stop, then leave the window alone
            if self._cleared:
                return
            self._cleared = True
        self.present(self.compose())

    # --- Main loop ---

    def run(self):
        """Main application loop."""

        def check_tk_root():
            """Handles events for the hidden Tkinter root and any Toplevel windows."""
            if self.tk_root is None:
                return
            try:
                self.tk_root.update_idletasks()
                self.tk_root.update()
            except Exception as e:
                # The Tk root was destroyed, carry on without the panel
                print(f"WARNING: Tk root unavailable: {e}", flush=True)
                self.tk_root = None

        self.print_hints()
        if self.config.get("show_settings", True):
            self.open_settings()

        self.driver.start()
        while self.running:
            check_tk_root()

            for event in pygame.event.get():
                self.handle_event(event)

            if not self.running:
                break

            self.driver.frame()
            self.render()

            # Cap frame rate
            self.clock.tick(self.fps)

        self.cleanup()

    def close_settings(self):
        """Destroys the settings panel if it is open."""
        if self.settings_window is None:
            return
        try:
            self.settings_window.destroy()
        except Exception as e:
            print(f"WARNING: Failed to close settings window: {e}", flush=True)
        self.settings_window = None

    def shutdown(self):
        """Requests the loop to end, stops the simulation and closes the panel right away."""
        self.running = False
        self.storm.stop()
        self.close_settings()
        if self.presenter is not None:
            self.presenter.close()
            self.presenter = None

    def cleanup(self):
        """Releases everything and shuts pygame down."""
        global _active_app
        self.shutdown()
        if _active_app is self:
            _active_app = None
        pygame.quit()
