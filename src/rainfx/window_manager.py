# window_manager.py
# Win32 helpers that turn the pygame window into a full-screen, click-through
# layered overlay. Only imported on Windows.

import ctypes
from ctypes import Structure, byref, c_void_p, wintypes
import numpy as np
import pygame
import win32con
import win32gui

user32 = ctypes.windll.user32
gdi32 = ctypes.windll.gdi32

USER_DEFAULT_DPI = 96
ULW_ALPHA = 0x00000002
AC_SRC_OVER = 0x00
AC_SRC_ALPHA = 0x01
BI_RGB = 0
DIB_RGB_COLORS = 0


class POINT(Structure):
    _fields_ = [("x", wintypes.LONG), ("y", wintypes.LONG)]


class SIZE(Structure):
    _fields_ = [("cx", wintypes.LONG), ("cy", wintypes.LONG)]


class BLENDFUNCTION(Structure):
    _fields_ = [("BlendOp", wintypes.BYTE), ("BlendFlags", wintypes.BYTE),
                ("SourceConstantAlpha", wintypes.BYTE), ("AlphaFormat", wintypes.BYTE)]


class BITMAPINFOHEADER(Structure):
    _fields_ = [
        ("biSize", wintypes.DWORD), ("biWidth", wintypes.LONG), ("biHeight", wintypes.LONG),
        ("biPlanes", wintypes.WORD), ("biBitCount", wintypes.WORD), ("biCompression", wintypes.DWORD),
        ("biSizeImage", wintypes.DWORD), ("biXPelsPerMeter", wintypes.LONG), ("biYPelsPerMeter", wintypes.LONG),
        ("biClrUsed", wintypes.DWORD), ("biClrImportant", wintypes.DWORD)
    ]


# Handles are pointer sized; without explicit signatures ctypes truncates them to int on 64-bit Python.
user32.GetDC.argtypes = [wintypes.HWND]
user32.GetDC.restype = wintypes.HDC
user32.ReleaseDC.argtypes = [wintypes.HWND, wintypes.HDC]
user32.UpdateLayeredWindow.argtypes = [
    wintypes.HWND, wintypes.HDC, ctypes.POINTER(POINT), ctypes.POINTER(SIZE),
    wintypes.HDC, ctypes.POINTER(POINT), wintypes.COLORREF, ctypes.POINTER(BLENDFUNCTION), wintypes.DWORD
]
user32.UpdateLayeredWindow.restype = wintypes.BOOL
gdi32.CreateCompatibleDC.argtypes = [wintypes.HDC]
gdi32.CreateCompatibleDC.restype = wintypes.HDC
gdi32.CreateDIBSection.argtypes = [
    wintypes.HDC, ctypes.POINTER(BITMAPINFOHEADER), wintypes.UINT,
    ctypes.POINTER(c_void_p), wintypes.HANDLE, wintypes.DWORD
]
gdi32.CreateDIBSection.restype = wintypes.HBITMAP
gdi32.SelectObject.argtypes = [wintypes.HDC, wintypes.HGDIOBJ]
gdi32.SelectObject.restype = wintypes.HGDIOBJ
gdi32.DeleteObject.argtypes = [wintypes.HGDIOBJ]
gdi32.DeleteDC.argtypes = [wintypes.HDC]


def write_premultiplied_bgra(surface, out):
    """
    Copies a per-pixel-alpha surface into out (h x w x 4, uint8) as
    premultiplied BGRA, the layout UpdateLayeredWindow reads.
    """
    width, height = surface.get_size()
    rgba = np.frombuffer(pygame.image.tostring(surface, "RGBA_PREMULT"), dtype=np.uint8)
    rgba = rgba.reshape(height, width, 4)
    out[..., 0] = rgba[..., 2]
    out[..., 1] = rgba[..., 1]
    out[..., 2] = rgba[..., 0]
    out[..., 3] = rgba[..., 3]


class LayeredWindowPresenter:
    """
    Pushes composed frames to a layered window.

    The overlay sends a full-screen frame every tick, so the memory DC and the
    DIB section are created once per frame size and the pixels are written
    straight into the DIB through a numpy view.
    """

    def __init__(self, hwnd, window_x=0, window_y=0):
        self.hwnd = hwnd
        self.origin = POINT(window_x, window_y)
        self.size = None
        self._screen_dc = user32.GetDC(None)
        self._mem_dc = gdi32.CreateCompatibleDC(self._screen_dc)
        self._bitmap = None
        self._old_bitmap = None
        self._pixels = None
        self._blend = BLENDFUNCTION(AC_SRC_OVER, 0, 255, AC_SRC_ALPHA)

    @property
    def closed(self):
        return self._mem_dc is None

    def _allocate(self, width, height):
        self._free_bitmap()

        header = BITMAPINFOHEADER()
        header.biSize = ctypes.sizeof(BITMAPINFOHEADER)
        header.biWidth = width
        header.biHeight = -height  # top-down rows, same order as pygame
        header.biPlanes = 1
        header.biBitCount = 32
        header.biCompression = BI_RGB

        bits = c_void_p()
        bitmap = gdi32.CreateDIBSection(self._screen_dc, byref(header), DIB_RGB_COLORS, byref(bits), None, 0)
        if not bitmap:
            raise ctypes.WinError()

        self._old_bitmap = gdi32.SelectObject(self._mem_dc, bitmap)
        self._bitmap = bitmap
        buffer = (ctypes.c_uint8 * (width * height * 4)).from_address(bits.value)
        self._pixels = np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, 4)
        self.size = (width, height)

    def _free_bitmap(self):
        if self._bitmap is None:
            return
        gdi32.SelectObject(self._mem_dc, self._old_bitmap)
        gdi32.DeleteObject(self._bitmap)
        self._bitmap = None
        self._old_bitmap = None
        self._pixels = None
        self.size = None

    def present(self, surface):
        if self.closed:
            return
        if surface.get_size() != self.size:
            self._allocate(*surface.get_size())

        write_premultiplied_bgra(surface, self._pixels)
        user32.UpdateLayeredWindow(
            self.hwnd, self._screen_dc, byref(self.origin), byref(SIZE(*self.size)),
            self._mem_dc, byref(POINT(0, 0)), 0, byref(self._blend), ULW_ALPHA
        )

    def close(self):
        """Releases the GDI objects. Safe to call more than once."""
        if self.closed:
            return
        self._free_bitmap()
        gdi32.DeleteDC(self._mem_dc)
        user32.ReleaseDC(None, self._screen_dc)
        self._mem_dc = None
        self._screen_dc = None


def setup_overlay_window(hwnd, width, height, start_x=0, start_y=0):
    """
    Makes the window layered, top-most, hidden from the taskbar and
    transparent to mouse input so the desktop underneath stays usable.
    """
    ex_style = win32gui.GetWindowLong(hwnd, win32con.GWL_EXSTYLE)

    new_ex_style = (ex_style
                    | win32con.WS_EX_LAYERED
                    | win32con.WS_EX_TOPMOST
                    | win32con.WS_EX_TOOLWINDOW
                    | win32con.WS_EX_NOACTIVATE
                    | win32con.WS_EX_TRANSPARENT)

    win32gui.SetWindowLong(hwnd, win32con.GWL_EXSTYLE, new_ex_style)

    win32gui.SetWindowPos(
        hwnd,
        win32con.HWND_TOPMOST,
        start_x, start_y,
        width, height,
        win32con.SWP_SHOWWINDOW | win32con.SWP_NOACTIVATE
    )
    print("DEBUG: Overlay window configured: top-most, click-through, hidden from taskbar", flush=True)


def get_dpi_scale():
    """Returns the system DPI scale factor (1.0 at 96 DPI)."""
    try:
        return user32.GetDpiForSystem() / USER_DEFAULT_DPI
    except AttributeError:
        # GetDpiForSystem needs Windows 10 1607+
        return 1.0


def get_primary_screen_size():
    """Width and height of the primary screen in pixels."""
    return (user32.GetSystemMetrics(win32con.SM_CXSCREEN),
            user32.GetSystemMetrics(win32con.SM_CYSCREEN))
