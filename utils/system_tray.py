import pystray
from PIL import Image, ImageDraw

from config import APP_NAME
from core.capture_service import CaptureMode
from utils.logger import logger


def _icon_image(use_app_icon: bool) -> Image.Image:
    if use_app_icon:
        image = Image.new('RGBA', (64, 64), color=(0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        draw.rounded_rectangle((4, 12, 60, 52), radius=8, fill='#3478F6')
        draw.ellipse((22, 22, 42, 42), fill='white')
        return image
    image = Image.new('RGB', (64, 64), color='white')
    draw = ImageDraw.Draw(image)
    draw.text((22, 24), "S", fill='black')
    return image


def create_tray_icon(app, on_quit=None):
    """
    Create the menu-bar icon.

    `app` needs capture(mode), record(seconds) and upload_last() methods;
    menu callbacks run on pystray's thread and must only post work.
    """
    def _capture(mode):
        return lambda icon, item: app.capture(mode)

    def _quit(icon, item):
        icon.stop()
        if on_quit:
            on_quit()

    menu = pystray.Menu(
        pystray.MenuItem("Capture Region", _capture(CaptureMode.REGION)),
        pystray.MenuItem("Capture Window", _capture(CaptureMode.WINDOW)),
        pystray.MenuItem("Capture Screen", _capture(CaptureMode.SCREEN)),
        pystray.MenuItem("Record Screen (10s)", lambda icon, item: app.record(10)),
        pystray.Menu.SEPARATOR,
        pystray.MenuItem("Upload Last Capture", lambda icon, item: app.upload_last()),
        pystray.MenuItem("Quit", _quit),
    )

    use_app_icon = app.settings.get("menuBarAppIcon")
    logger.debug(f"Creating tray icon (app icon: {use_app_icon})")
    return pystray.Icon(APP_NAME, _icon_image(use_app_icon), APP_NAME, menu)
