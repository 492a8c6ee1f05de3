"""Generate the window icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

ICON_SIZE = 64
_BAND_HEIGHT = 16
_BAND_COLOR = "#0078D4"


def _fit_font(draw: ImageDraw.ImageDraw, text: str, max_w: int, max_h: int):
    """Largest truetype font that fits, or Pillow's default bitmap font."""
    font_size = 60
    while font_size > 8:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= max_w and bbox[3] - bbox[1] <= max_h:
            return font
        font_size -= 2
    return ImageFont.load_default()


def create_icon_image(today: date | None = None) -> Image.Image:
    """Return a 64×64 RGBA tear-off calendar page showing today's day of month."""
    today = today or date.today()
    size = ICON_SIZE
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)

    # Coloured binding strip across the top
    draw.rectangle((0, 0, size - 1, _BAND_HEIGHT - 1), fill=_BAND_COLOR)
    draw.rectangle((0, 0, size - 1, size - 1), outline="#333333")

    text = str(today.day)
    body_h = size - _BAND_HEIGHT
    font = _fit_font(draw, text, size - 8, body_h - 6)

    # Centre the visible pixels inside the body (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = _BAND_HEIGHT + (body_h - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    return img
