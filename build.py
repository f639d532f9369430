import subprocess
import sys
from pathlib import Path

from PIL import Image, ImageDraw

ICON_PATH = Path("app.ico")


def create_icon():
    """Draw a small staggered-columns icon and save it as app.ico."""
    print("Generating app.ico...")
    try:
        size = 256
        img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=40, fill=(24, 24, 27, 255))

        # Three columns of cards with uneven heights.
        cards = [
            [(28, 28, 92, 120), (28, 132, 92, 228)],
            [(100, 28, 156, 92), (100, 104, 156, 228)],
            [(164, 28, 228, 160), (164, 172, 228, 228)],
        ]
        for column in cards:
            for box in column:
                draw.rounded_rectangle(box, radius=10, fill=(244, 244, 245, 255))

        img.save(ICON_PATH, format="ICO", sizes=[(256, 256), (128, 128), (64, 64), (32, 32), (16, 16)])
        print("Successfully created app.ico")
        return True
    except OSError as e:
        print(f"Failed to create icon: {e}")
        return False


def build_exe():
    print("Building standalone viewer with PyInstaller...")
    cmd = [
        "pyinstaller",
        "--noconfirm",
        "--onedir",
        "--windowed",
        f"--icon={ICON_PATH}",
        "--name=Waterfall",
        "native/waterfall_app/main.py",
    ]

    print(f"Running command: {' '.join(cmd)}")
    subprocess.run(cmd, check=True)
    print("Build successful. Output in dist/Waterfall")


if __name__ == "__main__":
    if create_icon():
        build_exe()
    else:
        print("Build aborted due to icon generation failure.")
        sys.exit(1)
