"""
Edit an image file from the command line with Gemini.

Usage:
    python scripts/edit_image.py photo.jpg --prompt "make it a watercolor"
    python scripts/edit_image.py photo.png --prompt "remove the car" --output out.png

Reads GEMINI_API_KEY (or API_KEY) from the environment or backend/.env.
"""

import argparse
import asyncio
import base64
import mimetypes
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / '.env')

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import get_settings
from services.editor_session import EditorSession
from services.gemini_service import GeminiImageService


def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_edited.png")


async def edit_image_file(input_path: Path, prompt: str, output_path: Path, mime_type: str, model: Optional[str] = None) -> int:
    """Run one edit and write the decoded result; returns the exit code"""
    settings = get_settings()
    if model:
        settings.GEMINI_MODEL = model

    session = EditorSession(lambda: GeminiImageService.from_settings(settings))
    session.prompt = prompt

    with open(input_path, 'rb') as f:
        await session.select_image(f, mime_type, filename=input_path.name)

    if session.error:
        print(f"❌ {session.error}")
        return 1

    print(f"🔍 Sending {input_path.name} ({mime_type}) to {settings.GEMINI_MODEL}...")
    await session.generate()

    if session.error or not session.generated_image:
        print(f"❌ {session.error}")
        return 1

    encoded = session.generated_image.split(',', 1)[1]
    output_path.write_bytes(base64.b64decode(encoded))
    print(f"✅ Saved edited image to {output_path}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Edit an image with a natural-language instruction"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Path to the source image"
    )
    parser.add_argument(
        "--prompt",
        required=True,
        help="Description of the desired edit"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the result (default: <input>_edited.png)"
    )
    parser.add_argument(
        "--mime-type",
        default=None,
        help="Media type of the input (default: guessed from the file name)"
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Gemini model to use (default: GEMINI_MODEL setting)"
    )

    args = parser.parse_args()

    if not args.input.is_file():
        print(f"❌ Error: {args.input} does not exist")
        sys.exit(1)

    mime_type = args.mime_type or mimetypes.guess_type(args.input.name)[0] or "image/png"
    output_path = args.output or default_output_path(args.input)

    sys.exit(asyncio.run(edit_image_file(
        args.input,
        args.prompt,
        output_path,
        mime_type,
        model=args.model
    )))


if __name__ == "__main__":
    main()
