#!/usr/bin/env python3
"""Ad hoc recipe generation from the command line.

Run the generation pipeline directly without starting the API server.

Usage:
    python query.py "onion, chicken thigh"
    python query.py '["卵", "ご飯", "ねぎ"]'
    python query.py --preferences "spicy, 20 minutes" "tofu, rice"
    python query.py --image images/fridge.jpg "eggs"  # With an ingredient photo
    python query.py --debug "onion, chicken"  # Show full JSON result

Features:
- Same normalization, retry, validation and enhancement as the HTTP API
- Recipe rendered as markdown with rich
- Debug mode to display the full result including quality info
"""

import asyncio
import sys
import uuid
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from src.models.errors import GenerationError
from src.models.models import GenerationResult, ImageAttachment
from src.pipeline.generator import RecipeGenerator
from src.pipeline.normalize_input import build_generation_request
from src.utils.images import detect_mime_type
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--preferences TEXT] [--image PATH]... "<ingredients>"'


def load_image(image_path: str) -> ImageAttachment:
    """Read an image file into an attachment, sniffing its MIME type."""
    image_file = Path(image_path)
    if not image_file.exists():
        console.print(f"[red]✗ Error: Image file not found: {image_path}[/red]")
        sys.exit(1)
    data = image_file.read_bytes()
    logger.info(f"✓ Loaded image: {image_file.name} ({len(data) / 1024:.1f} KB)")
    return ImageAttachment(data=data, mime_type=detect_mime_type(data), filename=image_file.name)


def render_recipe(result: GenerationResult) -> str:
    """Format a generated recipe as markdown."""
    recipe = result.recipe
    lines = [f"# {recipe.title}", "", recipe.description, ""]

    details = []
    if recipe.cooking_time is not None:
        details.append(f"**Time:** {recipe.cooking_time} min")
    if recipe.servings is not None:
        details.append(f"**Servings:** {recipe.servings}")
    if details:
        lines += [" · ".join(details), ""]

    lines += ["## Ingredients", ""]
    lines += [f"- {ingredient}" for ingredient in recipe.ingredients]
    lines += ["", "## Instructions", ""]
    lines += recipe.instructions

    if result.quality_info.has_issues:
        lines += ["", "## Quality Notes", ""]
        lines += [f"- {issue}" for issue in result.quality_info.issues]

    return "\n".join(lines)


def run_query(
    ingredients: str,
    preferences: Optional[str] = None,
    image_paths: Optional[list[str]] = None,
    debug: bool = False,
) -> None:
    """Generate one recipe and print it.

    Args:
        ingredients: Comma-separated text or a JSON array string.
        preferences: Optional free-text preference.
        image_paths: Optional image files to attach.
        debug: If True, display the full JSON result.
    """
    request_id = str(uuid.uuid4())
    try:
        images = [load_image(path) for path in image_paths or []]
        request = build_generation_request(ingredients, preferences, images)
        generator = RecipeGenerator.from_config()

        logger.info(f"Generating recipe for: {', '.join(request.ingredients)}", extra={"request_id": request_id})
        result = asyncio.run(generator.generate(request, request_id=request_id))

        console.print()
        if debug:
            console.print("[bold cyan]Debug Mode: Full Result[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print_json(data=result.model_dump(mode="json", by_alias=True))
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        console.print(Markdown(render_recipe(result)))

    except GenerationError as e:
        console.print(f"[red]✗ {e.code.value}: {e.message}[/red]")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]✗ Configuration error: {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print('  python query.py "onion, chicken thigh"')
        print('  python query.py --preferences "spicy" "tofu, rice"')
        print('  python query.py --image images/fridge.jpg --debug "eggs"')
        sys.exit(1)

    debug_mode = False
    preferences_text = None
    images_to_load = []
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag in ("--image", "--preferences"):
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            if flag == "--image":
                images_to_load.append(sys.argv[argv_start])
            else:
                preferences_text = sys.argv[argv_start]
            argv_start += 1
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No ingredients provided")
        print(USAGE)
        sys.exit(1)

    # Join remaining arguments so unquoted ingredient lists still work
    ingredient_text = " ".join(sys.argv[argv_start:])

    run_query(ingredient_text, preferences=preferences_text, image_paths=images_to_load, debug=debug_mode)
