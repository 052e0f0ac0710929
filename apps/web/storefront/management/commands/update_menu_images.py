"""
Set menu item images from a JSON mapping of item name to image URL.

Usage:
    python apps/web/manage.py update_menu_images joes-pizza images.json

images.json:
    {"Margherita": "https://images.example.com/margherita.jpg", ...}
"""

import json
import logging
from pathlib import Path
from typing import Any

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.core.validators import URLValidator

from apps.web.core.models import Restaurant
from apps.web.storefront.models import MenuItem

logger = logging.getLogger(__name__)


def load_image_mapping(path: Path) -> dict[str, str]:
    """
    Read {item name: image url} from a JSON file.

    Raises:
        CommandError: If the file is unreadable or not a name -> URL object
    """
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise CommandError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CommandError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise CommandError(f"{path} must map item names to image URLs")

    validate_url = URLValidator()
    for name, url in data.items():
        try:
            validate_url(url)
        except ValidationError as e:
            raise CommandError(f"Invalid image URL for {name!r}: {url}") from e

    return data


class Command(BaseCommand):
    help = "Set menu item image URLs by item name"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument("slug", help="Restaurant slug")
        parser.add_argument("mapping", type=Path, help="JSON file: {name: url}")

    def handle(self, *_args: Any, **options: Any) -> None:
        try:
            restaurant = Restaurant.objects.get(slug=options["slug"])
        except Restaurant.DoesNotExist as e:
            raise CommandError(f"Unknown restaurant: {options['slug']}") from e

        mapping = load_image_mapping(options["mapping"])

        self.stdout.write("Updating menu item images...")

        updated = 0
        for name, image_url in mapping.items():
            count = (
                MenuItem.objects.for_restaurant(restaurant)
                .filter(name=name)
                .update(image_url=image_url)
            )
            if count:
                updated += count
                self.stdout.write(self.style.SUCCESS(f"Updated {name}"))
            else:
                self.stdout.write(self.style.WARNING(f"Not found: {name}"))
                logger.warning(
                    "No menu item named %r for restaurant %s", name, restaurant.slug
                )

        self.stdout.write(f"Done: {updated} item(s) updated")
