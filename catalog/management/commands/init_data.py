import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from catalog.models import Card, Deck, Enrollment


class Command(BaseCommand):
    help = "Replace the flashcard catalog with decks loaded from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="sample_decks.json", help="JSON file name to load decks from"
        )

    def handle(self, *args, **options):
        file_name = options.get("file") or "sample_decks.json"
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path) as json_file:
                data = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data: {e}") from e

        with transaction.atomic():
            Deck.objects.all().delete()
            self.stdout.write(self.style.SUCCESS("All existing decks have been deleted"))

            card_count = 0
            for deck_data in data.get("decks", []):
                deck = Deck.objects.create(title=deck_data["title"])
                for order, card in enumerate(deck_data.get("cards", [])):
                    Card.objects.create(
                        deck=deck, front=card["front"], back=card["back"], card_order=order
                    )
                    card_count += 1
                for user_id in deck_data.get("learners", []):
                    Enrollment.objects.create(user_id=user_id, deck=deck)

        self.stdout.write(
            self.style.SUCCESS(f"Loaded {card_count} cards from {file_name}")
        )
