import json
import uuid

from django.core.management.base import BaseCommand, CommandError

from repetition.services.queue import add_card


class Command(BaseCommand):
    help = "Add the card ids listed in a JSON file to a user's new-card queue, in file order."

    def add_arguments(self, parser):
        parser.add_argument("--user", required=True, type=uuid.UUID, help="User id")
        parser.add_argument("--file", required=True, help="JSON file holding a list of card ids")

    def handle(self, *args, **options):
        user_id = uuid.UUID(str(options["user"]))
        file_name = options["file"]

        try:
            with open(file_name) as json_file:
                card_ids = [uuid.UUID(str(value)) for value in json.load(json_file)]
        except (OSError, ValueError, TypeError) as e:
            raise CommandError(f"Error loading card ids from {file_name}: {e}") from e

        for card_id in card_ids:
            state, _ = add_card(user_id, card_id)
            self.stdout.write(f"{card_id} queue={state.queue}")

        self.stdout.write(
            self.style.SUCCESS(f"{len(card_ids)} cards loaded for {user_id} from {file_name}")
        )
