import json

import pytest
from django.core.management import CommandError, call_command

from catalog.catalog import CardCatalog
from catalog.models import Card, Deck, Enrollment

LEARNER = "6f1c1c8e-3f39-4f5e-9d8a-0a6a2b0d3c11"


@pytest.mark.django_db
class TestInitData:
    def test_loads_bundled_decks(self):
        call_command("init_data")

        assert Deck.objects.count() == 2
        assert Card.objects.count() == 7
        assert Enrollment.objects.filter(user_id=LEARNER).count() == 2
        assert len(CardCatalog().card_ids_for_user(LEARNER)) == 7

    def test_replaces_existing_catalog(self, tmp_path, make_deck):
        make_deck(size=4)
        path = tmp_path / "decks.json"
        path.write_text(json.dumps({"decks": [{"title": "Tiny", "cards": [{"front": "a", "back": "b"}]}]}))

        call_command("init_data", file=str(path))

        assert list(Deck.objects.values_list("title", flat=True)) == ["Tiny"]
        assert Card.objects.get().card_order == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError):
            call_command("init_data", file=str(tmp_path / "absent.json"))

    def test_seeding_has_no_http_route(self, client):
        resp = client.post("/catalog/init", data={"file": "/etc/hosts"}, content_type="application/json")
        assert resp.status_code == 404

    def test_deck_filter(self):
        call_command("init_data")
        deck = Deck.objects.get(title="Chemical symbols")
        assert len(CardCatalog().card_ids_for_user(LEARNER, deck_id=deck.pk)) == 3

    def test_user_has_card_only_for_enrolled_decks(self, make_deck):
        call_command("init_data")
        other = make_deck(size=1).cards.get()
        enrolled = Card.objects.filter(deck__title="Capitals").first()

        catalog = CardCatalog()
        assert catalog.user_has_card(LEARNER, enrolled.pk)
        assert not catalog.user_has_card(LEARNER, other.pk)
