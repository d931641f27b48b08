import unittest

from sqlmodel import Session, select

from tierboard.models import CharacterRanking
from tierboard.services.rankings import update_ranking
from tests.support import ApiTestCase


class RankingApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register("alice")
        self.bob = self.register("bob")
        self.board = self.create_board(self.alice, tags=["tv", "anime"])
        self.bob.get(f"/boards/access/{self.board['accessKey']}")
        self.goku = self.add_character(self.alice, self.board["id"])

    def rank(self, client, tier, character=None, **extra):
        character = character or self.goku
        return client.post(
            f"/boards/{self.board['id']}/characters/{character['id']}/ranking",
            json={"tier": tier, **extra},
        )

    def test_two_users_rank_independently(self):
        self.assertEqual(self.rank(self.alice, "S").status_code, 200)
        response = self.rank(self.bob, "A")
        self.assertEqual(response.status_code, 200)

        rankings = response.json()["rankings"]
        self.assertEqual(
            [(r["userId"], r["tier"]) for r in rankings], [("alice", "S"), ("bob", "A")]
        )

    def test_rerank_replaces_in_place(self):
        self.rank(self.alice, "S")
        self.rank(self.bob, "A")
        self.rank(self.alice, "B")
        response = self.rank(self.alice, "D")

        rankings = response.json()["rankings"]
        self.assertEqual(
            [(r["userId"], r["tier"]) for r in rankings], [("alice", "D"), ("bob", "A")]
        )

        board = self.alice.get(f"/boards/{self.board['id']}").json()
        stored = board["characters"][self.goku["id"]]["rankings"]
        self.assertEqual([r["userId"] for r in stored].count("alice"), 1)

    def test_invalid_tier(self):
        for tier in ("Z", "s", "", None):
            response = self.rank(self.alice, tier)
            self.assertEqual(response.status_code, 400, tier)
            self.assertIn("error", response.json())
        board = self.alice.get(f"/boards/{self.board['id']}").json()
        self.assertEqual(board["characters"][self.goku["id"]]["rankings"], [])

    def test_body_user_id_is_ignored(self):
        response = self.rank(self.bob, "C", userId="alice")
        rankings = response.json()["rankings"]
        self.assertEqual([(r["userId"], r["tier"]) for r in rankings], [("bob", "C")])

    def test_missing_board_or_character(self):
        missing_character = self.alice.post(
            f"/boards/{self.board['id']}/characters/nope/ranking", json={"tier": "S"}
        )
        self.assertEqual(missing_character.status_code, 404)
        self.assertEqual(missing_character.json(), {"error": "Character not found"})

        missing_board = self.alice.post(
            f"/boards/nope/characters/{self.goku['id']}/ranking", json={"tier": "S"}
        )
        self.assertEqual(missing_board.status_code, 404)

    def test_character_from_another_board(self):
        other = self.create_board(self.alice, "Other")
        vegeta = self.add_character(self.alice, other["id"], name="Vegeta")
        response = self.rank(self.alice, "S", character=vegeta)
        self.assertEqual(response.status_code, 404)

    def test_non_member_cannot_rank(self):
        carol = self.register("carol")
        self.assertEqual(self.rank(carol, "S").status_code, 403)


class TierViewTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register("alice")
        self.bob = self.register("bob")
        self.board = self.create_board(self.alice)
        self.bob.get(f"/boards/access/{self.board['accessKey']}")
        self.goku = self.add_character(self.alice, self.board["id"], tags=["saiyan"])
        self.krillin = self.add_character(
            self.alice, self.board["id"], name="Krillin", tags=["human"]
        )
        self.alice.post(
            f"/boards/{self.board['id']}/characters/{self.goku['id']}/ranking",
            json={"tier": "S"},
        )

    def tiers(self, client, **params):
        response = client.get(f"/boards/{self.board['id']}/tiers", params=params)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_unranked_is_separate_from_lowest_tier(self):
        view = self.tiers(self.alice)
        self.assertEqual(list(view["tiers"]), ["S", "A", "B", "C", "D"])
        self.assertEqual([c["name"] for c in view["tiers"]["S"]], ["Goku"])
        self.assertEqual(view["tiers"]["D"], [])
        self.assertEqual([c["name"] for c in view["unranked"]], ["Krillin"])

    def test_each_viewer_sees_own_overlay(self):
        view = self.tiers(self.bob)
        self.assertTrue(all(not chars for chars in view["tiers"].values()))
        self.assertEqual(len(view["unranked"]), 2)

    def test_tag_filter(self):
        view = self.tiers(self.alice, tags=["human"])
        self.assertEqual(view["tiers"]["S"], [])
        self.assertEqual([c["name"] for c in view["unranked"]], ["Krillin"])

    def test_requires_access(self):
        carol = self.register("carol")
        response = carol.get(f"/boards/{self.board['id']}/tiers")
        self.assertEqual(response.status_code, 403)


class RankingServiceTests(ApiTestCase):
    def test_upsert_keeps_one_row_per_user(self):
        alice = self.register("alice")
        board = self.create_board(alice)
        character = self.add_character(alice, board["id"])

        with Session(self.engine) as session:
            for tier in ("S", "A", "B", "C", "D"):
                _, rankings = update_ranking(
                    session, board["id"], character["id"], tier, "alice"
                )
            self.assertEqual([(r.user_id, r.tier) for r in rankings], [("alice", "D")])

            rows = session.exec(
                select(CharacterRanking).where(
                    CharacterRanking.character_id == character["id"]
                )
            ).all()
            self.assertEqual(len(rows), 1)


if __name__ == "__main__":
    unittest.main()
