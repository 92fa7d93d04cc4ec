"""Tests for the group routes and GroupService."""

from __future__ import annotations

import unittest

from tests.conftest import make_mock_db
from tests.helpers import ALICE, BOB, build_app, headers_for

RUN_CLUB = {
    "groupName": "Run Club",
    "description": "Easy miles before work",
    "location": "Riverside Park",
    "maxMembers": 10,
    "formattedDate": "2024-05-01",
}


class GroupRoutesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_mock_db()
        self.app = build_app(self.db)
        self.client = self.app.test_client()

    def create_group(self, user=ALICE, **overrides) -> str:
        response = self.client.post(
            "/createGroup", json={**RUN_CLUB, **overrides}, headers=headers_for(user)
        )
        self.assertEqual(response.status_code, 201)
        return response.json["data"]["id"]

    def join_records(self, group_id: str) -> list[dict]:
        return [
            doc.to_dict()
            for doc in self.db.collection("joinedGroups").stream()
            if doc.exists and doc.to_dict().get("groupId") == group_id
        ]

    def test_create_requires_identity(self) -> None:
        response = self.client.post("/createGroup", json=RUN_CLUB)
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json["success"])

    def test_create_requires_fields(self) -> None:
        body = {k: v for k, v in RUN_CLUB.items() if k != "location"}
        response = self.client.post(
            "/createGroup", json=body, headers=headers_for(ALICE)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json["error"], "location is required")

    def test_create_ignores_client_ownership_fields(self) -> None:
        group_id = self.create_group(
            userEmail="mallory@example.com", userId="uid-mallory"
        )
        group = self.client.get(f"/groups/{group_id}").json
        self.assertEqual(group["userEmail"], ALICE["email"])
        self.assertEqual(group["userId"], ALICE["uid"])

    def test_create_fills_defaults(self) -> None:
        group_id = self.create_group()
        group = self.client.get(f"/groups/{group_id}").json
        self.assertEqual(group["category"], "General")
        self.assertEqual(group["creatorName"], "alice")
        self.assertTrue(group["creatorImage"])
        self.assertTrue(group["createdAt"])
        self.assertEqual(group["id"], group_id)
        self.assertEqual(group["_id"], group_id)

    def test_only_creator_may_update(self) -> None:
        group_id = self.create_group()

        response = self.client.get(f"/groups/{group_id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json["userEmail"], ALICE["email"])

        response = self.client.put(
            f"/groups/{group_id}",
            json={"groupName": "Bob's Club"},
            headers=headers_for(BOB),
        )
        self.assertEqual(response.status_code, 403)

        response = self.client.put(
            f"/groups/{group_id}",
            json={"groupName": "Morning Run Club", "userEmail": BOB["email"]},
            headers=headers_for(ALICE),
        )
        self.assertEqual(response.status_code, 200)

        group = self.client.get(f"/groups/{group_id}").json
        self.assertEqual(group["groupName"], "Morning Run Club")
        self.assertEqual(group["userEmail"], ALICE["email"])
        self.assertIn("updatedAt", group)

    def test_update_keeps_creator_display_fields(self) -> None:
        group_id = self.create_group(creatorName="Alice A.")
        self.client.put(
            f"/groups/{group_id}",
            json={"creatorName": "Someone Else", "createdAt": "1999-01-01"},
            headers=headers_for(ALICE),
        )
        group = self.client.get(f"/groups/{group_id}").json
        self.assertEqual(group["creatorName"], "Alice A.")
        self.assertNotEqual(group["createdAt"], "1999-01-01")

    def test_get_missing_group(self) -> None:
        response = self.client.get("/groups/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json["error"], "Group not found")

    def test_malformed_group_id(self) -> None:
        response = self.client.get("/groups/__reserved__")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json["error"], "Invalid group ID format")

    def test_list_groups_filtered_by_creator(self) -> None:
        self.create_group()
        self.create_group(user=BOB, groupName="Book Club")

        everything = self.client.get("/groups").json
        self.assertEqual(len(everything), 2)

        mine = self.client.get("/groups", query_string={"userEmail": BOB["email"]})
        self.assertEqual([g["groupName"] for g in mine.json], ["Book Club"])

    def test_groups_by_ids_preserves_order(self) -> None:
        first = self.create_group()
        second = self.create_group(groupName="Book Club")

        response = self.client.post(
            "/groupsByIds", json={"ids": [second, "missing", first]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([g["id"] for g in response.json], [second, first])

    def test_groups_by_ids_validation(self) -> None:
        response = self.client.post("/groupsByIds", json={"ids": []})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json["error"], "Invalid group IDs")

        response = self.client.post("/groupsByIds", json={"ids": ["ok", "a/b"]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json["invalidIds"], ["a/b"])

    def test_join_then_join_again(self) -> None:
        group_id = self.create_group()

        response = self.client.post(
            "/joinGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )
        self.assertEqual(response.status_code, 201)

        response = self.client.post(
            "/joinGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(len(self.join_records(group_id)), 1)

    def test_join_validation(self) -> None:
        response = self.client.post("/joinGroup", json={}, headers=headers_for(BOB))
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/joinGroup", json={"groupId": "nope"}, headers=headers_for(BOB)
        )
        self.assertEqual(response.status_code, 404)

    def test_leave_then_leave_again(self) -> None:
        group_id = self.create_group()
        self.client.post(
            "/joinGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )

        response = self.client.post(
            "/leaveGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )
        self.assertEqual(response.status_code, 200)

        response = self.client.post(
            "/leaveGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )
        self.assertEqual(response.status_code, 404)

    def test_leave_only_removes_own_membership(self) -> None:
        group_id = self.create_group()
        for user in (ALICE, BOB):
            self.client.post(
                "/joinGroup", json={"groupId": group_id}, headers=headers_for(user)
            )

        self.client.post(
            "/leaveGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )
        remaining = self.join_records(group_id)
        self.assertEqual([r["userEmail"] for r in remaining], [ALICE["email"]])

    def test_user_joined_groups(self) -> None:
        group_id = self.create_group()
        self.client.post(
            "/joinGroup", json={"groupId": group_id}, headers=headers_for(BOB)
        )

        response = self.client.get("/user-joined-groups", headers=headers_for(BOB))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["groupId"] for r in response.json], [group_id])

        # The query string cannot name somebody else
        response = self.client.get(
            "/user-joined-groups",
            query_string={"email": BOB["email"]},
            headers=headers_for(ALICE),
        )
        self.assertEqual(response.json, [])

    def test_user_joined_groups_requires_identity(self) -> None:
        response = self.client.get(
            "/user-joined-groups", query_string={"email": BOB["email"]}
        )
        self.assertEqual(response.status_code, 401)

    def test_update_rejects_field_path_keys(self) -> None:
        group_id = self.create_group()

        response = self.client.put(
            f"/groups/{group_id}",
            json={"`userEmail`": "mallory@example.com", "userId.x": 1},
            headers=headers_for(ALICE),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            sorted(response.json["invalidFields"]), ["`userEmail`", "userId.x"]
        )

        group = self.client.get(f"/groups/{group_id}").json
        self.assertEqual(group["userEmail"], ALICE["email"])
        self.assertEqual(group["userId"], ALICE["uid"])
        self.assertNotIn("updatedAt", group)

    def test_delete_cascades_to_join_records(self) -> None:
        group_id = self.create_group()
        other_id = self.create_group(groupName="Book Club")
        for gid in (group_id, other_id):
            self.client.post(
                "/joinGroup", json={"groupId": gid}, headers=headers_for(BOB)
            )

        response = self.client.delete(f"/groups/{group_id}", headers=headers_for(BOB))
        self.assertEqual(response.status_code, 403)

        response = self.client.delete(
            f"/groups/{group_id}", headers=headers_for(ALICE)
        )
        self.assertEqual(response.status_code, 200)

        self.assertEqual(self.client.get(f"/groups/{group_id}").status_code, 404)
        self.assertEqual(self.join_records(group_id), [])
        self.assertEqual(len(self.join_records(other_id)), 1)


if __name__ == "__main__":
    unittest.main()
