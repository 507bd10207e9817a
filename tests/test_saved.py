"""
Test Case Suite: Saved Listings Module
Test ID Range: TC-070 to TC-076

Validates bookmarking listings: idempotent save and remove, per-listing
status and the caller's saved list.
"""

import pytest
from httpx import AsyncClient


class TestSaveListing:
    """
    Test Case TC-070: Save a Listing Twice
    Description: Saving again returns the existing bookmark
    Expected Result: Same saved id, a single row in the saved list
    """
    @pytest.mark.asyncio
    async def test_tc070_save_is_idempotent(self, client: AsyncClient, regular_user, owner_user, make_listing):
        """TC-070: Save twice"""
        user, headers = regular_user
        owner, _ = owner_user
        listing = await make_listing(owner)

        first = await client.post(f"/api/saved/{listing.id}", headers=headers)
        assert first.status_code == 200
        assert first.json()["userId"] == user.id
        assert first.json()["listingId"] == listing.id

        second = await client.post(f"/api/saved/{listing.id}", headers=headers)
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]

        response = await client.get("/api/saved", headers=headers)
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_tc071_save_missing_listing(self, client: AsyncClient, regular_user):
        """TC-071: Saving an unknown listing returns 404"""
        _, headers = regular_user
        response = await client.post("/api/saved/missing", headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_tc072_save_requires_login(self, client: AsyncClient, owner_user, make_listing):
        """TC-072: Anonymous save is rejected"""
        owner, _ = owner_user
        listing = await make_listing(owner)
        response = await client.post(f"/api/saved/{listing.id}")
        assert response.status_code == 401


class TestSavedStatus:
    @pytest.mark.asyncio
    async def test_tc073_status(self, client: AsyncClient, regular_user, owner_user, make_listing):
        """TC-073: Status is false for anonymous callers and tracks the caller's bookmark"""
        _, headers = regular_user
        owner, _ = owner_user
        listing = await make_listing(owner)

        response = await client.get(f"/api/saved/{listing.id}")
        assert response.status_code == 200
        assert response.json() == {"saved": False}

        response = await client.get(f"/api/saved/{listing.id}", headers=headers)
        assert response.json() == {"saved": False}

        await client.post(f"/api/saved/{listing.id}", headers=headers)
        response = await client.get(f"/api/saved/{listing.id}", headers=headers)
        assert response.json() == {"saved": True}


class TestSavedList:
    """
    Test Case TC-074: Saved List Carries Listings
    Description: Each bookmark embeds the shaped listing with its owner
    Expected Result: Newest bookmark first, listing fields present
    """
    @pytest.mark.asyncio
    async def test_tc074_saved_list(self, client: AsyncClient, regular_user, owner_user, make_listing):
        """TC-074: Saved list"""
        _, headers = regular_user
        owner, _ = owner_user
        first = await make_listing(owner, title="First")
        second = await make_listing(owner, title="Second")

        await client.post(f"/api/saved/{first.id}", headers=headers)
        await client.post(f"/api/saved/{second.id}", headers=headers)

        response = await client.get("/api/saved", headers=headers)
        assert response.status_code == 200

        items = response.json()
        assert {item["listingId"] for item in items} == {first.id, second.id}
        for item in items:
            assert item["listing"]["id"] == item["listingId"]
            assert item["listing"]["owner"]["id"] == owner.id

    @pytest.mark.asyncio
    async def test_tc075_remove_is_idempotent(self, client: AsyncClient, regular_user, owner_user, make_listing):
        """TC-075: Removing twice succeeds both times"""
        _, headers = regular_user
        owner, _ = owner_user
        listing = await make_listing(owner)
        await client.post(f"/api/saved/{listing.id}", headers=headers)

        for _ in range(2):
            response = await client.delete(f"/api/saved/{listing.id}", headers=headers)
            assert response.status_code == 200
            assert response.json() == {"success": True}

        response = await client.get("/api/saved", headers=headers)
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_tc076_other_users_list(self, client: AsyncClient, regular_user, owner_user, admin_user):
        """TC-076: Another user's saved list is admin only"""
        user, _ = regular_user
        _, owner_headers = owner_user
        _, admin_headers = admin_user

        response = await client.get(f"/api/saved?userId={user.id}", headers=owner_headers)
        assert response.status_code == 403

        response = await client.get(f"/api/saved?userId={user.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == []
