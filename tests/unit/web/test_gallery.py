import pytest

from tests.conftest import OTHER_ORGANIZER_ID, insert_event
from tests.unit.web.conftest import EVIL_ORIGIN, TRUSTED_ORIGIN

BEARER = {"Authorization": "Bearer valid-bearer"}


async def seed_media(services, database, storage):
    event = await insert_event(database)
    _, session, _ = await services.guest.join("summer-party", None, "May", None, "203.0.113.7")
    ticket = await services.media.create_upload(session, event, "image/jpeg", 1024, [])
    row = await database.get_collection("media").find_one({"_id": ticket.media_id})
    storage.objects.add(("event-media", row["object_path"]))
    await services.media.complete_upload(session, ticket.media_id)
    return event, ticket.media_id


class TestGallery:
    @pytest.mark.asyncio
    async def test_owner_lists_media(self, client, services, database, storage):
        event, media_id = await seed_media(services, database, storage)

        response = client.get(f"/api/organizer/events/{event.id}/media", headers=BEARER)

        assert response.status_code == 200
        assert [item["media_id"] for item in response.json()] == [str(media_id)]
        assert response.json()[0]["uploader_name"] == "May"

    @pytest.mark.asyncio
    async def test_other_organizers_event_forbidden(self, client, database):
        event = await insert_event(database, organizer_id=OTHER_ORGANIZER_ID)

        response = client.get(f"/api/organizer/events/{event.id}/media", headers=BEARER)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_bearer_delete_needs_no_origin(self, client, services, database, storage):
        event, media_id = await seed_media(services, database, storage)

        response = client.delete(f"/api/organizer/events/{event.id}/media/{media_id}", headers={**BEARER, "Origin": EVIL_ORIGIN})

        assert response.status_code == 204
        assert len(storage.deleted) == 2

    @pytest.mark.asyncio
    async def test_cookie_delete_checked_before_auth(self, client, services, database, storage, signed_in):
        event, media_id = await seed_media(services, database, storage)

        rejected = client.delete(f"/api/organizer/events/{event.id}/media/{media_id}", headers={"Origin": EVIL_ORIGIN})
        accepted = client.delete(f"/api/organizer/events/{event.id}/media/{media_id}", headers={"Origin": TRUSTED_ORIGIN})

        assert rejected.status_code == 403
        assert accepted.status_code == 204

    def test_invalid_event_id(self, client):
        response = client.get("/api/organizer/events/not-a-uuid/media", headers=BEARER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
