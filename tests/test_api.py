# tests/test_api.py
"""End-to-end HTTP tests against the in-memory repository."""
from sponsorship.core.config import settings
from sponsorship.models import Credit, CreditStatus
from tests.factories import make_campaign, make_deliverable

API = settings.api_prefix


def _login(client, fid=1001, username="cafe_owner"):
    response = client.post(
        f"{API}/auth/miniapp",
        json={"fid": fid, "username": username, "displayName": username.title(), "pfpUrl": "https://img/p.png"},
    )
    assert response.status_code == 200
    return response.json()["user"]


def test_health(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["status"] == "healthy"
    assert response.headers["X-Request-ID"]


def test_miniapp_auth_sets_session_cookie(client):
    user = _login(client)

    assert user["fid"] == "1001"
    assert user["display_name"] == "Cafe_Owner"
    assert user["pfp_url"] == "https://img/p.png"
    assert client.cookies.get(settings.session_cookie_name)

    me = client.get(f"{API}/user/me")
    assert me.json()["user"]["id"] == user["id"]


def test_repeat_login_refreshes_the_same_user(client):
    first = _login(client)
    second = _login(client, username="renamed")

    assert second["id"] == first["id"]
    assert second["username"] == "renamed"


def test_miniapp_auth_rejects_zero_fid(client):
    response = client.post(f"{API}/auth/miniapp", json={"fid": 0})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_user_me_without_session_is_null(client):
    response = client.get(f"{API}/user/me", params={"user_id": "nobody"})

    assert response.status_code == 200
    assert response.json() == {"user": None}


def test_logout_clears_session(client):
    _login(client)
    client.post(f"{API}/auth/logout")

    assert client.get(f"{API}/user/me").json() == {"user": None}


def test_sponsor_profile_lifecycle(client):
    user = _login(client)

    created = client.post(f"{API}/sponsors/profile", json={"name": "Corner Cafe", "industry": "food"})
    assert created.status_code == 201
    profile = created.json()["profile"]
    assert profile["user_id"] == user["id"]

    duplicate = client.post(f"{API}/sponsors/profile", json={"name": "Corner Cafe Again"})
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "conflict"

    mine = client.get(f"{API}/sponsors/profile")
    assert mine.json()["profile"]["id"] == profile["id"]

    updated = client.put(f"{API}/sponsors/{profile['id']}", json={"location": "Main St"})
    assert updated.json()["profile"]["location"] == "Main St"

    deleted = client.delete(f"{API}/sponsors/{profile['id']}")
    assert deleted.json() == {"success": True, "message": "Sponsor profile deleted"}
    assert client.get(f"{API}/sponsors/profile").json() == {"profile": None}


def test_profile_create_without_any_user_is_400(client):
    response = client.post(f"{API}/sponsors/profile", json={"name": "Anonymous"})

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "user_id"}


def test_budget_range_must_be_ordered(client):
    _login(client)
    response = client.post(
        f"{API}/sponsors/profile",
        json={"name": "Cafe", "budget_range_min": 500, "budget_range_max": 100},
    )
    assert response.status_code == 400


def test_other_users_profile_reads_as_not_found(client, world):
    response = client.put(
        f"{API}/creators/{world['creator'].id}",
        json={"user_id": world["sponsor_user"].id, "bio": "hijacked"},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_creator_discovery(client, world):
    response = client.get(f"{API}/creators")

    assert response.status_code == 200
    creators = response.json()["creators"]
    assert [c["id"] for c in creators] == [world["creator"].id]
    assert creators[0]["user"]["username"] == "ava"
    assert creators[0]["offerings"] == []


def test_campaign_proof_review_flow(client, world):
    created = client.post(
        f"{API}/campaigns",
        json={
            "sponsor_id": world["sponsor"].id,
            "creator_id": world["creator"].id,
            "title": "Grand opening",
            "status": "active",
            "compensation_type": "cash",
            "cash_amount": 200,
            "deliverables": [
                {"title": "Post a reel", "type": "content_post"},
                {"title": "Attend opening", "type": "event_appearance"},
            ],
        },
    )
    assert created.status_code == 201
    campaign = created.json()["campaign"]
    assert campaign["status"] == "active"
    assert campaign["sponsor"]["name"] == "Corner Cafe"
    first, second = campaign["deliverables"]

    for deliverable in (first, second):
        proof = client.post(
            f"{API}/proofs",
            json={
                "deliverable_id": deliverable["id"],
                "submitted_by": world["creator_user"].id,
                "proof_type": "link",
                "content": "https://example.com/proof",
                "metadata": {"platform": "instagram"},
            },
        )
        assert proof.status_code == 201
        assert proof.json()["proof"]["metadata"] == {"platform": "instagram"}

        review = client.post(
            f"{API}/proofs/{proof.json()['proof']['id']}/review",
            json={"status": "approved", "reviewed_by": world["sponsor_user"].id, "notes": "Great"},
        )
        assert review.status_code == 200
        assert review.json()["deliverable_status"] == "verified"
        assert review.json()["proof"]["review_notes"] == "Great"

    assert review.json()["campaign_completed"] is True

    detail = client.get(f"{API}/campaigns/{campaign['id']}").json()["campaign"]
    assert detail["status"] == "completed"
    assert all(d["status"] == "verified" for d in detail["deliverables"])
    assert all(len(d["proofs"]) == 1 for d in detail["deliverables"])
    assert detail["creator"]["completed_campaigns"] == 1


def test_reviewing_approved_proof_again_is_rejected(client, repo, world):
    deliverable = make_deliverable(repo, make_campaign(repo, world["sponsor"]))
    proof = client.post(
        f"{API}/proofs",
        json={
            "deliverable_id": deliverable.id,
            "submitted_by": world["creator_user"].id,
            "proof_type": "text",
            "content": "Done",
        },
    ).json()["proof"]
    review_url = f"{API}/proofs/{proof['id']}/review"
    client.post(review_url, json={"status": "approved", "reviewed_by": world["sponsor_user"].id})

    again = client.post(review_url, json={"status": "rejected", "reviewed_by": world["sponsor_user"].id})

    assert again.status_code == 400
    assert again.json()["code"] == "invalid_transition"
    assert again.json()["details"]["current_status"] == "approved"


def test_invalid_campaign_transition_is_400(client, repo, world):
    campaign = make_campaign(repo, world["sponsor"])

    response = client.put(f"{API}/campaigns/{campaign.id}", json={"status": "completed"})

    assert response.status_code == 400
    assert response.json()["details"] == {
        "entity": "campaign",
        "current_status": "active",
        "requested_status": "completed",
    }


def test_explicit_null_for_required_field_is_400(client, repo, world):
    campaign = make_campaign(repo, world["sponsor"])
    deliverable = make_deliverable(repo, campaign)

    title = client.put(f"{API}/campaigns/{campaign.id}", json={"title": None})
    kind = client.put(f"{API}/deliverables/{deliverable.id}", json={"type": None})

    assert title.status_code == 400
    assert title.json()["code"] == "validation_error"
    assert title.json()["details"]["fields"] == ["title"]
    assert kind.status_code == 400
    assert kind.json()["details"] == {"fields": ["type"], "resource": "deliverables"}
    assert client.get(f"{API}/campaigns/{campaign.id}").json()["campaign"]["title"] == "Spring launch"


def test_unknown_enum_value_is_400(client, world):
    response = client.post(
        f"{API}/campaigns",
        json={"sponsor_id": world["sponsor"].id, "title": "X", "compensation_type": "barter"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["details"]["errors"][0]["loc"] == ["body", "compensation_type"]


def test_compensation_mismatch_is_400(client, world):
    response = client.post(
        f"{API}/campaigns",
        json={
            "sponsor_id": world["sponsor"].id,
            "title": "X",
            "compensation_type": "credit",
            "cash_amount": 10,
        },
    )
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "cash_amount"


def test_campaign_list_by_user_and_delete(client, repo, world):
    campaign = make_campaign(repo, world["sponsor"], world["creator"])
    make_deliverable(repo, campaign)

    listed = client.get(f"{API}/campaigns", params={"user_id": world["creator_user"].id}).json()["campaigns"]
    assert [c["id"] for c in listed] == [campaign.id]

    deleted = client.delete(f"{API}/campaigns/{campaign.id}")
    assert deleted.json()["message"] == "Campaign deleted"
    assert client.get(f"{API}/campaigns/{campaign.id}").status_code == 404
    assert client.get(f"{API}/deliverables", params={"campaign_id": campaign.id}).json() == {"deliverables": []}


def test_manual_deliverable_verification(client, repo, world):
    campaign = make_campaign(repo, world["sponsor"])
    deliverable = make_deliverable(repo, campaign)

    response = client.put(f"{API}/deliverables/{deliverable.id}", json={"status": "verified"})

    assert response.status_code == 200
    assert response.json()["deliverable"]["status"] == "verified"
    assert response.json()["deliverable"]["completed_at"] is not None
    assert client.get(f"{API}/campaigns/{campaign.id}").json()["campaign"]["status"] == "completed"


def test_credit_issue_and_redeem(client, repo, world):
    issued = client.post(
        f"{API}/credits",
        json={
            "sponsor_id": world["sponsor"].id,
            "recipient_id": world["creator_user"].id,
            "title": "Free coffee",
            "value": 4.5,
            "expires_at": "2020-01-01T00:00:00Z",
        },
    )
    assert issued.status_code == 201
    credit = issued.json()["credit"]
    assert credit["status"] == "active"
    assert credit["is_expired"] is True

    redeemed = client.post(f"{API}/credits/{credit['id']}/redeem").json()["credit"]
    assert redeemed["status"] == "redeemed"
    assert redeemed["redeemed_at"] is not None
    assert redeemed["is_expired"] is False

    cancelled = client.post(f"{API}/credits/{credit['id']}/cancel")
    assert cancelled.status_code == 400

    stored = repo.all(Credit)[0]
    assert stored.status == CreditStatus.REDEEMED


def test_unknown_resource_shape(client):
    response = client.get(f"{API}/campaigns/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {
        "code": "not_found",
        "message": "Campaign not found",
        "details": {"resource": "campaigns", "id": "does-not-exist"},
    }


def test_unknown_route_and_wrong_method(client):
    missing = client.get("/nowhere")
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"

    wrong = client.patch(f"{API}/health")
    assert wrong.status_code == 405
    assert wrong.json()["code"] == "method_not_allowed"


def test_offering_endpoints(client, world):
    owner = world["creator_user"].id
    created = client.post(
        f"{API}/offerings",
        json={
            "user_id": owner,
            "creator_id": world["creator"].id,
            "title": "Launch reel",
            "deliverable_types": ["content_post", "event_appearance"],
            "base_price": 120,
        },
    )
    assert created.status_code == 201
    offering = created.json()["offering"]
    assert offering["deliverable_types"] == ["content_post", "event_appearance"]

    listed = client.get(f"{API}/offerings", params={"user_id": owner}).json()["offerings"]
    assert [o["id"] for o in listed] == [offering["id"]]
    assert listed[0]["creator"]["id"] == world["creator"].id

    empty_types = client.put(f"{API}/offerings/{offering['id']}", json={"user_id": owner, "deliverable_types": []})
    assert empty_types.status_code == 400

    client.delete(f"{API}/offerings/{offering['id']}", params={"user_id": owner})
    assert client.get(f"{API}/offerings").json() == {"offerings": []}
