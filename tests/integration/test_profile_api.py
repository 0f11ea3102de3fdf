"""
Integration tests for the profile endpoints.
"""

from tests.utils import auth_header, make_user

PROFILE = "/api/v1/profile"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_create_then_update(client, investor, investor_headers):
    created = client.post(
        PROFILE,
        json={"firstName": "Grace", "investmentInterests": ["fintech"], "investmentStage": "seed"},
        headers=investor_headers,
    )
    assert created.status_code == 201
    assert created.json()["message"] == "Profile created successfully"
    data = created.json()["data"]
    assert data["firstName"] == "Grace"
    assert data["user"]["id"] == investor.id

    updated = client.post(PROFILE, json={"bio": "Angel investor"}, headers=investor_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["firstName"] == "Grace"
    assert updated.json()["data"]["bio"] == "Angel investor"


def test_multipart_with_picture(client, investor_headers, local_uploads):
    response = client.post(
        PROFILE,
        data={"firstName": "Grace", "investmentInterests": "fintech, ai",
              "location": '{"country": "Kenya"}'},
        files={"profilePicture": ("me.png", PNG, "image/png")},
        headers=investor_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["investmentInterests"] == ["fintech", "ai"]
    assert data["location"] == {"country": "Kenya"}
    assert "/media/profile_pictures/" in data["profilePicture"]
    assert len(list((local_uploads / "profile_pictures").iterdir())) == 1


def test_my_profile(client, investor_headers):
    assert client.get(f"{PROFILE}/me", headers=investor_headers).status_code == 404
    client.post(PROFILE, json={"firstName": "Grace"}, headers=investor_headers)
    response = client.get(f"{PROFILE}/me", headers=investor_headers)
    assert response.status_code == 200
    assert response.json()["data"]["firstName"] == "Grace"


def test_profile_by_user(client, investor, investor_headers):
    client.post(PROFILE, json={"firstName": "Grace"}, headers=investor_headers)
    assert client.get(f"{PROFILE}/user/{investor.id}").json()["data"]["firstName"] == "Grace"
    assert client.get(f"{PROFILE}/user/nobody").status_code == 404


def test_list_with_filters(client, db, investor_headers):
    client.post(PROFILE, json={"investmentInterests": ["fintech"], "investmentStage": "seed"},
                headers=investor_headers)
    other = auth_header(make_user(db, "health_vc"))
    client.post(PROFILE, json={"investmentInterests": ["health"], "investmentStage": "series-a"}, headers=other)

    body = client.get(PROFILE, params={"interests": "fintech,ai"}).json()
    assert body["success"] is True
    assert len(body["data"]) == 1
    assert body["pagination"] == {"current": 1, "pages": 1, "total": 1}

    assert len(client.get(PROFILE).json()["data"]) == 2
    assert len(client.get(PROFILE, params={"stage": "series-a"}).json()["data"]) == 1


def test_delete_profile(client, investor_headers):
    client.post(PROFILE, json={"firstName": "Grace"}, headers=investor_headers)
    response = client.delete(PROFILE, headers=investor_headers)
    assert response.json() == {"success": True, "message": "Profile deleted successfully"}
    assert client.get(f"{PROFILE}/me", headers=investor_headers).status_code == 404


def test_writes_require_token(client):
    assert client.post(PROFILE, json={"firstName": "Grace"}).status_code == 401
    assert client.delete(PROFILE).status_code == 401
