import pytest

from partner_portal.core.errors import Conflict, NotFound
from partner_portal.schemas.channel import ChannelCreate, ChannelUpdate
from partner_portal.services.channels import (
    create_channel,
    delete_channel,
    get_channel_by_code,
    get_channels_by_partner,
    update_channel,
)
from partner_portal.services.users import create_user
from tests.factories import auth_headers, make_partner


def _payload(**overrides):
    data = {"name": "Nairobi Schools", "code": "nbi-schools", "subchannels": ["Westlands", " Kibera ", "Westlands", ""]}
    data.update(overrides)
    return ChannelCreate(**data)


def test_create_channel_normalizes_code_and_subchannels(seeded):
    partner, _, _ = make_partner(seeded)
    channel = create_channel(seeded, partner.id, _payload())

    assert channel.code == "NBI-SCHOOLS"
    assert channel.subchannels == ["Westlands", "Kibera"]
    assert get_channel_by_code(seeded, "nbi-schools").id == channel.id


def test_channel_codes_are_unique_across_partners(seeded):
    partner, _, _ = make_partner(seeded)
    other, _, _ = make_partner(seeded, name="Other Org", email="other@example.com")
    create_channel(seeded, partner.id, _payload())

    with pytest.raises(Conflict):
        create_channel(seeded, other.id, _payload(name="Copycat", code="NBI-Schools"))


def test_channels_listed_per_partner(seeded):
    partner, _, _ = make_partner(seeded)
    other, _, _ = make_partner(seeded, name="Other Org", email="other@example.com")
    create_channel(seeded, partner.id, _payload())
    create_channel(seeded, partner.id, _payload(name="Radio", code="RADIO"))
    create_channel(seeded, other.id, _payload(name="Mombasa", code="MSA"))

    assert [c.code for c in get_channels_by_partner(seeded, partner.id)] == ["NBI-SCHOOLS", "RADIO"]
    assert [c.code for c in get_channels_by_partner(seeded, other.id)] == ["MSA"]


def test_create_channel_for_unknown_partner(seeded):
    with pytest.raises(NotFound):
        create_channel(seeded, 999, _payload())


def test_update_channel_only_touches_given_fields(seeded):
    partner, _, _ = make_partner(seeded)
    channel = create_channel(seeded, partner.id, _payload(description="Primary schools"))
    create_channel(seeded, partner.id, _payload(name="Radio", code="RADIO"))

    updated = update_channel(seeded, channel.id, ChannelUpdate(subchannels=["Karen"]))
    assert updated.subchannels == ["Karen"]
    assert updated.description == "Primary schools"
    assert updated.code == "NBI-SCHOOLS"

    with pytest.raises(Conflict):
        update_channel(seeded, channel.id, ChannelUpdate(code="radio"))

    assert update_channel(seeded, channel.id, ChannelUpdate(code="nbi-schools")).code == "NBI-SCHOOLS"


def test_delete_channel(seeded):
    partner, _, _ = make_partner(seeded)
    channel = create_channel(seeded, partner.id, _payload())

    assert delete_channel(seeded, channel.id) == {"success": True}
    assert get_channels_by_partner(seeded, partner.id) == []
    with pytest.raises(NotFound):
        delete_channel(seeded, channel.id)


def test_channel_api_is_partner_scoped(client, seeded):
    partner, admin, _ = make_partner(seeded)
    _, other_admin, _ = make_partner(seeded, name="Other Org", email="other@example.com")

    res = client.post("/api/v1/channels", headers=auth_headers(seeded, admin), json={"name": "Radio", "code": "radio"})
    assert res.status_code == 201
    body = res.json()
    assert body["partner_id"] == partner.id
    assert body["code"] == "RADIO"

    res = client.get(f"/api/v1/channels/{body['id']}", headers=auth_headers(seeded, other_admin))
    assert res.status_code == 403
    res = client.get("/api/v1/channels/code/RADIO", headers=auth_headers(seeded, other_admin))
    assert res.status_code == 403

    res = client.get("/api/v1/channels", headers=auth_headers(seeded, other_admin))
    assert res.json() == []
    res = client.get(f"/api/v1/channels?partner_id={partner.id}", headers=auth_headers(seeded, other_admin))
    assert res.status_code == 403


def test_viewer_cannot_create_channel(client, seeded):
    partner, _, _ = make_partner(seeded)
    viewer, _ = create_user(seeded, partner_id=partner.id, email="viewer@example.com", name="Vera", role="viewer")

    res = client.post("/api/v1/channels", headers=auth_headers(seeded, viewer), json={"name": "Radio", "code": "RADIO"})
    assert res.status_code == 403
