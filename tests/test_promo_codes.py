import pytest

from partner_portal.core.errors import Conflict
from partner_portal.schemas.campaign import PromoCodeCreate
from partner_portal.services.promo_codes import (
    create_promo_code,
    get_promo_code_by_code,
    toggle_promo_code_status,
)
from tests.factories import make_campaign, make_partner, make_program


def test_codes_are_case_insensitive(seeded):
    partner, _, _ = make_partner(seeded)
    campaign = make_campaign(seeded, partner.id, make_program(seeded))

    promo = create_promo_code(seeded, PromoCodeCreate(campaign_id=campaign.id, code=" save10 "))
    assert promo.code == "SAVE10"

    with pytest.raises(Conflict):
        create_promo_code(seeded, PromoCodeCreate(campaign_id=campaign.id, code="SAVE10"))

    assert get_promo_code_by_code(seeded, "Save10").id == promo.id


def test_toggle_promo_code(seeded):
    partner, _, _ = make_partner(seeded)
    campaign = make_campaign(seeded, partner.id, make_program(seeded))
    promo = create_promo_code(seeded, PromoCodeCreate(campaign_id=campaign.id, code="TERM1"))

    assert not toggle_promo_code_status(seeded, promo.id).is_active
    assert toggle_promo_code_status(seeded, promo.id).is_active
