from decimal import Decimal

import pytest

from partner_portal.core.errors import Conflict, ValidationFailed, WalletNotFound
from partner_portal.models import WithdrawalMethod
from partner_portal.schemas.wallet import WalletCreate, WalletUpdate
from partner_portal.services.wallet import (
    create_wallet,
    get_wallet_by_partner,
    update_wallet,
    update_wallet_balance,
    verify_pin,
)
from tests.factories import make_partner, make_wallet


def test_balance_and_lifetime_move_together(seeded):
    partner, _, _ = make_partner(seeded)
    wallet = make_wallet(seeded, partner.id)

    update_wallet_balance(seeded, partner.id, Decimal("100"))
    result = update_wallet_balance(seeded, partner.id, Decimal("50"))

    seeded.refresh(wallet)
    assert result == {"success": True, "new_balance": Decimal("150")}
    assert Decimal(wallet.balance) == Decimal("150")
    assert Decimal(wallet.lifetime_earnings) == Decimal("150")


def test_credit_missing_wallet(seeded):
    partner, _, _ = make_partner(seeded)
    with pytest.raises(WalletNotFound):
        update_wallet_balance(seeded, partner.id, Decimal("10"))
    assert get_wallet_by_partner(seeded, partner.id) is None


def test_one_wallet_per_partner(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    with pytest.raises(Conflict):
        make_wallet(seeded, partner.id)


def test_pin_is_hashed_and_verified(seeded):
    partner, _, _ = make_partner(seeded)
    wallet = make_wallet(seeded, partner.id, pin="4321")

    assert wallet.pin_hash != "4321"
    assert verify_pin(seeded, wallet.id, "4321") == {"success": True}
    assert verify_pin(seeded, wallet.id, "0000") == {"success": False, "error": "Invalid PIN"}
    assert verify_pin(seeded, 9999, "4321") == {"success": False, "error": "Wallet not found"}


def test_bank_method_requires_bank_name(seeded):
    partner, _, _ = make_partner(seeded)
    payload = WalletCreate(account_number="1234567", withdrawal_method=WithdrawalMethod.BANK, pin="1234")
    with pytest.raises(ValidationFailed):
        create_wallet(seeded, payload, partner_id=partner.id)


def test_update_wallet_pin_and_method(seeded):
    partner, _, _ = make_partner(seeded)
    wallet = make_wallet(seeded, partner.id)

    update_wallet(
        seeded,
        partner.id,
        WalletUpdate(withdrawal_method=WithdrawalMethod.PAYBILL, paybill_number="400200", pin="5555"),
    )

    assert wallet.withdrawal_method == WithdrawalMethod.PAYBILL
    assert wallet.paybill_number == "400200"
    assert verify_pin(seeded, wallet.id, "5555")["success"]
