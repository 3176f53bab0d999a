"""
Tests for purchase, rent and sale transactions.
"""

import pytest

from boardsim import transactions
from boardsim.player import PlayerAccount
from boardsim.tiles import PropertyTile


@pytest.fixture
def tile():
    return PropertyTile(index=5, name="Harbour", price=200, base_rent=20)


def test_purchase_unowned(tile, alice):
    assert transactions.purchase(tile, alice)
    assert tile.owner_id == alice.player_id
    assert alice.owns(tile)
    assert alice.money == 1300


def test_purchase_already_owned_fails(tile, alice, bob):
    transactions.purchase(tile, alice)
    assert not transactions.purchase(tile, bob)
    assert tile.owner_id == alice.player_id
    assert bob.money == 1500


def test_purchase_unaffordable_changes_nothing(tile):
    poor = PlayerAccount(2, "Poor", 150)
    assert not transactions.purchase(tile, poor)
    assert tile.owner_id is None
    assert poor.money == 150
    assert not poor.owns(tile)


def test_purchase_with_exact_money(tile):
    player = PlayerAccount(2, "Exact", 200)
    assert transactions.purchase(tile, player)
    assert player.money == 0
    assert not player.is_bankrupt


def test_pay_rent_moves_money(tile, alice, bob):
    transactions.purchase(tile, alice)
    assert transactions.pay_rent(tile, bob, alice)
    assert bob.money == 1480
    assert alice.money == 1300 + 20


def test_pay_rent_to_self_is_noop(tile, alice):
    transactions.purchase(tile, alice)
    assert transactions.pay_rent(tile, alice, alice)
    assert alice.money == 1300


def test_pay_rent_unowned_fails(tile, alice, bob):
    assert not transactions.pay_rent(tile, bob, alice)
    assert bob.money == 1500


def test_pay_rent_wrong_owner_fails(tile, alice, bob):
    transactions.purchase(tile, alice)
    other = PlayerAccount(2, "Charlie", 1500)
    assert not transactions.pay_rent(tile, bob, other)
    assert bob.money == 1500
    assert other.money == 1500


def test_pay_rent_unaffordable_changes_nothing(tile, alice):
    transactions.purchase(tile, alice)
    poor = PlayerAccount(2, "Poor", 10)
    assert not transactions.pay_rent(tile, poor, alice)
    assert poor.money == 10
    assert not poor.is_bankrupt
    assert alice.money == 1300


def test_sell_default_price(tile, alice):
    transactions.purchase(tile, alice)
    assert transactions.sell(tile, alice) == 100
    assert tile.owner_id is None
    assert not alice.owns(tile)
    assert alice.money == 1400


def test_sell_explicit_price(tile, alice):
    transactions.purchase(tile, alice)
    assert transactions.sell(tile, alice, price=150) == 150
    assert alice.money == 1450


def test_sell_not_owner_fails(tile, alice, bob):
    transactions.purchase(tile, alice)
    assert transactions.sell(tile, bob) is None
    assert tile.owner_id == alice.player_id


def test_sell_unowned_or_negative_price_fails(tile, alice):
    assert transactions.sell(tile, alice) is None
    transactions.purchase(tile, alice)
    assert transactions.sell(tile, alice, price=-5) is None
    assert tile.owner_id == alice.player_id
