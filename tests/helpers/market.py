"""Helpers for funding accounts and seeding pools.

Usage:
    from tests.helpers.market import fund, seed_pair

    fund(token, ALICE, 10_000, spender=router.address)
    pair = seed_pair(exchange, token_a, token_b, 1_000, 2_000, ALICE)
"""

from dex.amm.pair import Pair
from dex.assets import Token
from dex.exchange import Exchange


def fund(token: Token, owner: str, amount: int, spender: str | None = None) -> None:
    """Issue `amount` to owner and, optionally, approve spender for it."""
    token.mint(owner, amount)
    if spender is not None:
        token.approve(owner, spender, token.allowance(owner, spender) + amount)


def seed_pair(
    exchange: Exchange,
    token_a: Token,
    token_b: Token,
    amount_a: int,
    amount_b: int,
    provider: str,
) -> Pair:
    """Create (if needed) and fund a pair directly, bypassing the router."""
    if exchange.factory.get_pair(token_a.address, token_b.address) is None:
        exchange.factory.create_pair(token_a.address, token_b.address)
    pair = exchange.pair(token_a.address, token_b.address)
    token_a.mint(pair.address, amount_a)
    token_b.mint(pair.address, amount_b)
    pair.mint(provider)
    return pair


def sorted_tokens(exchange: Exchange, pair: Pair) -> tuple[Token, Token]:
    """The pair's (asset0, asset1) token objects."""
    return exchange.ledger.contract(pair.asset0), exchange.ledger.contract(pair.asset1)


def pay_in(token: Token, pair: Pair, amount: int) -> None:
    """Send `amount` of token to the pair without touching its reserves."""
    token.mint(pair.address, amount)
