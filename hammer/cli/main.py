"""
Hammer CLI - Command Line Interface for the auction engine

Offline tooling around the engine: identity codes, price curves, bid checks,
sealed-bid phases and the local watchlist.
"""

import json
import logging
import time
from pathlib import Path

import click

from hammer.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


def _now(now):
    return int(time.time()) if now is None else now


def _load_record(path: str):
    """
    Load a raw auction record from a JSON file of the form
    {"protocol": "<tag>", "fields": [...], "block_number": N}.
    """
    from hammer.core.auction import map_raw_auction_strict
    from hammer.core.errors import UnknownProtocol

    try:
        data = json.loads(Path(path).read_text())
        return map_raw_auction_strict(
            data["protocol"],
            data["fields"],
            fetched_at=data.get("fetched_at", 0),
            block_number=data.get("block_number", 0),
        )
    except UnknownProtocol as e:
        raise click.ClickException(str(e))
    except KeyError as e:
        raise click.ClickException(f"record file is missing {e}")
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"unusable record: {e}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--data-dir", default="~/.hammer", help="Data directory")
@click.option("--config", "config_path", default=None, help="JSON config file")
@click.option("--log-file", is_flag=True, help="Also write logs to <data-dir>/logs")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, data_dir, config_path, log_file):
    """Hammer - auction pricing and phase-state engine"""
    from hammer.core.config import load_config

    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = Path(data_dir).expanduser()

    level = logging.DEBUG if debug else logging.INFO
    setup_logging(
        level=level,
        log_dir=str(ctx.obj["data_dir"] / "logs"),
        log_to_file=log_file,
    )

    try:
        ctx.obj["config"] = load_config(config_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e))


# =============================================================================
# Identity Commands
# =============================================================================

@cli.group("id")
def id_group():
    """Auction identity codes"""
    pass


@id_group.command("encode")
@click.argument("protocol")
@click.argument("numeric_id", type=int)
def id_encode(protocol, numeric_id):
    """Encode PROTOCOL and on-chain NUMERIC_ID into a URL code"""
    from hammer.core.identity import encode

    try:
        click.echo(encode(protocol, numeric_id))
    except (LookupError, ValueError) as e:
        raise click.ClickException(str(e))


@id_group.command("decode")
@click.argument("code")
def id_decode(code):
    """Decode a URL code into protocol and on-chain id"""
    from hammer.core.identity import decode

    try:
        auction_id = decode(code)
    except (LookupError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Protocol: {auction_id.protocol.tag}")
    click.echo(f"Id: {auction_id.numeric_id}")


# =============================================================================
# Pricing Commands
# =============================================================================

@cli.command("price")
@click.argument("protocol")
@click.option("--start", "start_price", type=int, required=True, help="Starting price (base units)")
@click.option("--reserve", "reserved_price", type=int, default=0, help="Reserved price (base units)")
@click.option("--duration", type=int, required=True, help="Decay duration in seconds")
@click.option("--elapsed", "elapsed_s", type=int, multiple=True, help="Seconds since start (repeatable)")
@click.option("--steps", type=int, default=0, help="Print the curve at N evenly spaced points")
def price(protocol, start_price, reserved_price, duration, elapsed_s, steps):
    """Quote a decaying-price curve"""
    from hammer.core.auction import AuctionSnapshot, AuctionedAsset, BiddingAsset, current_price
    from hammer.core.identity import AuctionId
    from hammer.core.protocol import AuctionProtocol
    from hammer.crypto import ZERO_ADDRESS

    try:
        protocol = AuctionProtocol.parse(protocol)
        if not protocol.is_decaying:
            raise click.ClickException(f"{protocol} has no decaying price curve")
        start_time = 1_000_000
        snapshot = AuctionSnapshot(
            id=AuctionId(protocol, 0),
            auctioneer=ZERO_ADDRESS,
            winner=ZERO_ADDRESS,
            auctioned_asset=AuctionedAsset(ZERO_ADDRESS, 1, True),
            bidding_asset=BiddingAsset(ZERO_ADDRESS),
            starting_price=start_price,
            reserved_price=reserved_price,
            available_funds=0,
            deadline=start_time + duration,
            duration=duration,
            is_claimed=False,
        )
    except (LookupError, ValueError) as e:
        raise click.ClickException(str(e))

    points = list(elapsed_s)
    if steps > 0:
        points.extend(duration * i // steps for i in range(steps + 1))
    if not points:
        points = [0, duration]

    click.echo(f"{protocol.tag} curve: start={start_price} reserve={reserved_price} duration={duration}s")
    for e in points:
        click.echo(f"  +{e}s: {current_price(snapshot, start_time + e)}")


@cli.command("bid")
@click.argument("record", type=click.Path(exists=True, dir_okay=False))
@click.argument("amount", type=int, required=False)
@click.option("--now", type=int, default=None, help="Unix time to evaluate at (default: now)")
def bid(record, amount, now):
    """Show the quote of RECORD and check an AMOUNT against it"""
    from hammer.core.auction import enrich
    from hammer.core.auction.service import service_for
    from hammer.core.errors import BidRejected, UnsupportedOperation

    ctx = click.get_current_context()
    snapshot = _load_record(record)
    now = _now(now)
    enriched = enrich(snapshot, now)

    click.echo(f"Auction: {snapshot.code} ({snapshot.protocol.tag} #{snapshot.id.numeric_id})")
    click.echo(f"Status: {enriched.status.value}")
    if enriched.current_price is not None:
        click.echo(f"Price: {enriched.current_price}")
    if enriched.minimum_next_bid is not None:
        click.echo(f"Minimum next bid: {enriched.minimum_next_bid}")
    if enriched.phase is not None:
        click.echo(f"Phase: {enriched.phase.name}")

    if amount is None:
        return

    service = service_for(snapshot.protocol, ctx.obj["config"])
    try:
        if snapshot.protocol.is_decaying:
            plan = service.build_purchase_or_bid_operation(snapshot, now, amount)
        else:
            service.validate_bid(snapshot, amount, now)
            plan = None
    except UnsupportedOperation as e:
        raise click.ClickException(str(e))
    except BidRejected as e:
        click.echo(f"✗ Rejected: {e}")
        ctx.exit(1)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"✓ {amount} accepted")
    if plan is not None:
        click.echo(json.dumps(plan.to_dict(), indent=2))


@cli.command("listing")
@click.argument("dump", type=click.Path(exists=True, dir_okay=False))
@click.option("--all", "full", is_flag=True, help="List a full batch instead of the latest auctions")
@click.option("--now", type=int, default=None, help="Unix time to evaluate at (default: now)")
@click.pass_context
def listing(ctx, dump, full, now):
    """
    List the latest auctions of a contract dump.

    DUMP is a JSON file {"protocol": "<tag>", "counter": N,
    "records": {"<id>": [...]}, "block_number": N}.
    """
    from hammer.core.auction import enrich, listing_window, map_auction_batch
    from hammer.core.errors import UnknownProtocol

    config = ctx.obj["config"]
    size = config.batch_size if full else config.listing_size
    now = _now(now)

    try:
        data = json.loads(Path(dump).read_text())
        records = data["records"]
        rows = [records.get(str(i)) for i in listing_window(data["counter"], size)]
        snapshots = map_auction_batch(
            data["protocol"],
            rows,
            fetched_at=data.get("fetched_at", 0),
            block_number=data.get("block_number", 0),
        )
    except UnknownProtocol as e:
        raise click.ClickException(str(e))
    except KeyError as e:
        raise click.ClickException(f"dump file is missing {e}")
    except (AttributeError, TypeError, ValueError) as e:
        raise click.ClickException(f"unusable dump: {e}")

    if not snapshots:
        click.echo("No auctions.")
        return

    for snapshot in snapshots:
        enriched = enrich(snapshot, now)
        shown = enriched.current_price
        if shown is None:
            shown = enriched.minimum_next_bid
        price_text = "-" if shown is None else str(shown)
        click.echo(f"  {snapshot.code}: {snapshot.protocol.tag} #{snapshot.id.numeric_id} "
                   f"{enriched.status.value} {price_text}")


@cli.command("phase")
@click.option("--commit-end", type=int, required=True, help="End of the commit window")
@click.option("--reveal-end", type=int, required=True, help="End of the reveal window")
@click.option("--now", type=int, default=None, help="Unix time to evaluate at (default: now)")
def phase_cmd(commit_end, reveal_end, now):
    """Resolve the sealed-bid phase at a point in time"""
    from hammer.core.auction import Phase, phase_at

    if commit_end > reveal_end:
        raise click.ClickException("commit end must not be after reveal end")
    now = _now(now)
    current = phase_at(commit_end, reveal_end, now)
    click.echo(f"Phase: {current.name}")
    if current == Phase.COMMIT:
        click.echo(f"Reveal opens in {commit_end - now}s")
    elif current == Phase.REVEAL:
        click.echo(f"Auction ends in {reveal_end - now}s")


# =============================================================================
# Watchlist Commands
# =============================================================================

def _store(ctx):
    from hammer.core.storage import WatchlistStore

    config = ctx.obj["config"]
    return WatchlistStore(ctx.obj["data_dir"], config.db_name)


@cli.group()
def watchlist():
    """Tracked auctions"""
    pass


@watchlist.command("add")
@click.argument("code")
@click.option("--owner", default="", help="Account the list belongs to")
@click.option("--list", "list_name", default="Watchlist", help="List name (Watchlist or Bids)")
@click.pass_context
def watchlist_add(ctx, code, owner, list_name):
    """Track the auction with URL code CODE"""
    from hammer.core.identity import decode

    try:
        auction_id = decode(code)
    except (LookupError, ValueError) as e:
        raise click.ClickException(str(e))

    store = _store(ctx)
    try:
        if store.add(auction_id.protocol, auction_id.numeric_id, owner, list_name):
            click.echo(f"✓ Added {code} to {list_name}")
        else:
            click.echo(f"{code} is already in {list_name}")
    finally:
        store.close()


@watchlist.command("remove")
@click.argument("code")
@click.option("--owner", default="", help="Account the list belongs to")
@click.option("--list", "list_name", default="Watchlist", help="List name (Watchlist or Bids)")
@click.pass_context
def watchlist_remove(ctx, code, owner, list_name):
    """Stop tracking the auction with URL code CODE"""
    from hammer.core.identity import decode

    try:
        auction_id = decode(code)
    except (LookupError, ValueError) as e:
        raise click.ClickException(str(e))

    store = _store(ctx)
    try:
        if store.remove(auction_id.protocol, auction_id.numeric_id, owner, list_name):
            click.echo(f"✓ Removed {code} from {list_name}")
        else:
            click.echo(f"{code} is not in {list_name}")
    finally:
        store.close()


@watchlist.command("list")
@click.option("--owner", default="", help="Account the list belongs to")
@click.option("--list", "list_name", default="Watchlist", help="List name (Watchlist or Bids)")
@click.pass_context
def watchlist_list(ctx, owner, list_name):
    """List tracked auctions"""
    store = _store(ctx)
    try:
        entries = store.entries(owner, list_name)
    finally:
        store.close()

    if not entries:
        click.echo(f"{list_name} is empty.")
        return
    for entry in entries:
        click.echo(f"  {entry.code}: {entry.protocol.tag} #{entry.numeric_id}")


if __name__ == "__main__":
    cli()
