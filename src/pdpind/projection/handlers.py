"""Per-event projection handlers.

Each handler receives the shared `ProjectionContext`, the decoded event and
the raw log, and writes the resulting entities through the store. Handlers
never raise for missing entities: an event that references an unknown data
set or rail is logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from eth_utils import to_checksum_address  # type: ignore[attr-defined]

from pdpind.core.config import ProjectorConfig
from pdpind.core.entities import (
    DataSet,
    FaultRecord,
    Piece,
    ProofChallenge,
    Provider,
    Rail,
    RateChange,
    piece_key,
)
from pdpind.core.interfaces import IEntityStore
from pdpind.core.models import EventLog, hex_to_bytes
from pdpind.decoding.abi import decode_bytes_string, decode_string_address_bool_bytes
from pdpind.decoding.calls import find_add_service_provider
from pdpind.decoding.decoder import ParsedEvent
from pdpind.indexing.challenge import generate_challenge_indices
from pdpind.indexing.sum_tree import SumTree

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProjectionContext:
    """Shared collaborators for handlers (keeps handler signatures small)."""

    store: IEntityStore
    tree: SumTree
    config: ProjectorConfig


Handler = Callable[[ProjectionContext, ParsedEvent, EventLog], None]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _event_id(ev: ParsedEvent) -> str:
    return f"{ev.meta.tx_hash}-{ev.meta.log_index}"


def _data_set(ctx: ProjectionContext, set_id: int, ev: ParsedEvent) -> DataSet | None:
    ds = ctx.store.load(DataSet, str(set_id))
    if ds is None:
        logger.warning("%s at block %d: unknown data set %d, skipped", ev.name, ev.meta.block_number, set_id)
    return ds


def _data_set_or_new(ctx: ProjectionContext, set_id: int, ev: ParsedEvent) -> DataSet:
    ds = ctx.store.load(DataSet, str(set_id))
    if ds is None:
        ds = ctx.store.new(DataSet, str(set_id))
        ds.set_id = set_id
        ds.created_at_block = ev.meta.block_number
    return ds


def _provider_or_new(ctx: ProjectionContext, address: str, ev: ParsedEvent) -> Provider:
    key = to_checksum_address(address)
    provider = ctx.store.load(Provider, key)
    if provider is None:
        provider = ctx.store.new(Provider, key)
        provider.registered_at_block = ev.meta.block_number
    return provider


def _touch(entity: DataSet | Provider | Rail, ev: ParsedEvent) -> None:
    entity.updated_at_block = ev.meta.block_number


# ---------------------------------------------------------------------------
# PDP verifier
# ---------------------------------------------------------------------------


def handle_data_set_created(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    ds = _data_set_or_new(ctx, v["setId"], ev)
    ds.storage_provider = v["storageProvider"]
    ds.is_active = True
    _touch(ds, ev)
    ctx.store.save(ds)

    provider = _provider_or_new(ctx, v["storageProvider"], ev)
    provider.total_data_sets += 1
    _touch(provider, ev)
    ctx.store.save(provider)


def handle_data_set_deleted(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    ds = _data_set(ctx, ev.values["setId"], ev)
    if ds is None:
        return
    ds.is_active = False
    ds.leaf_count = max(0, ds.leaf_count - ev.values["deletedLeafCount"])
    _touch(ds, ev)
    ctx.store.save(ds)

    provider = ctx.store.load(Provider, ds.storage_provider)
    if provider is not None and provider.total_data_sets > 0:
        provider.total_data_sets -= 1
        _touch(provider, ev)
        ctx.store.save(provider)


def handle_pieces_added(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    set_id = v["setId"]
    ds = _data_set(ctx, set_id, ev)
    if ds is None:
        return

    piece_ids: list[int] = v["pieceIds"]
    leaf_counts: list[int] = v["leafCounts"]
    if len(piece_ids) != len(leaf_counts):
        logger.warning(
            "PiecesAdded for set %d: %d ids vs %d leaf counts, extra entries ignored",
            set_id, len(piece_ids), len(leaf_counts),
        )
    extra = decode_bytes_string(v["extraData"])

    for piece_id, leaves in zip(piece_ids, leaf_counts):
        if piece_id > ctx.tree.bound:
            logger.warning("set %d: piece id %d beyond selection tree capacity, skipped", set_id, piece_id)
            continue
        key = piece_key(set_id, piece_id)
        if ctx.store.load(Piece, key) is not None:
            logger.warning("set %d: piece %d already added, skipped", set_id, piece_id)
            continue

        piece = ctx.store.new(Piece, key)
        piece.set_id = set_id
        piece.piece_id = piece_id
        piece.leaf_count = leaves
        piece.metadata = extra.string_value
        piece.signature = extra.bytes_value
        piece.added_at_block = ev.meta.block_number
        ctx.store.save(piece)

        ctx.tree.inc(set_id, piece_id, leaves)
        ds.leaf_count += leaves
        ds.total_pieces += 1
        ds.next_piece_id = max(ds.next_piece_id, piece_id + 1)

    _touch(ds, ev)
    ctx.store.save(ds)


def handle_pieces_removed(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    set_id = ev.values["setId"]
    ds = _data_set(ctx, set_id, ev)
    if ds is None:
        return

    for piece_id in ev.values["pieceIds"]:
        piece = ctx.store.load(Piece, piece_key(set_id, piece_id))
        if piece is None or piece.removed:
            logger.debug("set %d: piece %d not live, removal ignored", set_id, piece_id)
            continue
        ctx.tree.dec(set_id, piece_id, piece.leaf_count, epoch=ev.meta.block_number)
        piece.removed = True
        piece.removed_at_block = ev.meta.block_number
        ctx.store.save(piece)

        ds.leaf_count = max(0, ds.leaf_count - piece.leaf_count)
        ds.total_pieces = max(0, ds.total_pieces - 1)

    _touch(ds, ev)
    ctx.store.save(ds)


def handle_next_proving_period(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    ds = _data_set(ctx, ev.values["setId"], ev)
    if ds is None:
        return
    ds.challenge_epoch = ev.values["challengeEpoch"]
    ds.leaf_count = ev.values["leafCount"]
    _touch(ds, ev)
    ctx.store.save(ds)


def handle_possession_proven(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    set_id = v["setId"]
    ds = _data_set(ctx, set_id, ev)
    if ds is None:
        return

    count = v["challengeCount"]
    if count > ctx.config.max_challenges_per_proof:
        logger.warning(
            "set %d: %d challenges requested, capped at %d",
            set_id, count, ctx.config.max_challenges_per_proof,
        )
        count = ctx.config.max_challenges_per_proof

    block = ev.meta.block_number
    derived = 0
    for proof_index, leaf_index in enumerate(generate_challenge_indices(v["seed"], set_id, count, ds.leaf_count)):
        selection = ctx.tree.select(set_id, leaf_index, ds.next_piece_id)
        if selection is None:
            logger.debug("set %d: challenge leaf %d outside tree weight", set_id, leaf_index)
            continue

        challenge = ctx.store.new(ProofChallenge, f"{_event_id(ev)}-{proof_index}")
        challenge.set_id = set_id
        challenge.proof_index = proof_index
        challenge.leaf_index = leaf_index
        challenge.piece_id = selection.leaf_index
        challenge.offset = selection.offset
        challenge.block_number = block
        ctx.store.save(challenge)

        piece = ctx.store.load(Piece, piece_key(set_id, selection.leaf_index))
        if piece is not None:
            piece.total_challenges += 1
            piece.last_challenged_epoch = block
            ctx.store.save(piece)
        derived += 1

    ds.last_proven_epoch = block
    ds.total_proven_challenges += derived
    _touch(ds, ev)
    ctx.store.save(ds)


def handle_storage_provider_changed(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    ds = _data_set(ctx, v["setId"], ev)
    if ds is None:
        return
    ds.storage_provider = v["newStorageProvider"]
    _touch(ds, ev)
    ctx.store.save(ds)

    old = ctx.store.load(Provider, v["oldStorageProvider"])
    if old is not None and old.total_data_sets > 0:
        old.total_data_sets -= 1
        _touch(old, ev)
        ctx.store.save(old)

    new = _provider_or_new(ctx, v["newStorageProvider"], ev)
    new.total_data_sets += 1
    _touch(new, ev)
    ctx.store.save(new)


# ---------------------------------------------------------------------------
# Warm storage service
# ---------------------------------------------------------------------------


def handle_data_set_rail_created(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    extra = decode_string_address_bool_bytes(v["extraData"])

    ds = _data_set_or_new(ctx, v["dataSetId"], ev)
    ds.rail_id = v["railId"]
    ds.payee = v["payee"]
    ds.payer = extra.address_value
    ds.metadata = extra.string_value
    ds.with_cdn = extra.bool_value
    _touch(ds, ev)
    ctx.store.save(ds)

    rail = ctx.store.load(Rail, str(v["railId"])) or ctx.store.new(Rail, str(v["railId"]))
    rail.rail_id = v["railId"]
    rail.data_set_id = v["dataSetId"]
    rail.payee = v["payee"]
    _touch(rail, ev)
    ctx.store.save(rail)


def handle_provider_registered(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    provider = _provider_or_new(ctx, ev.values["provider"], ev)
    provider.status = "registered"
    provider.registered_at_block = ev.meta.block_number

    params = None
    call_input = hex_to_bytes(log.tx_input)
    if call_input is None:
        logger.warning(
            "provider %s: malformed transaction input in %s, URLs left empty", provider.id, ev.meta.tx_hash
        )
    elif call_input:
        params = find_add_service_provider(call_input, provider.id)
    if params is None:
        logger.debug("provider %s registered without decodable addServiceProvider input", provider.id)
    else:
        provider.pdp_url = params.pdp_url
        provider.piece_retrieval_url = params.piece_retrieval_url

    _touch(provider, ev)
    ctx.store.save(provider)


def _set_provider_status(ctx: ProjectionContext, ev: ParsedEvent, status: str) -> None:
    provider = _provider_or_new(ctx, ev.values["provider"], ev)
    provider.status = status  # type: ignore[assignment]
    if "providerId" in ev.values:
        provider.provider_id = ev.values["providerId"]
    _touch(provider, ev)
    ctx.store.save(provider)


def handle_provider_approved(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    _set_provider_status(ctx, ev, "approved")


def handle_provider_rejected(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    _set_provider_status(ctx, ev, "rejected")


def handle_provider_removed(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    _set_provider_status(ctx, ev, "removed")


def handle_fault_record(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    ds = ctx.store.load(DataSet, str(v["dataSetId"]))

    record = ctx.store.new(FaultRecord, _event_id(ev))
    record.data_set_id = v["dataSetId"]
    record.periods_faulted = v["periodsFaulted"]
    record.deadline = v["deadline"]
    record.block_number = ev.meta.block_number
    if ds is not None:
        record.provider = ds.storage_provider
    ctx.store.save(record)

    if ds is None:
        logger.warning("FaultRecord for unknown data set %d", v["dataSetId"])
        return
    ds.total_faulted_periods += v["periodsFaulted"]
    _touch(ds, ev)
    ctx.store.save(ds)

    provider = ctx.store.load(Provider, ds.storage_provider)
    if provider is not None:
        provider.total_faulted_periods += v["periodsFaulted"]
        _touch(provider, ev)
        ctx.store.save(provider)


def handle_rail_rate_updated(ctx: ProjectionContext, ev: ParsedEvent, log: EventLog) -> None:
    v = ev.values
    rail = ctx.store.load(Rail, str(v["railId"]))
    if rail is None:
        logger.warning("RailRateUpdated for unknown rail %d, skipped", v["railId"])
        return

    change = ctx.store.new(RateChange, _event_id(ev))
    change.rail_id = rail.rail_id
    change.old_rate = rail.rate
    change.new_rate = v["newRate"]
    change.block_number = ev.meta.block_number
    ctx.store.save(change)

    rail.rate = v["newRate"]
    _touch(rail, ev)
    ctx.store.save(rail)


HANDLERS: dict[str, Handler] = {
    "DataSetCreated": handle_data_set_created,
    "DataSetDeleted": handle_data_set_deleted,
    "PiecesAdded": handle_pieces_added,
    "PiecesRemoved": handle_pieces_removed,
    "NextProvingPeriod": handle_next_proving_period,
    "PossessionProven": handle_possession_proven,
    "StorageProviderChanged": handle_storage_provider_changed,
    "DataSetRailCreated": handle_data_set_rail_created,
    "ProviderRegistered": handle_provider_registered,
    "ProviderApproved": handle_provider_approved,
    "ProviderRejected": handle_provider_rejected,
    "ProviderRemoved": handle_provider_removed,
    "FaultRecord": handle_fault_record,
    "RailRateUpdated": handle_rail_rate_updated,
}
