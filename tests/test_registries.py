"""Reference registry tests."""

import pytest

from conftest import shipment_payload
from shipdesk.exceptions import ConflictError, NotFoundError, ValidationError
from shipdesk.schemas import (
    AddressCreate,
    AddressUpdate,
    CarrierCreate,
    CarrierUpdate,
    SenderCreate,
    SenderUpdate,
)


async def test_create_and_get_round_trip(carriers) -> None:
    carrier_id = await carriers.create(
        CarrierCreate(
            name="顺丰速运",
            contact_person="张经理",
            phone="13800138000",
            address="北京市朝阳区顺丰总部",
        )
    )

    carrier = await carriers.get(carrier_id)
    assert carrier.id == carrier_id
    assert carrier.name == "顺丰速运"
    assert carrier.contact_person == "张经理"
    assert carrier.phone == "13800138000"
    assert carrier.address == "北京市朝阳区顺丰总部"
    assert carrier.created_at is not None


async def test_optional_fields_default_to_empty(senders) -> None:
    sender_id = await senders.create(SenderCreate(name="仓库一部"))
    sender = await senders.get(sender_id)
    assert sender.phone == ""
    assert sender.address == ""


@pytest.mark.parametrize("name", [None, "", "   "])
async def test_create_rejects_blank_name(carriers, name) -> None:
    with pytest.raises(ValidationError):
        await carriers.create(CarrierCreate(name=name))
    assert await carriers.list() == []


async def test_address_requires_phone_and_address(addresses) -> None:
    with pytest.raises(ValidationError, match="recipient_phone"):
        await addresses.create(
            AddressCreate(
                recipient_name="王女士",
                recipient_address="广州市天河区体育西路189号",
            )
        )


async def test_list_is_newest_first(carriers) -> None:
    first = await carriers.create(CarrierCreate(name="first"))
    second = await carriers.create(CarrierCreate(name="second"))
    third = await carriers.create(CarrierCreate(name="third"))

    listed = [c.id for c in await carriers.list()]
    assert listed == [third, second, first]


async def test_get_missing_raises_not_found(carriers) -> None:
    with pytest.raises(NotFoundError, match="Carrier 7 not found"):
        await carriers.get(7)


async def test_update_merges_omitted_fields(carriers) -> None:
    carrier_id = await carriers.create(
        CarrierCreate(name="中通快递", contact_person="李主管", phone="139")
    )

    await carriers.update(carrier_id, CarrierUpdate(phone="13900139000"))

    carrier = await carriers.get(carrier_id)
    assert carrier.name == "中通快递"
    assert carrier.contact_person == "李主管"
    assert carrier.phone == "13900139000"


async def test_update_blank_required_field_keeps_value(carriers) -> None:
    carrier_id = await carriers.create(CarrierCreate(name="圆通速递"))

    await carriers.update(carrier_id, CarrierUpdate(name=""))

    assert (await carriers.get(carrier_id)).name == "圆通速递"


async def test_update_optional_field_tri_state(addresses) -> None:
    address_id = await addresses.create(
        AddressCreate(
            recipient_name="赵先生",
            contact_person="王五",
            recipient_phone="18655556666",
            recipient_address="深圳市南山区科技园路100号",
        )
    )

    # Omitted: keep.
    await addresses.update(address_id, AddressUpdate(recipient_name="赵总"))
    address = await addresses.get(address_id)
    assert address.recipient_name == "赵总"
    assert address.contact_person == "王五"

    # Explicit null: clear.
    await addresses.update(address_id, AddressUpdate(contact_person=None))
    assert (await addresses.get(address_id)).contact_person == ""

    # Value: replace.
    await addresses.update(address_id, AddressUpdate(contact_person="陈七"))
    assert (await addresses.get(address_id)).contact_person == "陈七"


async def test_update_missing_raises_not_found(senders) -> None:
    with pytest.raises(NotFoundError):
        await senders.update(3, SenderUpdate(name="x"))


async def test_delete_unreferenced_removes_row(carriers) -> None:
    carrier_id = await carriers.create(CarrierCreate(name="申通快递"))

    await carriers.delete(carrier_id)

    assert await carriers.list() == []
    with pytest.raises(NotFoundError):
        await carriers.get(carrier_id)


async def test_delete_missing_raises_not_found(addresses) -> None:
    with pytest.raises(NotFoundError):
        await addresses.delete(1)


@pytest.mark.parametrize(
    ("registry_name", "key"),
    [
        ("carriers", "carrier_id"),
        ("senders", "sender_id"),
        ("addresses", "address_id"),
    ],
)
async def test_delete_referenced_row_is_blocked(
    request, references, ledger, registry_name, key
) -> None:
    registry = request.getfixturevalue(registry_name)
    await ledger.create(shipment_payload(references))

    with pytest.raises(ConflictError, match="1 shipment"):
        await registry.delete(references[key])

    # Still there.
    assert (await registry.get(references[key])).id == references[key]


async def test_count_references(references, ledger, carriers) -> None:
    await ledger.create(shipment_payload(references, "SF1"))
    await ledger.create(shipment_payload(references, "SF2"))

    assert await carriers.count_references(references["carrier_id"]) == 2
    assert await carriers.count_references(999) == 0


async def test_get_out_of_range_id_is_not_found(carriers) -> None:
    with pytest.raises(NotFoundError):
        await carriers.get(2**70)
