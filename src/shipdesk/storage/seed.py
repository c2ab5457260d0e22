"""Demo reference data for a fresh installation."""

from __future__ import annotations

import logging

from sqlalchemy import func, insert, select

from shipdesk.storage.gateway import Database
from shipdesk.storage.models import Address, Carrier, Sender

logger = logging.getLogger(__name__)

DEMO_CARRIERS = [
    {
        "name": "顺丰速运",
        "contact_person": "张经理",
        "phone": "13800138000",
        "address": "北京市朝阳区顺丰总部",
    },
    {
        "name": "中通快递",
        "contact_person": "李主管",
        "phone": "13900139000",
        "address": "上海市青浦区中通总部",
    },
    {
        "name": "圆通速递",
        "contact_person": "王经理",
        "phone": "13700137000",
        "address": "广东省深圳市圆通大厦",
    },
    {
        "name": "韵达快递",
        "contact_person": "赵经理",
        "phone": "13600136000",
        "address": "浙江省杭州市韵达园区",
    },
    {
        "name": "申通快递",
        "contact_person": "钱经理",
        "phone": "13500135000",
        "address": "江苏省南京市申通大楼",
    },
]

DEMO_SENDERS = [
    {
        "name": "鑫达公司",
        "phone": "010-12345678",
        "address": "北京市海淀区新技术大厦",
    },
    {
        "name": "仓库一部",
        "phone": "010-87654321",
        "address": "北京市朝阳区仓库路1号",
    },
    {
        "name": "总部发货点",
        "phone": "010-11223344",
        "address": "北京市西城区总部大街88号",
    },
]

DEMO_ADDRESSES = [
    {
        "recipient_name": "李先生",
        "contact_person": "张三",
        "recipient_phone": "18611112222",
        "recipient_address": "上海市浦东新区陆家嘴环路1000号",
    },
    {
        "recipient_name": "王女士",
        "contact_person": "李四",
        "recipient_phone": "18633334444",
        "recipient_address": "广州市天河区体育西路189号",
    },
    {
        "recipient_name": "赵先生",
        "contact_person": "王五",
        "recipient_phone": "18655556666",
        "recipient_address": "深圳市南山区科技园路100号",
    },
]


async def seed_demo_data(db: Database) -> int:
    """Fill empty reference tables with demo rows.

    Tables that already hold rows are left alone. Returns the number of
    rows inserted.
    """
    inserted = 0
    async with db.exclusive():
        for model, rows in (
            (Carrier, DEMO_CARRIERS),
            (Sender, DEMO_SENDERS),
            (Address, DEMO_ADDRESSES),
        ):
            count = await db.query_one(
                select(func.count().label("count")).select_from(model)
            )
            if count is None or count["count"] > 0:
                continue
            for row in rows:
                result = await db.execute(
                    insert(model.__table__).values(**row)
                )
                inserted += result.rows_affected
        if inserted:
            await db.persist()

    if inserted:
        logger.info("Seeded %d demo reference row(s)", inserted)
    return inserted
