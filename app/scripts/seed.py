import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.core.config import settings
from app.core.db import json_dumps
from app.core.security import hash_password
from app.models.hotel import Hotel, HotelStatus, NearbyPlace, RoomType
from app.models.user import User, UserRole

log = logging.getLogger(__name__)

DEMO_PASSWORD = "123456"

HOTELS = [
    {
        "name_cn": "上海外滩华尔道夫酒店", "name_en": "Waldorf Astoria Shanghai on the Bund",
        "city": "上海", "address": "上海市黄浦区中山东一路2号", "star": 5, "opening_date": "2010-01-01",
        "description": "坐落于外滩标志性建筑群中，尽享黄浦江畔壮丽景色。",
        "tags": ["豪华", "江景", "历史建筑"], "facilities": ["免费WiFi", "游泳池", "健身房", "餐厅", "SPA"],
        "rooms": [
            {"name": "豪华大床房", "price": 1688, "original_price": 1988, "capacity": 2, "breakfast": True},
            {"name": "外滩景观双床房", "price": 2188, "original_price": 2588, "capacity": 2, "breakfast": True},
            {"name": "总统套房", "price": 8888, "original_price": None, "capacity": 4, "breakfast": True},
        ],
        "nearby": [
            {"type": "attraction", "name": "外滩", "distance": "100米"},
            {"type": "transport", "name": "南京东路地铁站", "distance": "500米"},
            {"type": "mall", "name": "南京路步行街", "distance": "300米"},
        ],
        "status": HotelStatus.approved,
    },
    {
        "name_cn": "北京王府井文华东方酒店", "name_en": "Mandarin Oriental Wangfujing Beijing",
        "city": "北京", "address": "北京市东城区王府井大街269号", "star": 5, "opening_date": "2019-03-15",
        "description": "位于繁华的王府井商业区，融合传统中式风格与现代奢华。",
        "tags": ["豪华", "城景", "新开业"], "facilities": ["免费WiFi", "游泳池", "健身房", "商务中心"],
        "rooms": [
            {"name": "精致大床房", "price": 1488, "original_price": 1788, "capacity": 2, "breakfast": False},
            {"name": "文华套房", "price": 3288, "original_price": None, "capacity": 3, "breakfast": True},
        ],
        "nearby": [
            {"type": "attraction", "name": "故宫博物院", "distance": "800米"},
            {"type": "transport", "name": "王府井地铁站", "distance": "200米"},
        ],
        "status": HotelStatus.approved,
    },
    {
        "name_cn": "杭州西湖国宾馆", "name_en": "West Lake State Guest House",
        "city": "杭州", "address": "杭州市西湖区杨公堤18号", "star": 5, "opening_date": "1958-06-01",
        "description": "深藏西湖西岸，独享西湖美景。",
        "tags": ["豪华", "湖景", "亲子"], "facilities": ["免费WiFi", "餐厅", "花园", "免费停车场"],
        "rooms": [
            {"name": "园景标准间", "price": 988, "original_price": 1188, "capacity": 2, "breakfast": True},
            {"name": "湖景大床房", "price": 1588, "original_price": 1888, "capacity": 2, "breakfast": True},
        ],
        "nearby": [
            {"type": "attraction", "name": "西湖", "distance": "50米"},
            {"type": "transport", "name": "杭州站", "distance": "5公里"},
        ],
        "status": HotelStatus.pending,
    },
    {
        "name_cn": "成都瑞吉酒店", "name_en": "The St. Regis Chengdu",
        "city": "成都", "address": "成都市锦江区红星路三段1号", "star": 5, "opening_date": "2014-09-01",
        "description": "位于成都市中心，毗邻春熙路商圈。",
        "tags": ["豪华", "商务"], "facilities": ["免费WiFi", "健身房", "餐厅"],
        "rooms": [
            {"name": "豪华客房", "price": 1088, "original_price": 1288, "capacity": 2, "breakfast": False},
        ],
        "nearby": [
            {"type": "mall", "name": "春熙路", "distance": "600米"},
        ],
        "status": HotelStatus.draft,
    },
]


async def main():
    logging.basicConfig(level=settings.log_level)
    engine = create_async_engine(settings.database_url, pool_pre_ping=True, json_serializer=json_dumps)
    Session = async_sessionmaker(engine, expire_on_commit=False)

    async with Session() as db:
        count = (await db.execute(select(func.count(Hotel.id)))).scalar_one()
        if count:
            log.info("hotels table not empty (%d rows), skipping seed", count)
        else:
            admin = User(username="admin", password_hash=hash_password(DEMO_PASSWORD), role=UserRole.admin)
            merchant = User(username="merchant", password_hash=hash_password(DEMO_PASSWORD), role=UserRole.merchant)
            db.add_all([admin, merchant])
            await db.flush()

            for data in HOTELS:
                db.add(Hotel(
                    merchant_id=merchant.id,
                    name_cn=data["name_cn"],
                    name_en=data["name_en"],
                    city=data["city"],
                    address=data["address"],
                    star=data["star"],
                    opening_date=data["opening_date"],
                    description=data["description"],
                    tags=data["tags"],
                    facilities=data["facilities"],
                    images=[],
                    status=data["status"],
                    reject_reason="",
                    room_types=[RoomType(images=[], **r) for r in data["rooms"]],
                    nearby_places=[NearbyPlace(**p) for p in data["nearby"]],
                ))
            await db.commit()
            log.info("seeded 2 users and %d hotels", len(HOTELS))

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
# Seeds demo admin/merchant accounts and a handful of hotels into an empty database.
