from alembic import op
import sqlalchemy as sa

revision = "0001_users_hotels"
down_revision = None
branch_labels = None
depends_on = None

HOTEL_STATUSES = ("draft", "pending", "approved", "rejected", "offline")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=80), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="merchant"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("role IN ('merchant', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "hotels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("merchant_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),

        sa.Column("name_cn", sa.String(length=200), nullable=False),
        sa.Column("name_en", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("city", sa.String(length=80), nullable=False),
        sa.Column("address", sa.String(length=300), nullable=False),
        sa.Column("star", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("opening_date", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),

        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("facilities", sa.JSON(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),

        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("reject_reason", sa.Text(), nullable=False, server_default=""),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in HOTEL_STATUSES) + ")",
            name="ck_hotels_status",
        ),
    )
    op.create_index("ix_hotels_merchant_id", "hotels", ["merchant_id"])
    op.create_index("ix_hotels_city", "hotels", ["city"])
    op.create_index("ix_hotels_status", "hotels", ["status"])
    op.create_index("ix_hotels_updated_at", "hotels", ["updated_at"])

    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("hotel_id", sa.Integer(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("original_price", sa.Float(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("breakfast", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("images", sa.JSON(), nullable=False),
    )
    op.create_index("ix_room_types_hotel_id", "room_types", ["hotel_id"])

    op.create_table(
        "nearby_places",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("hotel_id", sa.Integer(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("distance", sa.String(length=40), nullable=False),
    )
    op.create_index("ix_nearby_places_hotel_id", "nearby_places", ["hotel_id"])


def downgrade():
    op.drop_index("ix_nearby_places_hotel_id", table_name="nearby_places")
    op.drop_table("nearby_places")
    op.drop_index("ix_room_types_hotel_id", table_name="room_types")
    op.drop_table("room_types")
    op.drop_index("ix_hotels_updated_at", table_name="hotels")
    op.drop_index("ix_hotels_status", table_name="hotels")
    op.drop_index("ix_hotels_city", table_name="hotels")
    op.drop_index("ix_hotels_merchant_id", table_name="hotels")
    op.drop_table("hotels")
    op.drop_table("users")
