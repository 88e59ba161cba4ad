"""
demo.py – One-shot showcase of dynattrs.

Uses $DYNATTRS_DATABASE_URL (or a local SQLite file).
"""

from pprint import pprint

from sqlalchemy import Column, DateTime, Integer, String

from dynattrs.persistence.models import now_utc
from dynattrs import Base, DynAttrs, DynamicRecord, blob_column, has_dynamic_attributes, on

from dotenv import load_dotenv

load_dotenv()


# ────────────────────────────────── 1. Concrete records ─────────────────────────────────
@has_dynamic_attributes
class User(DynamicRecord, Base):
    __tablename__ = "demo_users"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    dynamic_attributes = blob_column()


@has_dynamic_attributes("about", "age", "middle_name", column_name="data")
class Profile(DynamicRecord, Base):
    __tablename__ = "demo_profiles"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    data = blob_column()


# ────────────────────────────────── 2. Hooks ───────────────────────────────────────────
@on.after_save(User, Profile)
def announce(record) -> None:
    print(f"✓ saved {type(record).__name__} #{record.id}")


def main() -> None:
    DynAttrs.init()

    user = User(name="Joel Moss", home_town="Chorley")
    user.favourite_colour = "green"
    user.save()

    latest = User.last()
    print(f"\n{latest.name} lives in {latest.home_town}")
    pprint(latest.decoded_dynamic_attributes())

    profile = Profile.create(name="Joel Moss", about="stuff about me", age=33)
    try:
        profile.address = "My address"
    except AttributeError as exc:
        print(f"✗ {exc}")
    pprint(profile.reload().decoded_dynamic_attributes())

    DynAttrs.shutdown()


if __name__ == "__main__":
    main()
