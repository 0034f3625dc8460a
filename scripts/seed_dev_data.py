"""Seed a development org chart: a faculty unit tree, an admin and a few users.

Units are created by code and skipped when the code already exists, so the
script can be re-run. Users are created unassigned (role sdm) except the admin.

Usage:
    python -m scripts.seed_dev_data [admin_password]

Requires: DATABASE_URL and SECRET_KEY (env or .env), existing schema
(alembic upgrade head, or DATABASE_AUTO_CREATE=true once).
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.domain.enums import UnitType, UserRole
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.models import Unit, User
from app.infrastructure.persistence.repositories import UnitRepository, UserRepository
from app.infrastructure.security.password import get_password_hash

# (code, name, type, role, parent code)
UNITS: list[tuple[str, str, UnitType, UserRole, str | None]] = [
    ("DEKAN", "Dekan", UnitType.UNIT, UserRole.DEKAN, None),
    ("WADEK_1", "Wakil Dekan I", UnitType.WADEK_I, UserRole.WADEK, "DEKAN"),
    ("WADEK_2", "Wakil Dekan II", UnitType.WADEK_II, UserRole.WADEK, "DEKAN"),
    ("BAKORDIK", "Badan Koordinasi Pendidikan", UnitType.UNIT, UserRole.UNIT, "WADEK_1"),
    ("KA_PRODI_PPDS", "Unit PPDS", UnitType.UNIT, UserRole.UNIT, "BAKORDIK"),
    ("KA_PRODI_PSKD", "Unit PSKd", UnitType.UNIT, UserRole.UNIT, "BAKORDIK"),
    ("KA_PRODI_PSPD", "Unit PSPD", UnitType.UNIT, UserRole.UNIT, "BAKORDIK"),
    ("KA_PRODI_GIZI", "Ka. Prodi Gizi", UnitType.UNIT, UserRole.UNIT, "WADEK_1"),
    ("KABAG_TU", "Kabag. TU", UnitType.UNIT, UserRole.UNIT, "WADEK_1"),
    ("UNIT_AKADEMIK", "Unit Akademik", UnitType.UNIT, UserRole.UNIT, "WADEK_2"),
    ("UNIT_PERPUSTAKAAN", "Unit Perpustakaan", UnitType.UNIT, UserRole.UNIT, "WADEK_2"),
    ("UNIT_TI", "Unit TI", UnitType.UNIT, UserRole.UNIT, "WADEK_2"),
    ("SDM", "Sumber Daya Manusia", UnitType.SDM, UserRole.SDM, "WADEK_2"),
]

# (name, email, username, employee_id)
STAFF: list[tuple[str, str, str, str]] = [
    ("Staff One", "staff1@example.com", "staff1", "EMP-001"),
    ("Staff Two", "staff2@example.com", "staff2", "EMP-002"),
    ("Staff Three", "staff3@example.com", "staff3", "EMP-003"),
]

DEFAULT_STAFF_PASSWORD = "Password123!"


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


async def seed(admin_password: str) -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            unit_repo = UnitRepository(session)
            user_repo = UserRepository(session)

            ids_by_code: dict[str, int] = {}
            created_units = 0
            for code, name, unit_type, role, parent_code in UNITS:
                existing = await unit_repo.get_by_code(code)
                if existing:
                    ids_by_code[code] = existing.id
                    continue
                unit = await unit_repo.create(
                    Unit(
                        code=code,
                        name=name,
                        type=unit_type.value,
                        role=role.value,
                        parent_unit_id=ids_by_code.get(parent_code) if parent_code else None,
                        is_active=True,
                    )
                )
                ids_by_code[code] = unit.id
                created_units += 1
            print(f"Units: {created_units} created, {len(UNITS) - created_units} existing")

            if not await user_repo.get_by_email("admin@example.com"):
                await user_repo.create(
                    User(
                        name="Administrator",
                        email="admin@example.com",
                        username="admin",
                        hashed_password=await asyncio.to_thread(
                            get_password_hash, admin_password
                        ),
                        role=UserRole.ADMIN.value,
                        is_active=True,
                    )
                )
                print(f"Admin: admin@example.com / {admin_password}")

            staff_hash = await asyncio.to_thread(get_password_hash, DEFAULT_STAFF_PASSWORD)
            for name, email, username, employee_id in STAFF:
                if await user_repo.get_by_email(email):
                    continue
                await user_repo.create(
                    User(
                        name=name,
                        email=email,
                        username=username,
                        employee_id=employee_id,
                        hashed_password=staff_hash,
                        role=UserRole.SDM.value,
                        is_active=True,
                    )
                )
                print(f"Staff: {email} / {DEFAULT_STAFF_PASSWORD}")


async def main() -> None:
    load_dotenv(_project_root() / ".env")
    admin_password = sys.argv[1] if len(sys.argv) > 1 else "Admin123!"
    try:
        await seed(admin_password)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
