"""Utility script to create the tables and seed system roles with their grants."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from roles_admin.application.use_cases.roles import create_role, grant_role
from roles_admin.domain.exceptions import RolesError
from roles_admin.infrastructure.database import get_session_factory, initialize_database
from roles_admin.infrastructure.repositories import RoleRepository


def parse_role(value: str) -> tuple[str, str | None]:
    name, separator, description = value.partition(":")
    if not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid role {value!r}, expected NAME[:DESCRIPTION]")
    return name.strip(), (description.strip() or None) if separator else None


def parse_grant(value: str) -> tuple[str, str]:
    role, separator, target = value.partition("=")
    if not separator or not role.strip() or not target.strip():
        raise argparse.ArgumentTypeError(f"Invalid grant {value!r}, expected ROLE=TARGET")
    return role.strip(), target.strip()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for seeding roles."""

    parser = argparse.ArgumentParser(
        description="Create the role tables and seed system roles and grants.",
    )
    parser.add_argument(
        "--role",
        action="append",
        default=[],
        type=parse_role,
        metavar="NAME[:DESCRIPTION]",
        help="System role to create when missing (repeatable)",
    )
    parser.add_argument(
        "--grant",
        action="append",
        default=[],
        type=parse_grant,
        metavar="ROLE=TARGET",
        help="Make ROLE inherit TARGET, both given by name (repeatable)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Seed the roles and grants given on the command line."""

    args = parse_args(argv)
    initialize_database()

    session = get_session_factory()()
    try:
        repository = RoleRepository(session)
        for name, description in args.role:
            if repository.get_by_name(name) is not None:
                print(f"Role {name} already exists, skipped")
                continue
            role = create_role(session, name=name, description=description)
            print(f"Created role {role.name} with UUID {role.uuid}")

        for role_name, target_name in args.grant:
            role = repository.get_by_name(role_name)
            target = repository.get_by_name(target_name)
            if role is None or target is None:
                missing = role_name if role is None else target_name
                raise SystemExit(f"Cannot grant {target_name} to {role_name}: unknown role {missing}")
            change = grant_role(session, role_uuid=role.uuid, granted_role_uuid=target.uuid)
            state = "granted" if change.changed else "already granted"
            print(f"Role {target.name} {state} to {role.name}")
    except RolesError as exc:
        raise SystemExit(f"Could not seed the roles: {exc.message}") from exc
    except SQLAlchemyError as exc:
        raise SystemExit(f"Error while saving the roles: {exc}") from exc
    finally:
        session.close()


if __name__ == "__main__":
    main()
