"""Utility script to register a recipient in the local directory."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from listing_alerts.domain.entities import SUPPORTED_PLATFORMS
from listing_alerts.infrastructure.database import SessionLocal, initialize_database
from listing_alerts.infrastructure.repositories import RecipientRepository
from listing_alerts.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for recipient creation."""

    parser = argparse.ArgumentParser(
        description="Create a recipient that will receive listing alerts.",
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Nombre del destinatario (opcional)",
    )
    parser.add_argument(
        "--platform",
        choices=SUPPORTED_PLATFORMS,
        default=None,
        help="Plataforma del dispositivo del destinatario (opcional)",
    )
    parser.add_argument(
        "--token",
        action="append",
        default=[],
        help="Token push del dispositivo. Puede repetirse para varios dispositivos.",
    )
    parser.add_argument(
        "--print-access-token",
        action="store_true",
        help="Imprime un token de acceso firmado para probar la API.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a recipient using the provided command line arguments."""

    args = parse_args()

    initialize_database()

    session = SessionLocal()
    try:
        recipient = RecipientRepository(session).create(
            name=args.name,
            platform=args.platform,
            device_tokens=args.token,
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Error al guardar el destinatario en la base de datos: {exc}") from exc
    else:
        print(
            "Destinatario creado exitosamente:\n"
            f"  ID: {recipient.id}\n"
            f"  Nombre: {recipient.name or '-'}\n"
            f"  Plataforma: {recipient.platform or '-'}\n"
            f"  Tokens: {len(recipient.device_tokens)}"
        )
        if args.print_access_token:
            print(f"  Access token: {create_access_token(recipient.id)}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
