#!/usr/bin/env python
from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from billed.application import NewBillController
from billed.core import form_fields
from billed.core.logging import configure_logging
from billed.core.schema import User
from billed.domain import FileInput, FormState, SelectedFile
from billed.infrastructure import HttpStoreClient, InMemoryStore, LocalStorageSession


async def run(args: argparse.Namespace) -> int:
    storage = {"user": User(email=args.email).model_dump_json()}
    store = HttpStoreClient(args.api_url, token=args.token) if args.api_url else InMemoryStore()
    navigation: list[str] = []

    controller = NewBillController(
        store=store,
        session=LocalStorageSession(storage),
        navigate=navigation.append,
        alert=lambda message: print(message, file=sys.stderr),
    )

    path = Path(args.file)
    selected = SelectedFile(
        name=path.name,
        content_type=mimetypes.guess_type(path.name)[0],
        content=path.read_bytes(),
    )
    try:
        upload = controller.handle_change_file(FileInput.with_file(selected))
        if upload is None:
            return 1
        await upload
        if controller.state is not FormState.UPLOADED:
            print(f"Échec du téléversement de {path.name}", file=sys.stderr)
            return 1

        await controller.handle_submit(
            {
                form_fields.EXPENSE_TYPE: args.type,
                form_fields.EXPENSE_NAME: args.name,
                form_fields.DATEPICKER: args.date,
                form_fields.AMOUNT: args.amount,
                form_fields.VAT: args.vat,
                form_fields.PCT: args.pct,
                form_fields.COMMENTARY: args.commentary,
            }
        )
    finally:
        if isinstance(store, HttpStoreClient):
            await store.aclose()

    if not navigation:
        print("La note de frais n'a pas été enregistrée", file=sys.stderr)
        return 1
    print(f"Note de frais {controller.bill_id} envoyée, redirection vers {navigation[-1]}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Envoyer une note de frais avec son justificatif")
    parser.add_argument("--email", required=True, help="Adresse e-mail de l'employé")
    parser.add_argument("--file", required=True, help="Justificatif (.jpg, .jpeg ou .png)")
    parser.add_argument("--type", default="Transports", help="Type de dépense")
    parser.add_argument("--name", default="", help="Nom de la dépense")
    parser.add_argument("--date", required=True, help="Date, format YYYY-MM-DD")
    parser.add_argument("--amount", required=True, help="Montant TTC")
    parser.add_argument("--vat", default="", help="Montant de TVA")
    parser.add_argument("--pct", default="", help="Taux de TVA en %% (20 par défaut)")
    parser.add_argument("--commentary", default="", help="Commentaire")
    parser.add_argument("--api-url", default=None, help="URL de l'API (magasin en mémoire sinon)")
    parser.add_argument("--token", default=None, help="Jeton d'authentification de l'API")
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
