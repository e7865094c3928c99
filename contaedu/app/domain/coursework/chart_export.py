"""
Chart of accounts CSV export (plan de cuentas).

Semicolon-separated, UTF-8 with BOM, rows in natural code order.
"""

import csv
import io
import re
from typing import Iterable, List

from contaedu.app.models.account import Account
from contaedu.app.models.enums import AccountType

EXPORT_FILENAME = "plan_de_cuentas.csv"
BOM = "\ufeff"
HEADER = ["Código", "Nombre", "Tipo", "Grupo"]

TYPE_LABELS = {
    AccountType.ASSET: "Activo",
    AccountType.LIABILITY: "Pasivo",
    AccountType.EQUITY: "Patrimonio Neto",
    AccountType.INCOME: "Ingreso",
    AccountType.EXPENSE: "Gasto",
}

GROUP_NAMES = {
    "1": "Financiación Básica",
    "2": "Activo No Corriente",
    "3": "Existencias",
    "4": "Acreedores y Deudores",
    "5": "Cuentas Financieras",
    "6": "Compras y Gastos",
    "7": "Ventas e Ingresos",
}


def natural_key(code: str) -> List:
    """Sort key that orders digit runs numerically ("57" < "100" < "572")."""
    return [(0, int(part), "") if part.isdigit() else (1, 0, part) for part in re.split(r"(\d+)", code) if part]


def group_name(code: str) -> str:
    return GROUP_NAMES.get(code[:1], "Otros")


def render_accounts_csv(accounts: Iterable[Account]) -> str:
    buffer = io.StringIO()
    buffer.write(BOM)
    buffer.write(";".join(HEADER) + "\n")
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_ALL, lineterminator="\n")
    for account in sorted(accounts, key=lambda a: natural_key(a.code)):
        writer.writerow([
            account.code,
            account.name,
            TYPE_LABELS.get(account.account_type, str(account.account_type)),
            group_name(account.code),
        ])
    return buffer.getvalue()
