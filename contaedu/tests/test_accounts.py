"""
Tests for the chart of accounts endpoints and CSV export.
"""

from contaedu.app.domain.coursework.chart_export import group_name, natural_key, render_accounts_csv
from contaedu.app.models.account import Account
from contaedu.app.models.enums import AccountType
from contaedu.tests.factories import auth_headers


def system_account(code, name, account_type):
    return Account(code=code, name=name, account_type=account_type, is_system=True)


async def seed_chart(db_session):
    db_session.add_all([
        system_account("572", "Bancos e instituciones de crédito", AccountType.ASSET),
        system_account("100", "Capital social", AccountType.EQUITY),
        system_account("4000", "Proveedores (euros)", AccountType.LIABILITY),
        system_account("57", "Tesorería", AccountType.ASSET),
        system_account("700", "Ventas de mercaderías", AccountType.INCOME),
    ])
    await db_session.commit()


def test_natural_code_order():
    codes = ["572", "100", "4000", "57", "700", "9"]

    assert sorted(codes, key=natural_key) == ["9", "57", "100", "572", "700", "4000"]


def test_group_names():
    assert group_name("572") == "Cuentas Financieras"
    assert group_name("129") == "Financiación Básica"
    assert group_name("800") == "Otros"


def test_csv_layout():
    content = render_accounts_csv([
        system_account("700", 'Ventas "al contado"', AccountType.INCOME),
        system_account("57", "Tesorería", AccountType.ASSET),
    ])

    assert content.startswith("\ufeff")
    lines = content.lstrip("\ufeff").splitlines()
    assert lines[0] == "Código;Nombre;Tipo;Grupo"
    assert lines[1] == '"57";"Tesorería";"Activo";"Cuentas Financieras"'
    assert lines[2] == '"700";"Ventas ""al contado""";"Ingreso";"Ventas e Ingresos"'


async def test_student_sees_system_and_own_accounts(client, classroom, db_session):
    await seed_chart(db_session)
    headers = auth_headers(classroom["student"])

    created = await client.post(
        "/v1/accounts",
        json={"code": "5720001", "name": "Banco Sabadell", "account_type": "ASSET"},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["is_system"] is False

    mine = await client.get("/v1/accounts", headers=headers)
    assert [a["code"] for a in mine.json()] == ["57", "100", "572", "700", "4000", "5720001"]

    theirs = await client.get("/v1/accounts", headers=auth_headers(classroom["classmate"]))
    assert "5720001" not in [a["code"] for a in theirs.json()]


async def test_duplicate_code_is_rejected(client, classroom, db_session):
    await seed_chart(db_session)

    response = await client.post(
        "/v1/accounts",
        json={"code": "572", "name": "Otro banco", "account_type": "ASSET"},
        headers=auth_headers(classroom["student"]),
    )

    assert response.status_code == 400


async def test_system_accounts_cannot_be_deleted(client, classroom, db_session):
    await seed_chart(db_session)
    listing = await client.get("/v1/accounts", headers=auth_headers(classroom["student"]))
    system_id = listing.json()[0]["id"]

    response = await client.delete(f"/v1/accounts/{system_id}", headers=auth_headers(classroom["student"]))

    assert response.status_code == 404


async def test_csv_download(client, classroom, db_session):
    await seed_chart(db_session)

    response = await client.get("/v1/accounts/download", headers=auth_headers(classroom["teacher"]))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="plan_de_cuentas.csv"' in response.headers["content-disposition"]
    body = response.content.decode("utf-8")
    assert body.startswith("\ufeff")
    rows = body.lstrip("\ufeff").splitlines()
    assert [row.split(";")[0] for row in rows[1:]] == ['"57"', '"100"', '"572"', '"700"', '"4000"']
