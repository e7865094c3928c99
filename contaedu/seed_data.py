"""
Database seeding script for a demo classroom.

Creates an administrator, a teacher with two courses and three students,
the Plan General Contable system accounts and three exercises assigned
to the first course. Run this script after the database is set up
(start the API once so the tables exist) and issue tokens for the
seeded users with scripts/issue_token.py.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from contaedu.app.db.session import AsyncSessionLocal
from contaedu.app.models.user import User
from contaedu.app.models.course import Course
from contaedu.app.models.account import Account
from contaedu.app.models.exercise import Exercise, CourseExercise
from contaedu.app.models.school_year import SchoolYear, SystemConfig
from contaedu.app.models.enums import UserRole, AccountType, ExerciseType, TaxRegime
from sqlalchemy import select

PGC_ACCOUNTS = [
    ("100", "Capital social", AccountType.EQUITY),
    ("112", "Reserva legal", AccountType.EQUITY),
    ("129", "Resultado del ejercicio", AccountType.EQUITY),
    ("170", "Deudas a largo plazo con entidades de crédito", AccountType.LIABILITY),
    ("173", "Proveedores de inmovilizado a largo plazo", AccountType.LIABILITY),
    ("200", "Investigación", AccountType.ASSET),
    ("206", "Aplicaciones informáticas", AccountType.ASSET),
    ("210", "Terrenos y bienes naturales", AccountType.ASSET),
    ("211", "Construcciones", AccountType.ASSET),
    ("213", "Maquinaria", AccountType.ASSET),
    ("216", "Mobiliario", AccountType.ASSET),
    ("217", "Equipos para procesos de información", AccountType.ASSET),
    ("218", "Elementos de transporte", AccountType.ASSET),
    ("281", "Amortización acumulada del inmovilizado material", AccountType.ASSET),
    ("300", "Mercaderías", AccountType.ASSET),
    ("310", "Materias primas", AccountType.ASSET),
    ("400", "Proveedores", AccountType.LIABILITY),
    ("410", "Acreedores por prestaciones de servicios", AccountType.LIABILITY),
    ("430", "Clientes", AccountType.ASSET),
    ("431", "Clientes, efectos comerciales a cobrar", AccountType.ASSET),
    ("440", "Deudores", AccountType.ASSET),
    ("465", "Remuneraciones pendientes de pago", AccountType.LIABILITY),
    ("470", "Hacienda Pública, deudora por diversos conceptos", AccountType.ASSET),
    ("472", "Hacienda Pública, IVA soportado", AccountType.ASSET),
    ("475", "Hacienda Pública, acreedora por conceptos fiscales", AccountType.LIABILITY),
    ("476", "Organismos de la Seguridad Social, acreedores", AccountType.LIABILITY),
    ("477", "Hacienda Pública, IVA repercutido", AccountType.LIABILITY),
    ("520", "Deudas a corto plazo con entidades de crédito", AccountType.LIABILITY),
    ("523", "Proveedores de inmovilizado a corto plazo", AccountType.LIABILITY),
    ("570", "Caja, euros", AccountType.ASSET),
    ("572", "Bancos e instituciones de crédito c/c vista, euros", AccountType.ASSET),
    ("600", "Compras de mercaderías", AccountType.EXPENSE),
    ("601", "Compras de materias primas", AccountType.EXPENSE),
    ("602", "Compras de otros aprovisionamientos", AccountType.EXPENSE),
    ("606", "Descuentos sobre compras por pronto pago", AccountType.EXPENSE),
    ("608", "Devoluciones de compras y operaciones similares", AccountType.EXPENSE),
    ("610", "Variación de existencias de mercaderías", AccountType.EXPENSE),
    ("621", "Arrendamientos y cánones", AccountType.EXPENSE),
    ("622", "Reparaciones y conservación", AccountType.EXPENSE),
    ("623", "Servicios de profesionales independientes", AccountType.EXPENSE),
    ("625", "Primas de seguros", AccountType.EXPENSE),
    ("626", "Servicios bancarios y similares", AccountType.EXPENSE),
    ("627", "Publicidad, propaganda y relaciones públicas", AccountType.EXPENSE),
    ("628", "Suministros", AccountType.EXPENSE),
    ("629", "Otros servicios", AccountType.EXPENSE),
    ("630", "Impuesto sobre beneficios", AccountType.EXPENSE),
    ("640", "Sueldos y salarios", AccountType.EXPENSE),
    ("642", "Seguridad Social a cargo de la empresa", AccountType.EXPENSE),
    ("662", "Intereses de deudas", AccountType.EXPENSE),
    ("680", "Amortización del inmovilizado intangible", AccountType.EXPENSE),
    ("681", "Amortización del inmovilizado material", AccountType.EXPENSE),
    ("700", "Ventas de mercaderías", AccountType.INCOME),
    ("701", "Ventas de productos terminados", AccountType.INCOME),
    ("705", "Prestaciones de servicios", AccountType.INCOME),
    ("706", "Descuentos sobre ventas por pronto pago", AccountType.INCOME),
    ("708", "Devoluciones de ventas y operaciones similares", AccountType.INCOME),
    ("762", "Ingresos de créditos", AccountType.INCOME),
    ("769", "Otros ingresos financieros", AccountType.INCOME),
    ("771", "Beneficios procedentes del inmovilizado material", AccountType.INCOME),
]

EXERCISES = [
    (
        "Asiento de apertura",
        "Registra el asiento de apertura de una empresa con los siguientes datos: "
        "Capital social 50.000€, Bancos 30.000€, Mobiliario 15.000€, Equipos informáticos 5.000€.",
        ExerciseType.GUIDED,
    ),
    (
        "Compra de mercaderías con IVA",
        "La empresa ALFA, S.L. compra mercaderías por valor de 10.000€ + 21% IVA. "
        "El pago se realiza a 30 días. Registra el asiento correspondiente.",
        ExerciseType.PRACTICE,
    ),
    (
        "Venta de mercaderías",
        "Registra una venta de mercaderías por 8.000€ + 21% IVA. El cliente paga el 50% "
        "al contado por transferencia y el resto queda pendiente.",
        ExerciseType.PRACTICE,
    ),
]


async def seed_data():
    """
    Seed a demo classroom.

    Creates:
    - 1 ADMIN and 1 TEACHER
    - 2 school years (2024-2025 active) and 2 courses
    - 3 STUDENT users
    - the system chart of accounts and 3 exercises
    """
    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(select(User).where(User.username == "admin"))
        if result.scalar_one_or_none():
            print("ℹ️  ADMIN user already exists, skipping seeding")
            return

        admin = User(username="admin", full_name="Administrador General", role=UserRole.ADMIN)
        teacher = User(username="mgarcia", full_name="María García López", role=UserRole.TEACHER)
        db.add_all([admin, teacher])
        await db.flush()
        teacher.created_by = admin.id
        print("✅ Created ADMIN (admin) and TEACHER (mgarcia)")

        year = SchoolYear(name="2024-2025", active=True)
        db.add_all([year, SchoolYear(name="2025-2026", active=False)])
        db.add(SystemConfig(tax_regime=TaxRegime.IVA))
        await db.flush()

        course1 = Course(
            name="1º CFGM Gestión Administrativa",
            description="Ciclo formativo de grado medio en gestión administrativa",
            teacher_id=teacher.id,
            school_year_id=year.id,
            enrollment_code="GADM2024",
        )
        course2 = Course(
            name="2º CFGS Administración y Finanzas",
            description="Ciclo formativo de grado superior en administración y finanzas",
            teacher_id=teacher.id,
            school_year_id=year.id,
            enrollment_code="ADFI2024",
        )
        db.add_all([course1, course2])
        await db.flush()
        print("✅ Created 2 courses (enrollment codes GADM2024, ADFI2024)")

        db.add_all([
            User(username="jperez", full_name="Juan Pérez Martínez", role=UserRole.STUDENT,
                 course_id=course1.id, created_by=teacher.id),
            User(username="alopez", full_name="Ana López Fernández", role=UserRole.STUDENT,
                 course_id=course1.id, created_by=teacher.id),
            User(username="cmartin", full_name="Carlos Martín Ruiz", role=UserRole.STUDENT,
                 course_id=course2.id, created_by=teacher.id),
        ])
        print("✅ Created STUDENT users (jperez, alopez, cmartin)")

        db.add_all([
            Account(code=code, name=name, account_type=account_type, is_system=True)
            for code, name, account_type in PGC_ACCOUNTS
        ])
        print(f"✅ Created {len(PGC_ACCOUNTS)} system accounts")

        exercises = [
            Exercise(title=title, description=description, exercise_type=exercise_type, teacher_id=teacher.id)
            for title, description, exercise_type in EXERCISES
        ]
        db.add_all(exercises)
        await db.flush()
        db.add_all([CourseExercise(course_id=course1.id, exercise_id=exercise.id) for exercise in exercises])
        print(f"✅ Created {len(exercises)} exercises assigned to {course1.name}")

        await db.commit()

        print("\n🎉 Seeding completed successfully!")
        print("\nIssue a development token with:")
        print("  python scripts/issue_token.py jperez")


if __name__ == "__main__":
    asyncio.run(seed_data())
